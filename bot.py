"""
Main Discord bot entry for the custom games lobby bot.
"""

import logging


# Configure logging BEFORE importing discord to prevent duplicate handlers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,  # Override any existing handlers (e.g., from discord.py)
)
logger = logging.getLogger("lobby_bot")


# Suppress PyNaCl warning since voice support isn't needed
class _PyNaClFilter(logging.Filter):
    """Filter out the PyNaCl warning from discord.py."""

    def filter(self, record):
        return "PyNaCl is not installed" not in record.getMessage()


# Apply filter to discord.client logger to suppress PyNaCl warning
logging.getLogger("discord.client").addFilter(_PyNaClFilter())

# Now import discord after logging is configured
import discord
from discord.app_commands.errors import TransformerError
from discord.ext import commands

# Remove any handlers discord.py added to prevent duplicate output
# discord.py adds its own handler to the 'discord' logger on import
_discord_logger = logging.getLogger("discord")
_discord_logger.handlers.clear()  # Remove discord.py's default handler
_discord_logger.setLevel(logging.INFO)  # Ensure it logs at INFO level

from config import (
    DEBUG_GUILD_ID,
    DISCORD_BOT_TOKEN,
    LOBBY_DEFAULT_MAX_SIZE,
    LOBBY_HOST_AUTO_JOIN,
    LOBBY_IDLE_RENEW,
    LOBBY_IDLE_TIMEOUT_SECONDS,
    MAP_DATABASE_PATH,
    MAPVOTE_CANDIDATE_COUNT,
    MAPVOTE_FILTER_TIMEOUT_SECONDS,
    MAPVOTE_SELECTION_TIMEOUT_SECONDS,
    MAPVOTE_WINDOW_SECONDS,
)
from infrastructure.service_container import ServiceConfig, ServiceContainer

intents = discord.Intents.default()
intents.members = True  # /host resolves members by mention

bot = commands.Bot(command_prefix="!", intents=intents)

_container: ServiceContainer | None = None

EXTENSIONS = [
    "commands.lobby",
    "commands.mapvote",
]


def _build_config() -> ServiceConfig:
    return ServiceConfig(
        lobby_default_max_size=LOBBY_DEFAULT_MAX_SIZE,
        lobby_idle_timeout_seconds=LOBBY_IDLE_TIMEOUT_SECONDS,
        lobby_idle_renew=LOBBY_IDLE_RENEW,
        lobby_host_auto_join=LOBBY_HOST_AUTO_JOIN,
        map_database_path=MAP_DATABASE_PATH,
        mapvote_selection_timeout_seconds=MAPVOTE_SELECTION_TIMEOUT_SECONDS,
        mapvote_filter_timeout_seconds=MAPVOTE_FILTER_TIMEOUT_SECONDS,
        mapvote_window_seconds=MAPVOTE_WINDOW_SECONDS,
        mapvote_candidate_count=MAPVOTE_CANDIDATE_COUNT,
    )


def _init_services():
    """Build the service container once and hang its services off the bot."""
    global _container

    if _container is not None:
        return

    _container = ServiceContainer(_build_config())
    _container.initialize()
    _container.expose_to_bot(bot)


async def _load_extensions():
    """Load the lobby and map vote cogs. Already-loaded ones are skipped."""
    failed = []
    for ext in EXTENSIONS:
        if ext in bot.extensions:
            logger.debug(f"Extension {ext} already loaded, skipping")
            continue
        try:
            await bot.load_extension(ext)
            logger.info(f"Loaded extension: {ext}")
        except Exception as exc:
            failed.append(ext)
            logger.error(f"Failed to load extension {ext}: {exc}", exc_info=True)

    if failed:
        logger.warning(f"Extensions failed to load: {', '.join(failed)}")


@bot.event
async def setup_hook():
    _init_services()
    await _load_extensions()


@bot.event
async def on_ready():
    """Sync slash commands, to the debug guild when one is configured."""
    command_names = sorted(command.name for command in bot.tree.walk_commands())
    logger.info(f"{bot.user} connected to {len(bot.guilds)} guild(s). Commands: {command_names}")

    try:
        if DEBUG_GUILD_ID:
            guild = discord.Object(id=DEBUG_GUILD_ID)
            bot.tree.copy_global_to(guild=guild)
            synced = await bot.tree.sync(guild=guild)
            logger.info(f"Synced {len(synced)} commands to guild {DEBUG_GUILD_ID}")
        else:
            synced = await bot.tree.sync()
            logger.info(f"Synced {len(synced)} commands globally")
    except discord.HTTPException as exc:
        logger.error(f"Failed to sync commands: {exc}", exc_info=True)


def describe_command_error(error: discord.app_commands.AppCommandError) -> str:
    """User-facing text for an app command failure."""
    if isinstance(error, TransformerError):
        # e.g. /host newhost typed as plain text instead of picked
        return (
            f"Could not find `{getattr(error, 'value', '')}`. "
            "Please @mention the member or pick them from the list."
        )
    if isinstance(error, discord.app_commands.NoPrivateMessage):
        return "Lobby commands can only be used in a server."
    return "There was an error executing that command."


@bot.tree.error
async def on_app_command_error(
    interaction: discord.Interaction, error: discord.app_commands.AppCommandError
):
    """Reply to every failed command so the user is never left on 'thinking...'."""
    command_name = interaction.command.name if interaction.command else "unknown"
    logger.error(f"App command error in '{command_name}': {error}", exc_info=error)

    message = describe_command_error(error)
    try:
        if interaction.response.is_done():
            await interaction.followup.send(content=message, ephemeral=True)
        else:
            await interaction.response.send_message(content=message, ephemeral=True)
    except discord.HTTPException as exc:
        logger.warning(f"Failed to send error message to user: {exc}")


def main():
    """Run the bot."""
    if not DISCORD_BOT_TOKEN:
        logger.error("DISCORD_BOT_TOKEN is not set; add it to the environment or a .env file")
        return

    try:
        # discord.py must not install its own handler over ours
        bot.run(DISCORD_BOT_TOKEN, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
    finally:
        if _container is not None:
            _container.shutdown()


if __name__ == "__main__":
    main()
