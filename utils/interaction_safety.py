"""
Helpers for responding to interactions without tripping over expired tokens.

Discord gives an interaction three seconds to be acknowledged. Handlers defer
first and then send followups; both steps can fail if the token has already
lapsed or the interaction was acknowledged elsewhere.
"""

import logging

import discord

logger = logging.getLogger("lobby_bot.utils.interaction_safety")


async def safe_defer(interaction: discord.Interaction, ephemeral: bool = False) -> bool:
    """
    Defer an interaction response.

    Returns:
        True if the interaction is acknowledged (now or earlier) and followups
        can be sent, False if the token is no longer usable.
    """
    if interaction.response.is_done():
        return True
    try:
        await interaction.response.defer(ephemeral=ephemeral)
        return True
    except discord.NotFound:
        logger.warning(f"Interaction {interaction.id} expired before it could be deferred")
        return False
    except discord.HTTPException as exc:
        # Already acknowledged by a concurrent handler
        if interaction.response.is_done():
            return True
        logger.warning(f"Failed to defer interaction {interaction.id}: {exc}")
        return False


async def safe_followup(interaction: discord.Interaction, **kwargs):
    """
    Send a followup, falling back to a plain channel message for non-ephemeral
    content when the interaction token is gone.

    Returns:
        The sent message, or None if nothing could be delivered.
    """
    try:
        return await interaction.followup.send(**kwargs)
    except (discord.NotFound, discord.HTTPException) as exc:
        logger.warning(f"Followup failed for interaction {interaction.id}: {exc}")
        if kwargs.get("ephemeral") or interaction.channel is None:
            return None
        channel_kwargs = {k: v for k, v in kwargs.items() if k in ("content", "embed", "view")}
        try:
            return await interaction.channel.send(**channel_kwargs)
        except discord.HTTPException as channel_exc:
            logger.warning(f"Channel fallback failed for interaction {interaction.id}: {channel_exc}")
            return None
