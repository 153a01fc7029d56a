"""
Command helper utilities for Discord slash commands.

Provides utilities for handling service Results in command handlers,
reducing boilerplate and ensuring consistent error reporting.
"""

import discord
from typing import TYPE_CHECKING

from utils.interaction_safety import safe_followup

if TYPE_CHECKING:
    from services.result import Result


async def handle_result(
    interaction: discord.Interaction,
    result: "Result",
    success_msg: str | None = None,
    ephemeral: bool = True,
) -> bool:
    """
    Handle a service Result, sending appropriate Discord response.

    Failures are always reported ephemerally with the service's message, so
    only the acting user sees why their action was rejected.

    Args:
        interaction: The Discord interaction to respond to
        result: The Result from a service call
        success_msg: Optional message to send on success (None = no message)
        ephemeral: Whether the success message should be ephemeral

    Returns:
        True if the result was successful, False otherwise

    Usage:
        result = await lobby_service.join(guild_id, name, user_id, tag)
        if not await handle_result(interaction, result, "Joined!"):
            return  # Error was already reported to user
    """
    if not result.success:
        await safe_followup(interaction, content=format_result_error(result), ephemeral=True)
        return False

    if success_msg:
        await safe_followup(interaction, content=success_msg, ephemeral=ephemeral)
    return True


def format_result_error(result: "Result") -> str:
    """
    Format a Result error for display.

    The message is already phrased for end users; the code is not shown.
    """
    if result.success:
        return ""
    return result.error or "Something went wrong."
