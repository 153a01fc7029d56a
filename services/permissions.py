"""
Permission checking utilities for the bot.
"""

import discord

from config import ADMIN_USER_IDS, MANAGER_ROLE_NAME


def has_allowlisted_admin(interaction: discord.Interaction) -> bool:
    """
    Check if the user is explicitly allowlisted via ADMIN_USER_IDS.
    If ADMIN_USER_IDS is empty/unset, nobody is considered admin by this check.
    """
    return interaction.user.id in ADMIN_USER_IDS


def _resolve_member(interaction: discord.Interaction):
    # Prefer guild member lookup, but fall back gracefully for mocks / partial objects.
    if interaction.guild:
        get_member = getattr(interaction.guild, "get_member", None)
        if callable(get_member):
            member = get_member(interaction.user.id)
            if member is not None:
                return member
    return interaction.user


def has_manager_role(interaction: discord.Interaction) -> bool:
    """True if the user carries the configured lobby manager role."""
    if not MANAGER_ROLE_NAME:
        return False
    member = _resolve_member(interaction)
    roles = getattr(member, "roles", None) or []
    return any(getattr(role, "name", None) == MANAGER_ROLE_NAME for role in roles)


def has_manager_capability(interaction: discord.Interaction) -> bool:
    """
    Check if the user may manage any lobby in the guild.

    Granted to allowlisted admins, holders of MANAGER_ROLE_NAME, and members
    with Administrator or Manage Server.

    Args:
        interaction: Discord interaction object

    Returns:
        True if user has manager capability, False otherwise
    """
    if has_allowlisted_admin(interaction):
        return True

    if has_manager_role(interaction):
        return True

    member = _resolve_member(interaction)
    perms = getattr(member, "guild_permissions", None)
    if perms:
        return bool(getattr(perms, "administrator", False) or getattr(perms, "manage_guild", False))

    return False
