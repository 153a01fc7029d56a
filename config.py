"""
Centralized configuration for the custom games lobby bot.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_int_list(env_var: str, default: list[int]) -> list[int]:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return [int(x.strip()) for x in raw.split(",") if x.strip()]
    except ValueError:
        return default


DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN")
ADMIN_USER_IDS: list[int] = _parse_int_list("ADMIN_USER_IDS", [])

# Role that may create lobbies and manage any lobby in the guild
MANAGER_ROLE_NAME = os.getenv("MANAGER_ROLE_NAME", "Custom Games Manager")

LOBBY_DEFAULT_MAX_SIZE = _parse_int("LOBBY_DEFAULT_MAX_SIZE", 16)
LOBBY_IDLE_TIMEOUT_SECONDS = _parse_float("LOBBY_IDLE_TIMEOUT_SECONDS", 3600.0)  # 1 hour
# Re-arm the idle check for the rest of the window when a lobby saw activity
LOBBY_IDLE_RENEW = _parse_bool("LOBBY_IDLE_RENEW", False)
LOBBY_HOST_AUTO_JOIN = _parse_bool("LOBBY_HOST_AUTO_JOIN", True)
LOBBY_CREATE_REQUIRES_MANAGER = _parse_bool("LOBBY_CREATE_REQUIRES_MANAGER", True)

MAP_DATABASE_PATH = os.getenv("MAP_DATABASE_PATH", "mapDatabase.json")
MAPVOTE_SELECTION_TIMEOUT_SECONDS = _parse_float("MAPVOTE_SELECTION_TIMEOUT_SECONDS", 60.0)
MAPVOTE_FILTER_TIMEOUT_SECONDS = _parse_float("MAPVOTE_FILTER_TIMEOUT_SECONDS", 60.0)
MAPVOTE_WINDOW_SECONDS = _parse_float("MAPVOTE_WINDOW_SECONDS", 30.0)
MAPVOTE_CANDIDATE_COUNT = _parse_int("MAPVOTE_CANDIDATE_COUNT", 3)

# Sync slash commands to one guild on startup (instant) instead of globally
DEBUG_GUILD_ID: int | None = None
_debug_guild_raw = os.getenv("DEBUG_GUILD_ID")
if _debug_guild_raw:
    try:
        DEBUG_GUILD_ID = int(_debug_guild_raw.strip())
    except ValueError:
        DEBUG_GUILD_ID = None
