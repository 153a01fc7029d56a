"""
Standard error codes for the service layer.

Command handlers branch on these instead of parsing error message text.

Usage:
    from services.error_codes import LOBBY_NOT_FOUND
    from services.result import Result

    if lobby is None:
        return Result.fail("Lobby not found.", code=LOBBY_NOT_FOUND)
"""

# General errors
VALIDATION_ERROR = "validation_error"
FORBIDDEN = "forbidden"
NO_OP = "no_op"

# Registry errors
DUPLICATE_LOBBY = "duplicate_lobby"
LOBBY_NOT_FOUND = "lobby_not_found"

# Membership errors
ALREADY_MEMBER = "already_member"
NOT_IN_LOBBY = "not_in_lobby"
CANNOT_KICK_HOST = "cannot_kick_host"
CANNOT_KICK_SELF = "cannot_kick_self"
INVALID_SIZE = "invalid_size"

# Map vote errors
NO_HOSTED_LOBBIES = "no_hosted_lobbies"
NO_MATCHING_MAPS = "no_matching_maps"
INVALID_FILTER = "invalid_filter"
VOTE_IN_PROGRESS = "vote_in_progress"
SELECTION_TIMED_OUT = "selection_timed_out"
FILTERS_TIMED_OUT = "filters_timed_out"

# Best-effort side effects (logged, never abort the triggering operation)
RENDER_FAILURE = "render_failure"
NOTIFICATION_FAILURE = "notification_failure"
