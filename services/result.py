"""
Result type for consistent error handling across services.

Lobby operations never raise for expected rejections (full lobby, missing
permission, unknown lobby). They return a Result so the command layer can
surface the reason to the acting user verbatim.

Usage:
    # Returning success
    return Result.ok(lobby)  # Result with value
    return Result.ok()       # Result without value (for void operations)

    # Returning failure
    return Result.fail("Lobby not found.", code=LOBBY_NOT_FOUND)

    # Checking results
    if result.success:
        render(result.value)
    else:
        reply(f"{result.error}")
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    A simple result type for service method return values.

    Attributes:
        success: Whether the operation succeeded
        value: The return value if successful (None if failed or void operation)
        error: Human-readable reason if failed (None if successful)
        error_code: Code from services.error_codes for programmatic handling
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        """Create a successful result with an optional value."""
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        """Create a failed result with an error message and optional error code."""
        return cls(success=False, error=error, error_code=code)

    def __bool__(self) -> bool:
        return self.success
