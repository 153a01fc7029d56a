"""Tests for utils/command_helpers.py - Discord command helper utilities."""

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from services import error_codes
from services.result import Result
from utils.command_helpers import format_result_error, handle_result


@pytest.fixture
def mock_interaction():
    """Create a mock Discord interaction."""
    interaction = MagicMock(spec=discord.Interaction)
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction


class TestHandleResult:
    """Tests for handle_result function."""

    @pytest.mark.asyncio
    async def test_success_without_message(self, mock_interaction):
        """Successful result with no message should return True without sending."""
        with patch("utils.command_helpers.safe_followup", new_callable=AsyncMock) as mock_followup:
            success = await handle_result(mock_interaction, Result.ok())

            assert success is True
            mock_followup.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_with_public_message(self, mock_interaction):
        """Success messages honour the ephemeral flag."""
        with patch("utils.command_helpers.safe_followup", new_callable=AsyncMock) as mock_followup:
            success = await handle_result(
                mock_interaction, Result.ok(), success_msg="Lobby **Alpha** ended.", ephemeral=False
            )

            assert success is True
            mock_followup.assert_awaited_once_with(
                mock_interaction, content="Lobby **Alpha** ended.", ephemeral=False
            )

    @pytest.mark.asyncio
    async def test_failure_is_ephemeral_even_when_success_is_public(self, mock_interaction):
        """Rejections are only shown to the acting user."""
        result = Result.fail("You are already in this lobby.", code=error_codes.ALREADY_MEMBER)

        with patch("utils.command_helpers.safe_followup", new_callable=AsyncMock) as mock_followup:
            success = await handle_result(mock_interaction, result, "Joined!", ephemeral=False)

            assert success is False
            mock_followup.assert_awaited_once_with(
                mock_interaction, content="You are already in this lobby.", ephemeral=True
            )


class TestFormatResultError:
    """Tests for format_result_error function."""

    def test_success_returns_empty(self):
        assert format_result_error(Result.ok()) == ""

    def test_code_is_not_shown(self):
        result = Result.fail("That lobby is full.", code=error_codes.INVALID_SIZE)
        assert format_result_error(result) == "That lobby is full."

    def test_failure_without_error_message(self):
        result = Result(success=False, error=None)
        assert format_result_error(result) == "Something went wrong."
