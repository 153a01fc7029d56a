"""Tests for the Result type and error codes."""

import inspect

import pytest

from services import error_codes
from services.result import Result


class TestResultOk:
    def test_ok_without_value(self):
        """Result.ok() is a void success."""
        result = Result.ok()
        assert result.success is True
        assert result.value is None
        assert result.error is None
        assert result.error_code is None

    def test_ok_with_value(self):
        result = Result.ok({"lobby": "Alpha", "max_size": 16})
        assert result.success is True
        assert result.value["lobby"] == "Alpha"


class TestResultFail:
    def test_fail_with_code(self):
        result = Result.fail("Lobby not found", code=error_codes.LOBBY_NOT_FOUND)
        assert result.success is False
        assert result.value is None
        assert result.error == "Lobby not found"
        assert result.error_code == error_codes.LOBBY_NOT_FOUND

    def test_fail_without_code(self):
        assert Result.fail("Something went wrong").error_code is None


def test_truthiness():
    assert Result.ok(0)
    assert not Result.fail("full")


def test_result_is_frozen():
    result = Result.ok(42)
    with pytest.raises(AttributeError):
        result.value = 100


class TestErrorCodes:
    def test_error_codes_are_unique_strings(self):
        codes = [
            value
            for name, value in inspect.getmembers(error_codes)
            if not name.startswith("_") and name.isupper()
        ]
        assert all(isinstance(code, str) for code in codes)
        assert len(codes) == len(set(codes)), "Duplicate error codes found"

    def test_codes_the_commands_branch_on_exist(self):
        for name in ("LOBBY_NOT_FOUND", "NOT_IN_LOBBY", "NO_HOSTED_LOBBIES", "VOTE_IN_PROGRESS"):
            assert hasattr(error_codes, name)
