"""Tests for the command error hierarchy."""

from __future__ import annotations

from pastejson.errors import (
    ClipboardEmptyError,
    CommandError,
    ErrorCode,
    InternalCommandError,
    NotificationError,
    RuntimeUnavailableError,
)


def test_defaults_carry_messages_and_codes() -> None:
    error = RuntimeUnavailableError()

    assert isinstance(error, CommandError)
    assert error.error_code == ErrorCode.RUNTIME_UNAVAILABLE
    assert error.message == "Couldn't initialize type engine"
    assert error.details == "No details"
    assert str(error) == "[runtime_unavailable] Couldn't initialize type engine"


def test_to_dict_includes_domain_and_details() -> None:
    error = InternalCommandError(details="stack trace")

    assert error.to_dict() == {
        "domain": "quicktype",
        "error": ErrorCode.INTERNAL_ERROR,
        "message": "quicktype encountered an internal error",
        "details": "stack trace",
    }


def test_errors_are_raisable() -> None:
    try:
        raise ClipboardEmptyError()
    except CommandError as exc:
        assert exc.args == ("Couldn't get JSON from clipboard",)


def test_notification_error_shares_the_command_error_shape() -> None:
    error = NotificationError(details="Chat webhook timed out")

    assert isinstance(error, CommandError)
    assert error.error_code == ErrorCode.NOTIFICATION_FAILED
    assert error.to_dict() == {
        "domain": "notifications",
        "error": ErrorCode.NOTIFICATION_FAILED,
        "message": "Couldn't post chat notification",
        "details": "Chat webhook timed out",
    }
