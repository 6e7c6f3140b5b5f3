"""Standardized error types for editor commands and notifications.

Command errors carry a short user-facing message plus a details string, the
same shape a host editor shows in its failure alert.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# -----------------------------------------------------------------------------
# Error Code Constants
# -----------------------------------------------------------------------------

class ErrorCode:
    """Constants for error codes attached to command failures."""

    RUNTIME_UNAVAILABLE = "runtime_unavailable"
    CLIPBOARD_EMPTY = "clipboard_empty"
    INVALID_JSON = "invalid_json"
    INTERNAL_ERROR = "internal_error"

    NOTIFICATION_FAILED = "notification_failed"


DEFAULT_DETAILS = "No details"


# -----------------------------------------------------------------------------
# Base Error Class
# -----------------------------------------------------------------------------

@dataclass
class CommandError(Exception):
    """Base exception class for command failures (paste and notify).

    Attributes:
        error_code: Machine-readable error identifier.
        message: Human-readable error description.
        details: Failure reason shown beneath the message.
    """

    error_code: str
    message: str
    details: str = DEFAULT_DETAILS
    domain: str = "quicktype"

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary for structured reporting."""
        return {
            "domain": self.domain,
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class RuntimeUnavailableError(CommandError):
    """Raised when the code-generation runtime cannot be initialized."""

    error_code: str = field(default=ErrorCode.RUNTIME_UNAVAILABLE)
    message: str = field(default="Couldn't initialize type engine")


@dataclass
class ClipboardEmptyError(CommandError):
    """Raised when the clipboard holds no text."""

    error_code: str = field(default=ErrorCode.CLIPBOARD_EMPTY)
    message: str = field(default="Couldn't get JSON from clipboard")


@dataclass
class InvalidJSONError(CommandError):
    """Raised when the runtime rejects the clipboard contents as JSON."""

    error_code: str = field(default=ErrorCode.INVALID_JSON)
    message: str = field(default="Clipboard does not contain valid JSON")


@dataclass
class InternalCommandError(CommandError):
    """Raised for any other runtime failure."""

    error_code: str = field(default=ErrorCode.INTERNAL_ERROR)
    message: str = field(default="quicktype encountered an internal error")


@dataclass
class NotificationError(CommandError):
    """Raised when a build notification cannot be delivered to the chat webhook."""

    error_code: str = field(default=ErrorCode.NOTIFICATION_FAILED)
    message: str = field(default="Couldn't post chat notification")
    domain: str = field(default="notifications")


__all__ = [
    "ErrorCode",
    "DEFAULT_DETAILS",
    "CommandError",
    "RuntimeUnavailableError",
    "ClipboardEmptyError",
    "InvalidJSONError",
    "InternalCommandError",
    "NotificationError",
]
