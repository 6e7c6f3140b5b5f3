"""Service layer helpers (clipboard, notifications, settings)."""

from .clipboard import Clipboard, FileClipboard, QtClipboard, StaticClipboard
from .notifications import BuildContext, ChatNotifier

__all__ = [
    "BuildContext",
    "ChatNotifier",
    "Clipboard",
    "FileClipboard",
    "QtClipboard",
    "StaticClipboard",
]
