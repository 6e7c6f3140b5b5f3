"""Read-only access to plain-text clipboard content."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, TextIO, cast

LOGGER = logging.getLogger(__name__)

# Raised by ``Clipboard.text`` implementations when the source cannot be read.
CLIPBOARD_READ_ERRORS: tuple[type[Exception], ...] = (RuntimeError, OSError, UnicodeError)


class Clipboard(Protocol):
    """Source of the JSON text a paste command consumes."""

    def text(self) -> str | None:  # pragma: no cover - protocol stub
        ...


@dataclass(slots=True)
class StaticClipboard:
    """Clipboard stand-in holding fixed text."""

    content: str | None = None

    def text(self) -> str | None:
        return self.content or None


@dataclass(slots=True)
class FileClipboard:
    """Reads the JSON from a file, or from ``stdin`` when the path is ``-``.

    The file is opened on each ``text()`` call, so a missing file surfaces as
    a paste failure rather than at startup.
    """

    path: str
    stdin: TextIO | None = None

    def text(self) -> str | None:
        if self.path == "-":
            value = (self.stdin or sys.stdin).read()
        else:
            value = Path(self.path).expanduser().read_text(encoding="utf-8")
        return value or None


class QtClipboard:
    """System clipboard reader backed by PySide6."""

    def __init__(self, app: Any | None = None) -> None:
        self._app = app

    def text(self) -> str | None:
        app = self._ensure_app()
        clipboard = app.clipboard()
        if clipboard is None:
            LOGGER.debug("Qt clipboard unavailable")
            return None
        value = clipboard.text()
        return value or None

    def _ensure_app(self) -> Any:
        if self._app is not None:
            return self._app
        try:
            from PySide6.QtCore import QtMsgType, qInstallMessageHandler
            from PySide6.QtGui import QGuiApplication
        except ImportError as exc:  # pragma: no cover - depends on desktop stack
            raise RuntimeError("PySide6 must be installed to read the system clipboard.") from exc

        # Clipboard warnings from Qt (no display, ownership changes) go to our log
        qt_levels = {
            QtMsgType.QtDebugMsg: logging.DEBUG,
            QtMsgType.QtWarningMsg: logging.WARNING,
            QtMsgType.QtCriticalMsg: logging.ERROR,
        }
        qInstallMessageHandler(
            lambda mode, _context, message: LOGGER.log(qt_levels.get(mode, logging.INFO), "Qt: %s", message)
        )
        self._app = cast(Any, QGuiApplication.instance() or QGuiApplication(sys.argv[:1]))
        return self._app


__all__ = ["CLIPBOARD_READ_ERRORS", "Clipboard", "FileClipboard", "QtClipboard", "StaticClipboard"]
