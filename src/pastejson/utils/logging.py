"""Logging setup for the pastejson command line.

Every record carries the name of the subcommand that produced it, so one log
file can interleave ``paste`` and ``notify`` runs and still be read back per
command. ``--debug`` lowers both the file and the console threshold.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator

__all__ = ["CommandContextFilter", "command_context", "current_command", "get_log_path", "setup_logging"]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(command)s | %(name)s | %(message)s"
LOG_FILENAME = "pastejson.log"

_DEFAULT_LOG_DIR = Path.home() / ".pastejson" / "logs"
_QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")
_NO_COMMAND = "-"
_COMMAND: ContextVar[str] = ContextVar("pastejson.command", default=_NO_COMMAND)
_LOG_PATH: Path | None = None


class CommandContextFilter(logging.Filter):
    """Stamp each record with the active subcommand name."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "command"):
            record.command = _COMMAND.get()
        return True


def current_command() -> str:
    return _COMMAND.get()


@contextmanager
def command_context(name: str) -> Iterator[None]:
    """Attribute records logged inside the block to the ``name`` subcommand."""

    token = _COMMAND.set(name)
    try:
        yield
    finally:
        _COMMAND.reset(token)


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    force: bool = False,
) -> Path:
    """Route the root logger to ``pastejson.log`` and, optionally, stderr.

    At DEBUG level the console shows everything the file does; otherwise it
    only shows warnings, keeping ``--stdout`` output clean.
    """

    global _LOG_PATH
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    log_path = _resolve_log_dir(log_dir) / LOG_FILENAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    context_filter = CommandContextFilter()

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    handlers: list[logging.Handler] = [file_handler]
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level if level <= logging.DEBUG else logging.WARNING)
        handlers.append(console_handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _LOG_PATH = log_path
    return log_path


def get_log_path() -> Path | None:
    return _LOG_PATH


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    return Path(log_dir or os.environ.get("PASTEJSON_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
