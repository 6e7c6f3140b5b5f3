"""Command-line entry point for the pastejson utilities."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Sequence, TextIO

from .commands.paste_json import CommandInvocation, PasteJSONAsCodeCommand, PasteJSONAsTypesCommand
from .editor.buffer import TextBuffer, TextSelection
from .editor.line_rules import profile_for_path
from .errors import CommandError, NotificationError
from .runtime.quicktype_cli import QuicktypeRuntime
from .services.clipboard import Clipboard, FileClipboard, QtClipboard
from .services.notifications import BuildContext, ChatNotifier
from .services.settings import ENV_OVERRIDES, Settings, SettingsStore, parse_assignments, redact_secret
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_LOGGER = logging.getLogger(__name__)

NOTIFY_EVENTS: tuple[str, ...] = ("build-passed", "build-failed", "deployed")


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Log to the rotating file; ``debug`` also echoes DEBUG records to stderr."""

    level = logging.DEBUG if debug else logging.INFO
    log_path = logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging to %s (level=%s)", log_path, logging.getLevelName(level))


def load_settings(
    path: Path | None = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except (OSError, ValueError) as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def build_runtime(settings: Settings) -> QuicktypeRuntime:
    return QuicktypeRuntime(
        executable=settings.quicktype_path,
        top_level=settings.top_level_name,
        timeout=settings.runtime_timeout,
    )


def build_notifier(settings: Settings) -> ChatNotifier:
    return ChatNotifier(
        webhook_url=settings.slack_webhook,
        channel=settings.slack_channel,
        username=settings.slack_username,
        icon_url=settings.slack_icon_url,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        retry_min_seconds=settings.retry_min_seconds,
        retry_max_seconds=settings.retry_max_seconds,
    )


def settings_store_for(settings_path: str | None) -> SettingsStore:
    path = settings_path or os.environ.get("PASTEJSON_SETTINGS_PATH")
    return SettingsStore(Path(path).expanduser() if path else None)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the `pastejson` console script."""

    args = _build_parser().parse_args(argv)

    debug = bool(args.debug) or _env_flag("PASTEJSON_DEBUG", default=False)
    configure_logging(debug)

    settings_store = settings_store_for(args.settings_path)
    try:
        cli_overrides = parse_assignments(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return 2

    settings = load_settings(store=settings_store, overrides=cli_overrides or None)
    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return 0

    handler: Callable[[argparse.Namespace, Settings], int] | None = getattr(args, "handler", None)
    if handler is None:
        print("A command is required (paste, notify or config).", file=sys.stderr)
        return 2
    with logging_utils.command_context(args.command):
        return handler(args, settings)


def run_paste(
    args: argparse.Namespace,
    settings: Settings,
    *,
    runtime: Any | None = None,
    clipboard: Clipboard | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Paste JSON as code into ``args.file`` and write the result back."""

    path = Path(args.file).expanduser()
    text = _read_source(path)
    content_type = args.content_type or profile_for_path(path).content_type

    start = (args.line, args.column)
    end = (
        args.end_line if args.end_line is not None else args.line,
        args.end_column if args.end_column is not None else args.column,
    )
    buffer = TextBuffer.from_text(
        text,
        content_type=content_type,
        selections=[TextSelection.from_value((start, end))],
    )

    command_cls = PasteJSONAsTypesCommand if args.types_only else PasteJSONAsCodeCommand
    command = command_cls(
        runtime=runtime or build_runtime(settings),
        clipboard=clipboard or (FileClipboard(args.json_file) if args.json_file else QtClipboard()),
    )
    invocation = CommandInvocation(buffer=buffer, command_identifier=command.identifier)
    try:
        command.run(invocation)
    except CommandError as exc:
        _LOGGER.error("%s failed: %s (%s)", command.identifier, exc.message, exc.details)
        print(f"{exc.message}: {exc.details}", file=sys.stderr)
        return 1

    result = buffer.to_text()
    if args.stdout:
        destination = stdout or sys.stdout
        destination.write(result)
    else:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(result)
        _LOGGER.info("Wrote %s (cursor at line %s)", path, buffer.selections[0].start.line)
    return 0


def run_notify(
    args: argparse.Namespace,
    settings: Settings,
    *,
    notifier: ChatNotifier | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    """Post one of the canned build-status messages."""

    context = BuildContext.from_env(
        env,
        org=settings.appcenter_org,
        app=settings.appcenter_app,
        tester_app=settings.tester_app,
        tester_group=settings.tester_group,
    )
    active = notifier or build_notifier(settings)
    senders: Dict[str, Callable[[BuildContext], Any]] = {
        "build-passed": active.notify_build_passed,
        "build-failed": active.notify_build_failed,
        "deployed": active.notify_deployed,
    }
    try:
        senders[args.event](context)
    except NotificationError as exc:
        _LOGGER.error("Notification %s failed: %s", args.event, exc.details)
        print(f"{exc.message}: {exc.details}", file=sys.stderr)
        return 1
    return 0


def run_config(
    args: argparse.Namespace,
    settings: Settings,
    *,
    store: SettingsStore | None = None,
) -> int:
    """Persist ``KEY=VALUE`` assignments into the settings file.

    Starts from what is already on disk, so ``--set`` and environment
    overrides active for this run are never written back.
    """

    del settings
    active = store or settings_store_for(args.settings_path)
    try:
        assignments = parse_assignments(args.assignments)
    except ValueError as exc:
        print(f"Invalid setting: {exc}", file=sys.stderr)
        return 2
    updated = replace(active.read(), **assignments)
    path = active.save(updated)
    _LOGGER.info("Saved %s to %s", ", ".join(sorted(assignments)), path)
    print(f"Saved {len(assignments)} setting(s) to {path}")
    return 0


def _read_source(path: Path) -> str:
    if not path.exists():
        return ""
    with path.open(encoding="utf-8", newline="") as handle:
        return handle.read()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pastejson",
        description="Paste clipboard JSON as generated code, or post CI build notifications.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload (with secrets redacted) and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.pastejson/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings for this run (repeatable).",
    )
    subparsers = parser.add_subparsers(dest="command")

    paste = subparsers.add_parser("paste", help="Splice generated code into a source file.")
    paste.add_argument("file", help="Source file to edit.")
    paste.add_argument(
        "--json-file",
        metavar="PATH",
        help="Read JSON from PATH ('-' for stdin) instead of the system clipboard.",
    )
    paste.add_argument("--content-type", help="Content-type identifier of the target language.")
    paste.add_argument("--line", type=int, default=0, help="Selection start line (zero-based).")
    paste.add_argument("--column", type=int, default=0, help="Selection start column.")
    paste.add_argument("--end-line", type=int, default=None, help="Selection end line.")
    paste.add_argument("--end-column", type=int, default=None, help="Selection end column.")
    paste.add_argument("--types-only", action="store_true", help="Generate type declarations only.")
    paste.add_argument("--stdout", action="store_true", help="Print the result instead of saving.")
    paste.set_defaults(handler=run_paste)

    notify = subparsers.add_parser("notify", help="Post a build-status message to the chat webhook.")
    notify.add_argument("event", choices=NOTIFY_EVENTS)
    notify.set_defaults(handler=run_notify)

    config = subparsers.add_parser("config", help="Manage the persisted settings file.")
    config_actions = config.add_subparsers(dest="action", required=True)
    config_set = config_actions.add_parser("set", help="Save KEY=VALUE settings (the webhook is stored encrypted).")
    config_set.add_argument("assignments", nargs="+", metavar="KEY=VALUE")
    config_set.set_defaults(handler=run_config)
    return parser


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    payload = asdict(settings)
    payload["slack_webhook"] = redact_secret(payload.get("slack_webhook", ""))
    metadata = {
        "path": str(store.path),
        "secret_backend": store.vault.strategy,
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": _active_env_overrides(),
    }
    json.dump({"settings": payload, "meta": metadata}, destination, indent=2)
    destination.write("\n")


def _active_env_overrides() -> list[str]:
    return sorted(name for name in ENV_OVERRIDES if name in os.environ)


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
