"""Editor command that pastes clipboard JSON as generated source code.

The command reads JSON text from the clipboard, asks the code-generation
runtime to render it for the buffer's content type and splices the resulting
lines into the buffer:

* When existing code precedes the insertion point, leading and trailing
  imports, comments and blank lines are trimmed from the generated block.
* A non-empty selection is replaced; an empty one inserts at the cursor line.
* Afterwards a single cursor sits at column 0 of the insertion line.

Completion is reported through a handler receiving ``None`` or a
:class:`~pastejson.errors.CommandError`, invoked once per invocation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Sequence

from ..editor.buffer import TextBuffer, TextSelection
from ..editor.line_rules import clean_generated_lines, inserting_after_code, profile_for
from ..errors import (
    ClipboardEmptyError,
    CommandError,
    InternalCommandError,
    InvalidJSONError,
    RuntimeUnavailableError,
)
from ..runtime.base import PARSE_FAILURE_MARKER, CodegenRuntime
from ..services.clipboard import CLIPBOARD_READ_ERRORS, Clipboard

LOGGER = logging.getLogger(__name__)

CompletionHandler = Callable[[CommandError | None], None]


@dataclass(slots=True)
class CommandInvocation:
    """Host-owned state for one run of an editor command."""

    buffer: TextBuffer
    command_identifier: str = "paste-json-as-code"


@dataclass
class PasteJSONAsCodeCommand:
    """Paste the clipboard's JSON as code in the buffer's language."""

    runtime: CodegenRuntime
    clipboard: Clipboard
    parse_failure_markers: tuple[str, ...] = field(default=(PARSE_FAILURE_MARKER,))

    identifier: ClassVar[str] = "paste-json-as-code"
    render_types_only: ClassVar[bool] = False

    def perform(self, invocation: CommandInvocation, completion_handler: CompletionHandler) -> None:
        runtime = self.runtime

        if not runtime.is_initialized and not runtime.initialize():
            completion_handler(RuntimeUnavailableError())
            return

        try:
            json_text = self.clipboard.text()
        except CLIPBOARD_READ_ERRORS as exc:
            LOGGER.warning("Reading the clipboard failed: %s", exc)
            completion_handler(ClipboardEmptyError(details=str(exc)))
            return
        if not json_text:
            completion_handler(ClipboardEmptyError())
            return

        runtime.quicktype(
            json_text,
            invocation.buffer.content_type,
            self.render_types_only,
            lambda message: self.handle_error(message, invocation, completion_handler),
            lambda lines: self.handle_success(lines, invocation, completion_handler),
        )

    def handle_success(
        self,
        lines: Sequence[str],
        invocation: CommandInvocation,
        completion_handler: CompletionHandler,
    ) -> None:
        buffer = invocation.buffer
        selection = buffer.first_selection() or TextSelection()
        profile = profile_for(buffer.content_type)

        # Pasting below existing code: omit imports and header comments
        clean_lines = (
            clean_generated_lines(lines, profile)
            if inserting_after_code(buffer.lines, selection.start.line, profile)
            else list(lines)
        )

        first, last = removal_range(selection, buffer.line_count)
        if first is not None and last is not None:
            buffer.remove_lines(first, last)

        buffer.insert_lines(selection.start.line, clean_lines)

        buffer.clear_selections()
        buffer.add_selection(TextSelection.caret(selection.start.line, 0))

        LOGGER.debug(
            "Inserted %s generated line(s) at line %s (%s)",
            len(clean_lines),
            selection.start.line,
            profile.language,
        )
        completion_handler(None)

    def handle_error(
        self,
        message: str,
        invocation: CommandInvocation,
        completion_handler: CompletionHandler,
    ) -> None:
        # A failed run can leave the runtime unusable, so start it over
        LOGGER.warning("quicktype encountered an error: %s", message)
        try:
            reinitialized = self.runtime.initialize()
        except Exception:
            LOGGER.exception("quicktype runtime reinitialization raised")
            reinitialized = False
        if reinitialized:
            LOGGER.info("quicktype runtime reinitialized")
        else:
            LOGGER.warning("quicktype runtime could not be reinitialized")

        error: CommandError
        if any(marker in message for marker in self.parse_failure_markers):
            error = InvalidJSONError(details=message)
        else:
            error = InternalCommandError(details=message)
        completion_handler(error)

    def run(self, invocation: CommandInvocation) -> None:
        """Perform the command and raise the reported error, if any."""

        outcome: list[CommandError | None] = []
        self.perform(invocation, outcome.append)
        if not outcome:
            raise InternalCommandError(details="Command finished without reporting completion")
        if outcome[0] is not None:
            raise outcome[0]


@dataclass
class PasteJSONAsTypesCommand(PasteJSONAsCodeCommand):
    """Paste only the type declarations, without serialization helpers."""

    identifier: ClassVar[str] = "paste-json-as-types"
    render_types_only: ClassVar[bool] = True


def removal_range(selection: TextSelection, line_count: int) -> tuple[int | None, int | None]:
    """Return the inclusive line range a non-empty selection replaces.

    A selection ending on ``line_count`` stops one line short, since that line
    does not exist.
    """

    if selection.is_empty:
        return None, None
    last = selection.end.line - 1 if selection.end.line == line_count else selection.end.line
    return selection.start.line, last


__all__ = [
    "CommandInvocation",
    "CompletionHandler",
    "PasteJSONAsCodeCommand",
    "PasteJSONAsTypesCommand",
    "removal_range",
]
