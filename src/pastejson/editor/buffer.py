"""Line-oriented text buffer and selection model handed to editor commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence


@dataclass(slots=True, frozen=True, order=True)
class TextPosition:
    """Zero-based line/column position inside a buffer."""

    line: int = 0
    column: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "line", _coerce_index(self.line, "line"))
        object.__setattr__(self, "column", _coerce_index(self.column, "column"))

    def to_tuple(self) -> tuple[int, int]:
        return (self.line, self.column)


@dataclass(slots=True, frozen=True)
class TextSelection:
    """A selection span expressed as start/end positions in document order."""

    start: TextPosition = field(default_factory=TextPosition)
    end: TextPosition = field(default_factory=TextPosition)

    def __post_init__(self) -> None:
        if self.end < self.start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @classmethod
    def caret(cls, line: int, column: int = 0) -> TextSelection:
        """Return an empty selection positioned at ``(line, column)``."""

        position = TextPosition(line, column)
        return cls(start=position, end=position)

    @classmethod
    def from_value(cls, value: Any) -> TextSelection:
        """Coerce ``((l, c), (l, c))`` pairs or mappings into a selection."""

        if isinstance(value, TextSelection):
            return value
        if isinstance(value, dict):
            return cls(start=TextPosition(*value["start"]), end=TextPosition(*value["end"]))
        start, end = value
        return cls(start=TextPosition(*start), end=TextPosition(*end))

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when the selection collapses to a cursor."""

        return self.start == self.end

    def to_dict(self) -> dict[str, list[int]]:
        return {"start": list(self.start.to_tuple()), "end": list(self.end.to_tuple())}


@dataclass(slots=True)
class TextBuffer:
    """Ordered line list plus selections, owned by the host for one edit."""

    lines: list[str] = field(default_factory=list)
    content_type: str = ""
    selections: list[TextSelection] = field(default_factory=list)
    trailing_newline: bool = True
    newline: str = "\n"

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        content_type: str = "",
        selections: Iterable[TextSelection] | None = None,
    ) -> TextBuffer:
        """Split ``text`` on its line terminator, remembering the trailing newline.

        Lines end only at the text's own terminator (CRLF when present, LF
        otherwise), so other Unicode separators inside string literals stay put.
        """

        newline = "\r\n" if "\r\n" in text else "\n"
        lines = text.split(newline) if text else []
        trailing = bool(lines) and lines[-1] == ""
        if trailing:
            lines.pop()
        return cls(
            lines=lines,
            newline=newline,
            content_type=content_type,
            selections=list(selections or ()),
            trailing_newline=trailing or not text,
        )

    def to_text(self) -> str:
        """Join the buffer back into a single document string."""

        if not self.lines:
            return ""
        body = self.newline.join(self.lines)
        return body + self.newline if self.trailing_newline else body

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def remove_lines(self, first: int, last: int) -> list[str]:
        """Remove the inclusive line range ``[first, last]`` and return it."""

        if last < first:
            return []
        first = max(0, first)
        removed = self.lines[first : last + 1]
        del self.lines[first : last + 1]
        return removed

    def insert_lines(self, index: int, new_lines: Sequence[str]) -> None:
        """Insert ``new_lines`` as a contiguous block before ``index``."""

        index = max(0, min(index, len(self.lines)))
        self.lines[index:index] = list(new_lines)

    def first_selection(self) -> TextSelection | None:
        return self.selections[0] if self.selections else None

    def clear_selections(self) -> None:
        self.selections.clear()

    def add_selection(self, selection: TextSelection) -> None:
        self.selections.append(selection)


def _coerce_index(value: Any, label: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"TextPosition {label} must be an integer") from exc
    if number < 0:
        return 0
    return number


__all__ = ["TextBuffer", "TextPosition", "TextSelection"]
