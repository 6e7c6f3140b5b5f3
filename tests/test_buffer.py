"""Tests for the text buffer and selection model."""

from __future__ import annotations

from pastejson.editor.buffer import TextBuffer, TextPosition, TextSelection


def test_selection_orders_reversed_endpoints() -> None:
    selection = TextSelection(start=TextPosition(4, 2), end=TextPosition(1, 7))

    assert selection.start == TextPosition(1, 7)
    assert selection.end == TextPosition(4, 2)


def test_caret_selection_is_empty() -> None:
    assert TextSelection.caret(3).is_empty
    assert not TextSelection(TextPosition(3, 0), TextPosition(3, 1)).is_empty


def test_position_clamps_negative_values() -> None:
    assert TextPosition(-2, -1).to_tuple() == (0, 0)


def test_selection_from_value_accepts_pairs_and_mappings() -> None:
    from_pairs = TextSelection.from_value(((1, 0), (2, 3)))
    from_mapping = TextSelection.from_value({"start": [1, 0], "end": [2, 3]})

    assert from_pairs == from_mapping
    assert from_pairs.to_dict() == {"start": [1, 0], "end": [2, 3]}


def test_from_text_round_trips_trailing_newline() -> None:
    with_newline = TextBuffer.from_text("a\nb\n")
    without_newline = TextBuffer.from_text("a\nb")

    assert with_newline.lines == ["a", "b"]
    assert with_newline.to_text() == "a\nb\n"
    assert without_newline.to_text() == "a\nb"


def test_from_text_keeps_crlf_line_endings() -> None:
    buffer = TextBuffer.from_text("let a = 1\r\nlet b = 2\r\n")

    assert buffer.lines == ["let a = 1", "let b = 2"]
    buffer.insert_lines(1, ["struct S {}"])
    assert buffer.to_text() == "let a = 1\r\nstruct S {}\r\nlet b = 2\r\n"


def test_from_text_does_not_split_on_unicode_separators() -> None:
    text = 'let s = "x\u2028y"\nlet t = "\x0c\x85"\n'
    buffer = TextBuffer.from_text(text)

    assert buffer.line_count == 2
    assert buffer.to_text() == text


def test_blank_only_text_round_trips() -> None:
    assert TextBuffer.from_text("\n").lines == [""]
    assert TextBuffer.from_text("\n").to_text() == "\n"


def test_empty_text_produces_empty_buffer() -> None:
    buffer = TextBuffer.from_text("")

    assert buffer.lines == []
    assert buffer.to_text() == ""


def test_remove_lines_is_inclusive() -> None:
    buffer = TextBuffer(lines=["a", "b", "c", "d"])

    removed = buffer.remove_lines(1, 2)

    assert removed == ["b", "c"]
    assert buffer.lines == ["a", "d"]


def test_insert_lines_clamps_index_to_buffer_end() -> None:
    buffer = TextBuffer(lines=["a"])

    buffer.insert_lines(10, ["b", "c"])

    assert buffer.lines == ["a", "b", "c"]


def test_selection_helpers() -> None:
    buffer = TextBuffer(lines=["a"])
    assert buffer.first_selection() is None

    buffer.add_selection(TextSelection.caret(0, 1))
    buffer.add_selection(TextSelection.caret(0, 0))
    assert buffer.first_selection() == TextSelection.caret(0, 1)

    buffer.clear_selections()
    assert buffer.selections == []
