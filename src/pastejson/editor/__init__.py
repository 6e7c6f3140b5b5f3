"""Editor package containing the text buffer model and line rules."""

from . import buffer, line_rules
from .buffer import TextBuffer, TextPosition, TextSelection

__all__ = ["buffer", "line_rules", "TextBuffer", "TextPosition", "TextSelection"]
