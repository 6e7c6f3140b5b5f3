"""Paste clipboard JSON as generated code; post CI build notifications."""

__version__ = "0.1.0"
