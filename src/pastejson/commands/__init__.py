"""Editor commands exposed to the host."""

from .paste_json import CommandInvocation, PasteJSONAsCodeCommand, PasteJSONAsTypesCommand

__all__ = ["CommandInvocation", "PasteJSONAsCodeCommand", "PasteJSONAsTypesCommand"]
