"""Code-generation runtime adapters."""

from .base import PARSE_FAILURE_MARKER, CodegenRuntime, FailureCallback, SuccessCallback
from .quicktype_cli import QuicktypeRuntime

__all__ = [
    "CodegenRuntime",
    "FailureCallback",
    "SuccessCallback",
    "PARSE_FAILURE_MARKER",
    "QuicktypeRuntime",
]
