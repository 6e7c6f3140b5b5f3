"""Protocol describing the external JSON-to-code runtime."""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

FailureCallback = Callable[[str], None]
SuccessCallback = Callable[[Sequence[str]], None]

PARSE_FAILURE_MARKER = "cannot parse input"


class CodegenRuntime(Protocol):
    """Service handle for the code-generation engine.

    ``quicktype`` resumes through exactly one of ``fail`` or ``success``.
    """

    @property
    def is_initialized(self) -> bool:  # pragma: no cover - protocol stub
        ...

    def initialize(self) -> bool:  # pragma: no cover - protocol stub
        ...

    def quicktype(
        self,
        json_text: str,
        content_type: str,
        just_types: bool,
        fail: FailureCallback,
        success: SuccessCallback,
    ) -> None:  # pragma: no cover - protocol stub
        ...


__all__ = ["CodegenRuntime", "FailureCallback", "SuccessCallback", "PARSE_FAILURE_MARKER"]
