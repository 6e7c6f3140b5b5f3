"""Shared test helpers and stub classes.

Import from here instead of duplicating these classes in individual test files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass
class StubRuntime:
    """Scripted code-generation runtime.

    Set ``lines`` to resume through ``success`` or ``failure`` to resume
    through ``fail``. ``initialize_results`` feeds successive ``initialize``
    calls; once exhausted every call returns ``reinitialize_ok``.
    """

    lines: Sequence[str] = ()
    failure: str | None = None
    initialized: bool = True
    initialize_results: list[bool] = field(default_factory=list)
    reinitialize_ok: bool = True
    initialize_error: Exception | None = None
    calls: list[dict] = field(default_factory=list)
    initialize_calls: int = 0

    @property
    def is_initialized(self) -> bool:
        return self.initialized

    def initialize(self) -> bool:
        self.initialize_calls += 1
        if self.initialize_error is not None:
            raise self.initialize_error
        result = self.initialize_results.pop(0) if self.initialize_results else self.reinitialize_ok
        self.initialized = result
        return result

    def quicktype(self, json_text, content_type, just_types, fail, success) -> None:
        self.calls.append({"json": json_text, "content_type": content_type, "just_types": just_types})
        if self.failure is not None:
            fail(self.failure)
        else:
            success(list(self.lines))
