"""Runtime adapter that drives the ``quicktype`` command-line tool."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Sequence

from ..editor.line_rules import profile_for
from .base import PARSE_FAILURE_MARKER, FailureCallback, SuccessCallback

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class QuicktypeRuntime:
    """Explicit handle around the quicktype executable.

    ``initialize`` resolves and probes the executable; ``reset`` forgets it so
    the next call starts from scratch.
    """

    executable: str = "quicktype"
    top_level: str = "TopLevel"
    timeout: float | None = None

    _resolved: str | None = field(default=None, init=False, repr=False)

    @property
    def is_initialized(self) -> bool:
        return self._resolved is not None

    def initialize(self) -> bool:
        """Resolve the executable and confirm it runs; return success."""

        self._resolved = None
        resolved = shutil.which(self.executable)
        if resolved is None:
            LOGGER.warning("quicktype executable %r not found on PATH", self.executable)
            return False
        try:
            proc = subprocess.run(
                [resolved, "--version"],
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            LOGGER.warning("quicktype probe failed: %s", exc)
            return False
        if proc.returncode != 0:
            LOGGER.warning("quicktype probe exited with %s: %s", proc.returncode, proc.stderr.strip())
            return False
        LOGGER.debug("quicktype initialized (%s, %s)", resolved, proc.stdout.strip())
        self._resolved = resolved
        return True

    def reset(self) -> None:
        self._resolved = None

    def command(self, content_type: str, just_types: bool) -> list[str]:
        """Build the argument vector for one generation request."""

        profile = profile_for(content_type)
        cmd = [
            self._resolved or self.executable,
            "--src-lang",
            "json",
            "--lang",
            profile.language,
            "--top-level",
            self.top_level,
        ]
        if just_types:
            cmd.append("--just-types")
        return cmd

    def quicktype(
        self,
        json_text: str,
        content_type: str,
        just_types: bool,
        fail: FailureCallback,
        success: SuccessCallback,
    ) -> None:
        """Generate code for ``json_text`` and resume through one callback."""

        try:
            json.loads(json_text)
        except ValueError as exc:
            fail(f"Error: {PARSE_FAILURE_MARKER}: {exc}")
            return

        cmd = self.command(content_type, just_types)
        LOGGER.debug("Running %s", cmd)
        try:
            proc = subprocess.run(
                cmd,
                input=json_text,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            fail(f"quicktype timed out after {self.timeout} seconds")
            return
        except OSError as exc:
            fail(f"Failed to launch quicktype: {exc}")
            return

        if proc.returncode != 0:
            fail((proc.stderr or proc.stdout or f"quicktype exited with {proc.returncode}").strip())
            return
        success(_split_output(proc.stdout))


def _split_output(stdout: str) -> Sequence[str]:
    lines = [line.rstrip("\r") for line in stdout.split("\n")]
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


__all__ = ["QuicktypeRuntime"]
