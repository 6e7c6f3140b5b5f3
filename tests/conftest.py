"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from pastejson.editor.buffer import TextBuffer, TextSelection


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in (
        "SLACK_WEBHOOK",
        "APPCENTER_BRANCH",
        "APPCENTER_BUILD_ID",
        "PASTEJSON_DEBUG",
        "PASTEJSON_DEBUG_LOGGING",
        "PASTEJSON_QUICKTYPE_PATH",
        "PASTEJSON_TOP_LEVEL",
        "PASTEJSON_RUNTIME_TIMEOUT",
        "PASTEJSON_REQUEST_TIMEOUT",
        "PASTEJSON_SETTINGS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PASTEJSON_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def swift_buffer() -> TextBuffer:
    return TextBuffer(
        lines=["a", "b", "c"],
        content_type="public.swift-source",
        selections=[TextSelection.caret(1)],
    )
