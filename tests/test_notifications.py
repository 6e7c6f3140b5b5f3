"""Tests for chat webhook build notifications."""

from __future__ import annotations

import json
from urllib.parse import parse_qs

import httpx
import pytest

from pastejson.errors import NotificationError
from pastejson.services.notifications import (
    BuildContext,
    ChatNotifier,
    build_failed_message,
    build_passed_message,
    deployed_message,
)

WEBHOOK = "https://hooks.slack.test/services/T000/B000/XXXX"
NO_WAIT = {"retry_min_seconds": 0.0, "retry_max_seconds": 0.0}


def _context() -> BuildContext:
    return BuildContext(branch="master", build_id="42")


def _capturing_transport(requests: list[httpx.Request], status_code: int = 200) -> httpx.MockTransport:
    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, text="ok" if status_code < 400 else "invalid_payload")

    return httpx.MockTransport(_handler)


def _payload(request: httpx.Request) -> dict:
    form = parse_qs(request.content.decode("utf-8"))
    return json.loads(form["payload"][0])


def test_build_context_urls() -> None:
    context = _context()

    assert context.build_url == (
        "https://appcenter.ms/orgs/quicktype/apps/quiktype-xcode/build/branches/master/builds/42"
    )
    assert context.build_link == f"<{context.build_url}|quiktype-xcode master#42>"
    assert context.tester_url == (
        "https://install.appcenter.ms/orgs/quicktype/apps/quicktype-xcode/distribution_groups/xcode%20testers"
    )


def test_build_context_reads_environment() -> None:
    context = BuildContext.from_env({"APPCENTER_BRANCH": "feature/x", "APPCENTER_BUILD_ID": "7"}, app="demo")

    assert context.branch == "feature/x"
    assert context.build_id == "7"
    assert context.app == "demo"


def test_build_context_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APPCENTER_BRANCH", "main")
    monkeypatch.setenv("APPCENTER_BUILD_ID", "99")

    assert BuildContext.from_env().build_link.endswith("|quiktype-xcode main#99>")


def test_canned_messages() -> None:
    context = _context()

    assert build_passed_message(context) == f"✓ Build {context.build_link} passed"
    assert build_failed_message(context) == f"💥 Build {context.build_link} failed"
    assert deployed_message(context) == f"✓ <{context.tester_url}|quiktype-xcode (master)> distributed to testers"
    assert deployed_message(context) == (
        "✓ <https://install.appcenter.ms/orgs/quicktype/apps/quicktype-xcode/distribution_groups/xcode%20testers"
        "|quiktype-xcode (master)> distributed to testers"
    )


def test_notify_posts_form_encoded_payload() -> None:
    requests: list[httpx.Request] = []
    notifier = ChatNotifier(webhook_url=WEBHOOK, transport=_capturing_transport(requests))

    notifier.notify_build_passed(_context())

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == WEBHOOK
    assert request.headers["content-type"].startswith("application/x-www-form-urlencoded")
    assert _payload(request) == {
        "channel": "#notifications",
        "username": "App Center",
        "text": build_passed_message(_context()),
        "icon_url": notifier.icon_url,
    }


def test_notify_deployed_and_failed_use_their_templates() -> None:
    requests: list[httpx.Request] = []
    notifier = ChatNotifier(webhook_url=WEBHOOK, channel="#ci", transport=_capturing_transport(requests))

    notifier.notify_build_failed(_context())
    notifier.notify_deployed(_context())

    texts = [_payload(request)["text"] for request in requests]
    assert texts == [build_failed_message(_context()), deployed_message(_context())]
    assert _payload(requests[0])["channel"] == "#ci"


def test_missing_webhook_raises() -> None:
    with pytest.raises(NotificationError) as excinfo:
        ChatNotifier(webhook_url="").notify("hello")

    assert excinfo.value.details == "No chat webhook URL configured"
    assert excinfo.value.to_dict()["domain"] == "notifications"


def test_error_status_raises() -> None:
    notifier = ChatNotifier(webhook_url=WEBHOOK, transport=_capturing_transport([], status_code=400))

    with pytest.raises(NotificationError) as excinfo:
        notifier.notify("hello")

    assert "400" in excinfo.value.details


def test_transport_errors_are_retried_then_raised() -> None:
    attempts: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("refused", request=request)

    notifier = ChatNotifier(webhook_url=WEBHOOK, max_retries=2, transport=httpx.MockTransport(_handler), **NO_WAIT)

    with pytest.raises(NotificationError) as excinfo:
        notifier.notify("hello")

    assert excinfo.value.details.startswith("Failed to reach chat webhook")
    assert len(attempts) == 2


def test_transient_error_recovers_on_retry() -> None:
    attempts: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, text="ok")

    notifier = ChatNotifier(webhook_url=WEBHOOK, max_retries=3, transport=httpx.MockTransport(_handler), **NO_WAIT)

    response = notifier.notify("hello")

    assert response.status_code == 200
    assert len(attempts) == 2
