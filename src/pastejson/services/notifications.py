"""Build-status notifications posted to a Slack-compatible webhook."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote

import httpx
from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..errors import NotificationError

LOGGER = logging.getLogger(__name__)

DEFAULT_ORG = "quicktype"
DEFAULT_APP = "quiktype-xcode"
DEFAULT_TESTER_APP = "quicktype-xcode"
DEFAULT_TESTER_GROUP = "xcode testers"
DEFAULT_CHANNEL = "#notifications"
DEFAULT_USERNAME = "App Center"
DEFAULT_ICON_URL = "https://pbs.twimg.com/profile_images/881784177422725121/hXRP69QY_200x200.jpg"


@dataclass(slots=True, frozen=True)
class BuildContext:
    """Identifies the CI build a notification talks about."""

    branch: str
    build_id: str
    org: str = DEFAULT_ORG
    app: str = DEFAULT_APP
    tester_app: str = DEFAULT_TESTER_APP
    tester_group: str = DEFAULT_TESTER_GROUP

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        org: str = DEFAULT_ORG,
        app: str = DEFAULT_APP,
        tester_app: str = DEFAULT_TESTER_APP,
        tester_group: str = DEFAULT_TESTER_GROUP,
    ) -> BuildContext:
        source = os.environ if env is None else env
        return cls(
            branch=source.get("APPCENTER_BRANCH", ""),
            build_id=source.get("APPCENTER_BUILD_ID", ""),
            org=org,
            app=app,
            tester_app=tester_app,
            tester_group=tester_group,
        )

    @property
    def build_url(self) -> str:
        return (
            f"https://appcenter.ms/orgs/{self.org}/apps/{self.app}"
            f"/build/branches/{self.branch}/builds/{self.build_id}"
        )

    @property
    def build_link(self) -> str:
        return f"<{self.build_url}|{self.app} {self.branch}#{self.build_id}>"

    @property
    def tester_url(self) -> str:
        # The install page lives under the correctly spelled app slug
        return (
            f"https://install.appcenter.ms/orgs/{self.org}/apps/{self.tester_app}"
            f"/distribution_groups/{quote(self.tester_group)}"
        )


def build_passed_message(context: BuildContext) -> str:
    return f"✓ Build {context.build_link} passed"


def build_failed_message(context: BuildContext) -> str:
    return f"💥 Build {context.build_link} failed"


def deployed_message(context: BuildContext) -> str:
    return f"✓ <{context.tester_url}|{context.app} ({context.branch})> distributed to testers"


@dataclass(slots=True)
class ChatNotifier:
    """Posts messages to a chat webhook as a form-encoded ``payload`` field."""

    webhook_url: str
    channel: str = DEFAULT_CHANNEL
    username: str = DEFAULT_USERNAME
    icon_url: str = DEFAULT_ICON_URL
    timeout: float = 10.0
    max_retries: int = 1
    retry_min_seconds: float = 0.5
    retry_max_seconds: float = 5.0
    transport: httpx.BaseTransport | None = None

    def payload(self, message: str) -> dict[str, Any]:
        return {
            "channel": self.channel,
            "username": self.username,
            "text": message,
            "icon_url": self.icon_url,
        }

    def notify(self, message: str) -> httpx.Response:
        """Send ``message`` and return the webhook response."""

        if not self.webhook_url:
            raise NotificationError(details="No chat webhook URL configured")

        form = {"payload": json.dumps(self.payload(message), ensure_ascii=False)}
        retrying = Retrying(
            stop=stop_after_attempt(max(1, int(self.max_retries))),
            wait=wait_exponential(multiplier=self.retry_min_seconds, max=self.retry_max_seconds),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = retrying(client.post, self.webhook_url, data=form)
        except httpx.TimeoutException as exc:
            raise NotificationError(details="Chat webhook timed out") from exc
        except (httpx.HTTPError, RetryError) as exc:
            raise NotificationError(details=f"Failed to reach chat webhook: {exc}") from exc

        if not response.is_success:
            snippet = (response.text or "").strip()[:120]
            raise NotificationError(
                details=f"Chat webhook responded with {response.status_code}: {snippet or response.reason_phrase}"
            )
        LOGGER.info("Posted notification to %s", self.channel)
        return response

    def notify_build_passed(self, context: BuildContext) -> httpx.Response:
        return self.notify(build_passed_message(context))

    def notify_build_failed(self, context: BuildContext) -> httpx.Response:
        return self.notify(build_failed_message(context))

    def notify_deployed(self, context: BuildContext) -> httpx.Response:
        return self.notify(deployed_message(context))


__all__ = [
    "BuildContext",
    "ChatNotifier",
    "build_passed_message",
    "build_failed_message",
    "deployed_message",
]
