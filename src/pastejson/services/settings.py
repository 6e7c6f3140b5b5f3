"""Settings dataclass and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping

from cryptography.fernet import Fernet, InvalidToken

__all__ = [
    "Settings",
    "SettingsStore",
    "SecretVault",
    "ENV_OVERRIDES",
    "parse_assignments",
    "parse_setting",
    "redact_secret",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".pastejson"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
ENV_OVERRIDES: Mapping[str, str] = {
    "PASTEJSON_QUICKTYPE_PATH": "quicktype_path",
    "PASTEJSON_TOP_LEVEL": "top_level_name",
    "PASTEJSON_RUNTIME_TIMEOUT": "runtime_timeout",
    "PASTEJSON_REQUEST_TIMEOUT": "request_timeout",
    "PASTEJSON_DEBUG_LOGGING": "debug_logging",
    "SLACK_WEBHOOK": "slack_webhook",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_NULL_VALUES = {"", "none", "null"}
_WEBHOOK_FIELD = "slack_webhook_ciphertext"


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions."""

    quicktype_path: str = "quicktype"
    top_level_name: str = "TopLevel"
    runtime_timeout: float | None = None
    slack_webhook: str = ""
    slack_channel: str = "#notifications"
    slack_username: str = "App Center"
    slack_icon_url: str = "https://pbs.twimg.com/profile_images/881784177422725121/hXRP69QY_200x200.jpg"
    appcenter_org: str = "quicktype"
    appcenter_app: str = "quiktype-xcode"
    tester_app: str = "quicktype-xcode"
    tester_group: str = "xcode testers"
    request_timeout: float = 10.0
    max_retries: int = 1
    retry_min_seconds: float = 0.5
    retry_max_seconds: float = 5.0
    debug_logging: bool = False


class SecretVault:
    """Encrypts the webhook URL with a symmetric Fernet key stored on disk."""

    name = "fernet"

    def __init__(self, key_path: Path | None = None) -> None:
        self._key_path = key_path or (_SETTINGS_DIR / "settings.key")
        self._fernet: Fernet | None = None

    @property
    def strategy(self) -> str:
        return self.name

    def encrypt(self, secret: str) -> str:
        if not secret:
            return ""
        token = self._get_fernet().encrypt(secret.encode("utf-8"))
        return f"{self.name}:{token.decode('ascii')}"

    def decrypt(self, token: str | None) -> str:
        if not token:
            return ""
        prefix, _, payload = token.partition(":")
        if prefix != self.name or not payload:
            raise ValueError(f"Unknown secret token prefix {prefix!r}")
        try:
            raw = self._get_fernet().decrypt(payload.encode("ascii"))
        except InvalidToken as exc:
            raise ValueError("Invalid Fernet token") from exc
        return raw.decode("utf-8")

    def _get_fernet(self) -> Fernet:
        if self._fernet is None:
            self._fernet = Fernet(self._load_or_create_key())
        return self._fernet

    def _load_or_create_key(self) -> bytes:
        path = self._key_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists():
            return path.read_bytes().strip()
        key = Fernet.generate_key()
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_bytes(key)
        if os.name != "nt":  # pragma: no cover - depends on OS
            os.chmod(tmp_path, 0o600)
        tmp_path.replace(path)
        return key


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None, *, vault: SecretVault | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH
        self._vault = vault or SecretVault(key_path=self._path.with_suffix(".key"))

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    @property
    def vault(self) -> SecretVault:
        return self._vault

    def read(self) -> Settings:
        """Return only what is persisted on disk, without any overrides."""

        payload = self._read_payload()
        if not payload:
            return Settings()
        webhook = self._decrypt_webhook(payload.pop(_WEBHOOK_FIELD, None))
        try:
            settings = Settings(**_filter_fields(payload))
        except TypeError as exc:
            LOGGER.warning("Settings payload contained unexpected data: %s", exc)
            settings = Settings()
        LOGGER.debug("Settings loaded from %s", self._path)
        return replace(settings, slack_webhook=webhook) if webhook else settings

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, then apply CLI and environment overrides."""

        settings = self.read()
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")
        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        body = json.dumps(self._serialize(settings), indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _serialize(self, settings: Settings) -> Dict[str, Any]:
        data = asdict(settings)
        webhook = data.pop("slack_webhook", "") or ""
        if webhook:
            data[_WEBHOOK_FIELD] = self._vault.encrypt(webhook)
        data["version"] = _SETTINGS_VERSION
        data["secret_backend"] = self._vault.strategy
        return data

    def _decrypt_webhook(self, ciphertext: str | None) -> str:
        if not ciphertext:
            return ""
        try:
            return self._vault.decrypt(ciphertext)
        except ValueError as exc:
            LOGGER.warning("Unable to decrypt chat webhook: %s", exc)
            return ""

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            return json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {field.name for field in fields(Settings)}
        filtered = {key: value for key, value in overrides.items() if key in allowed and value is not None}
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None:
                continue
            try:
                overrides[field_name] = parse_setting(field_name, raw)
            except ValueError as exc:
                LOGGER.warning("Ignoring environment override %s: %s", env_name, exc)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {field.name for field in fields(Settings)} - {"slack_webhook"}
    return {key: value for key, value in payload.items() if key in allowed}


def parse_setting(name: str, raw: str) -> Any:
    """Convert the text form of setting ``name`` to the field's type.

    Raises ``ValueError`` for unknown names and unparseable values.
    """

    kinds = {field.name: field.type for field in fields(Settings)}
    if name not in kinds:
        raise ValueError(f"Unknown setting '{name}'.")
    kind = str(kinds[name])
    value = raw.strip()
    if kind == "str":
        return value
    if kind.endswith("| None") and value.lower() in _NULL_VALUES:
        return None
    if kind.startswith("bool"):
        lowered = value.lower()
        if lowered in _TRUE_VALUES or lowered in _FALSE_VALUES:
            return lowered in _TRUE_VALUES
        raise ValueError(f"'{raw}' is not a boolean for {name}.")
    if kind.startswith("int"):
        return int(value, 10)
    return float(value)


def parse_assignments(items: Iterable[str]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` strings into typed setting values."""

    parsed: Dict[str, Any] = {}
    for item in items:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"'{item}' must use KEY=VALUE syntax.")
        parsed[key.strip()] = parse_setting(key.strip(), raw)
    return parsed


def redact_secret(value: str) -> str:
    stripped = (value or "").strip()
    if not stripped:
        return ""
    if len(stripped) <= 4:
        return "*" * len(stripped)
    return f"{stripped[:2]}{'*' * (len(stripped) - 4)}{stripped[-2:]}"
