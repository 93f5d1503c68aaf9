from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

# --------------------------------
# Settings

# Resend API
RESEND_API_URL = "https://api.resend.com"
REQUEST_TIMEOUT_SECONDS = 10.0

# Report content
DEFAULT_REPORT_PERIOD = "Weekly"
DEFAULT_REPORTS_DIR = "./reports"
REPORT_EXTENSIONS = (".md", ".html")

# Domain part of inline attachment content ids
CONTENT_ID_DOMAIN = "example.com"

_TRUTHY = {"1", "true", "yes", "on"}
# --------------------------------


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or invalid."""


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def parse_recipients(raw: str) -> List[str]:
    """
    Parse RECIPIENT_EMAIL.

    A value starting with "[" is read as a JSON array of addresses. Anything
    else, including a value that fails to parse as JSON, is a single address.
    """
    value = raw.strip()
    if value.startswith("["):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            return [value]
        if not isinstance(parsed, list):
            return [value]
        recipients = [str(entry).strip() for entry in parsed if str(entry).strip()]
        if not recipients:
            raise ConfigurationError("RECIPIENT_EMAIL must contain at least one address.")
        return recipients
    return [value]


@dataclass(frozen=True)
class Settings:
    api_key: str
    sender_email: str
    recipients: List[str]
    report_period: str = DEFAULT_REPORT_PERIOD
    reports_root: Path = Path(DEFAULT_REPORTS_DIR)
    debug: bool = False
    api_base_url: str = RESEND_API_URL
    request_timeout: float = REQUEST_TIMEOUT_SECONDS

    @property
    def report_dir(self) -> Path:
        return self.reports_root / self.report_period.lower()

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        source = os.environ if env is None else env

        def require(*names: str) -> str:
            for name in names:
                value = source.get(name)
                if value is not None and value.strip():
                    return value.strip()
            raise ConfigurationError(f"Environment variable {names[0]} is required.")

        def optional_with_default(name: str, default: str) -> str:
            value = source.get(name)
            if value is None or not value.strip():
                return default
            return value.strip()

        api_key = require("RESEND_API_KEY", "API_KEY")
        if not api_key.isascii():
            # Sent as an HTTP header, which must be ASCII.
            raise ConfigurationError("RESEND_API_KEY must contain only ASCII characters.")
        sender_email = require("SENDER_EMAIL")
        recipients = parse_recipients(require("RECIPIENT_EMAIL"))

        return Settings(
            api_key=api_key,
            sender_email=sender_email,
            recipients=recipients,
            report_period=optional_with_default("REPORT_PERIOD", DEFAULT_REPORT_PERIOD),
            reports_root=Path(optional_with_default("REPORTS_DIR", DEFAULT_REPORTS_DIR)),
            debug=is_truthy(source.get("DEBUG")),
            api_base_url=optional_with_default("RESEND_API_URL", RESEND_API_URL),
        )
