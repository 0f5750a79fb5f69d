"""Runtime settings read once from the environment."""

import os
from dataclasses import dataclass

from pickup.exceptions import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}

LIFF_BASE_URL = "https://liff.line.me/"


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def _normalise_liff_url(value: str) -> str:
    value = value.strip()
    if not value:
        return ""
    if value.startswith("http://") or value.startswith("https://"):
        return value
    return f"{LIFF_BASE_URL}{value}"


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    line_channel_access_token: str = ""
    line_login_channel_id: str = ""
    user_session_secret: str = ""
    store_session_secret: str = ""
    user_liff_url: str = ""
    cron_secret: str = ""
    thank_you_completed_enabled: bool = False
    pickup_reminder_enabled: bool = False
    database_url: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=os.getenv("PROTEAN_ENV", "development").lower(),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY", ""),
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET", ""),
            line_channel_access_token=os.getenv("LINE_CHANNEL_ACCESS_TOKEN", ""),
            line_login_channel_id=os.getenv("LINE_LOGIN_CHANNEL_ID") or os.getenv("LINE_CHANNEL_ID", ""),
            user_session_secret=os.getenv("USER_SESSION_SECRET", ""),
            store_session_secret=os.getenv("STORE_SESSION_SECRET", ""),
            user_liff_url=_normalise_liff_url(os.getenv("USER_LIFF_ID", "")),
            cron_secret=os.getenv("CRON_SECRET", ""),
            thank_you_completed_enabled=_flag("THANK_YOU_COMPLETED_ENABLED"),
            pickup_reminder_enabled=_flag("PICKUP_REMINDER_ENABLED"),
            database_url=os.getenv("DATABASE_URL", ""),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def require(self, name: str) -> str:
        """Return a non-empty setting or fail with ``ConfigurationError``."""
        value = getattr(self, name, "")
        if not value:
            raise ConfigurationError(message=f"Missing required setting: {name.upper()}")
        return value
