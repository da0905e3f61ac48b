from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env lives at the project root: app/core/config.py -> app/core -> app -> root
_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _ROOT / ".env"


class Settings(BaseSettings):
    secret_key: str = "change-me-in-production"
    database_url: str = "sqlite:///./storefront.db"
    # Comma separated origin list; "*" allows everything
    cors_origins: str = "*"
    access_token_expire_days: int = 30
    # Per-IP requests per minute (subscribe); login has its own tighter limit
    rate_limit_per_minute: int = 60
    rate_limit_login_per_minute: int = 5
    # Web Push (VAPID). Without the private key no notifications are sent.
    vapid_public_key: str = ""
    vapid_private_key: str = ""
    vapid_subject: str = "mailto:admin@example.com"
    push_icon: str = "/pwa-192x192.png"
    push_timeout_seconds: float = 10.0
    # Bootstrap superadmin, created at startup only if none exists
    superadmin_username: str = "superadmin"
    superadmin_password: str = ""
    environment: str = "development"
    log_level: str = "INFO"

    model_config = {
        "env_file": _ENV_FILE if _ENV_FILE.is_file() else ".env",
        "extra": "ignore",
    }

    @field_validator("vapid_public_key", "vapid_private_key", mode="before")
    @classmethod
    def strip_vapid_key(cls, v: str | None) -> str:
        """Keys pasted from a terminal often carry trailing whitespace."""
        return (v or "").strip()

    @property
    def push_configured(self) -> bool:
        return bool(self.vapid_private_key)

    def cors_origins_list(self) -> list[str]:
        if not self.cors_origins or self.cors_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings from the environment; apps may be built with their own."""
    return Settings()
