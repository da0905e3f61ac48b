"""Browser push subscriptions (Web Push API)."""
from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class PushSubscription(SQLModel, table=True):
    __tablename__ = "push_subscriptions"
    id: int | None = Field(default=None, primary_key=True)
    endpoint: str = Field(unique=True, index=True)  # one row per browser endpoint
    p256dh: str  # client public key (base64url)
    auth: str  # auth secret (base64url)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), sa_type=DateTime(timezone=True))

    def to_subscription_info(self) -> dict:
        """Shape expected by pywebpush."""
        return {"endpoint": self.endpoint, "keys": {"p256dh": self.p256dh, "auth": self.auth}}
