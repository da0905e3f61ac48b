from pydantic import BaseModel, field_validator


class PushKeys(BaseModel):
    p256dh: str
    auth: str

    @field_validator("p256dh", "auth")
    @classmethod
    def key_not_blank(cls, v: str) -> str:
        # A record without keys can never be encrypted for, and is never pruned
        v = (v or "").strip()
        if not v:
            raise ValueError("Subscription keys are required.")
        return v


class PushSubscriptionCreate(BaseModel):
    """PushSubscription.toJSON() from the browser; expirationTime is ignored."""
    endpoint: str
    keys: PushKeys

    @field_validator("endpoint")
    @classmethod
    def endpoint_is_url(cls, v: str) -> str:
        v = (v or "").strip()
        if not v.startswith("https://") and not v.startswith("http://"):
            raise ValueError("Subscription endpoint must be a URL.")
        return v


class SubscribeResponse(BaseModel):
    subscribed: bool = True
    created: bool
