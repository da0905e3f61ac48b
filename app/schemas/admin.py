from datetime import datetime

from pydantic import BaseModel, field_validator

from app.core.permissions import Capability


def _check_username(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("Username is required.")
    return v


def _check_password(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters.")
    return v


class AdminCreate(BaseModel):
    username: str
    password: str
    permissions: dict[Capability, bool] = {}

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _check_username(v)

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        return _check_password(v)


class AdminUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""
    username: str | None = None
    password: str | None = None
    permissions: dict[Capability, bool] | None = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str | None) -> str | None:
        return None if v is None else _check_username(v)

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str | None) -> str | None:
        return None if v is None else _check_password(v)


class PermissionsUpdate(BaseModel):
    permissions: dict[Capability, bool]


class AdminResponse(BaseModel):
    id: int
    username: str
    role: str
    permissions: dict[str, bool]
    created_at: datetime | None = None
