from datetime import datetime

from pydantic import BaseModel, field_validator


class AnnouncementCreate(BaseModel):
    title: str
    message: str

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Title is required.")
        return v

    @field_validator("message")
    @classmethod
    def message_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Message is required.")
        return v


class AnnouncementUpdate(BaseModel):
    is_active: bool


class AnnouncementResponse(BaseModel):
    id: int
    title: str
    message: str
    created_at: datetime
    is_active: bool
