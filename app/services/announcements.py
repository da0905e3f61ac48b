from sqlmodel import Session, select

from app.core.errors import NotFound, ValidationFailure
from app.models import Announcement


def create_announcement(db: Session, title: str, message: str) -> Announcement:
    title = (title or "").strip()
    message = (message or "").strip()
    if not title:
        raise ValidationFailure("Title is required.")
    if not message:
        raise ValidationFailure("Message is required.")
    announcement = Announcement(title=title, message=message)
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


def _newest_first(stmt):
    return stmt.order_by(Announcement.created_at.desc(), Announcement.id.desc())


def list_public_announcements(db: Session) -> list[Announcement]:
    stmt = _newest_first(select(Announcement).where(Announcement.is_active == True))  # noqa: E712
    return list(db.exec(stmt).all())


def list_all_announcements(db: Session) -> list[Announcement]:
    return list(db.exec(_newest_first(select(Announcement))).all())


def set_announcement_active(db: Session, announcement_id: int, is_active: bool) -> Announcement:
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise NotFound("Announcement not found")
    announcement.is_active = is_active
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


def delete_announcement(db: Session, announcement_id: int) -> bool:
    """Hard delete. Returns False when there was nothing to delete."""
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        return False
    db.delete(announcement)
    db.commit()
    return True
