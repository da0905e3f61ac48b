from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlmodel import Session

from app.api.deps import CurrentAdmin, require_capability
from app.core.database import get_db
from app.core.permissions import Capability
from app.models import Announcement
from app.schemas import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate
from app.services import announcements as announcement_service
from app.services.push import build_payload, notify_announcement

router = APIRouter(prefix="/api", tags=["announcements"])

_can_manage = require_capability(Capability.ANNOUNCEMENTS)


def _announcement_response(a: Announcement) -> AnnouncementResponse:
    return AnnouncementResponse(
        id=a.id or 0,
        title=a.title,
        message=a.message,
        created_at=a.created_at,
        is_active=a.is_active,
    )


@router.get("/announcements", response_model=list[AnnouncementResponse])
def list_public(db: Session = Depends(get_db)):
    return [_announcement_response(a) for a in announcement_service.list_public_announcements(db)]


@router.get("/admin/announcements", response_model=list[AnnouncementResponse])
def list_all(
    _: CurrentAdmin = Depends(_can_manage),
    db: Session = Depends(get_db),
):
    return [_announcement_response(a) for a in announcement_service.list_all_announcements(db)]


@router.post("/announcements", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
def create(
    request: Request,
    body: AnnouncementCreate,
    background_tasks: BackgroundTasks,
    _: CurrentAdmin = Depends(_can_manage),
    db: Session = Depends(get_db),
):
    """Stores the announcement; push fan-out runs after the response is sent."""
    announcement = announcement_service.create_announcement(db, body.title, body.message)
    state = request.app.state
    payload = build_payload(announcement, state.settings.push_icon)
    background_tasks.add_task(notify_announcement, state.engine, state.push_sender, payload)
    return _announcement_response(announcement)


@router.patch("/announcements/{announcement_id}", response_model=AnnouncementResponse)
def set_active(
    announcement_id: int,
    body: AnnouncementUpdate,
    _: CurrentAdmin = Depends(_can_manage),
    db: Session = Depends(get_db),
):
    announcement = announcement_service.set_announcement_active(db, announcement_id, body.is_active)
    return _announcement_response(announcement)


@router.delete("/announcements/{announcement_id}")
def delete(
    announcement_id: int,
    _: CurrentAdmin = Depends(_can_manage),
    db: Session = Depends(get_db),
):
    announcement_service.delete_announcement(db, announcement_id)
    return {"message": "Announcement deleted"}
