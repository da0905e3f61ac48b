from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.rate_limit import limiter
from app.schemas import PushSubscriptionCreate, SubscribeResponse
from app.services import push as push_service

router = APIRouter(prefix="/api", tags=["push"])


def subscribe_limit() -> str:
    return f"{get_settings().rate_limit_per_minute}/minute"


@router.get("/push/public-key")
def public_key(request: Request):
    """VAPID application server key for pushManager.subscribe(); empty when push is off."""
    return {"publicKey": request.app.state.settings.vapid_public_key}


@router.post("/subscribe", response_model=SubscribeResponse, status_code=201)
@limiter.limit(subscribe_limit)
def subscribe(
    request: Request,
    body: PushSubscriptionCreate,
    db: Session = Depends(get_db),
):
    _, created = push_service.register_subscription(db, body.endpoint, body.keys.p256dh, body.keys.auth)
    if not created:
        return JSONResponse(status_code=200, content=SubscribeResponse(created=False).model_dump())
    return SubscribeResponse(created=True)
