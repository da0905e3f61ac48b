import logging

from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.errors import AuthenticationFailure
from app.core.rate_limit import get_client_ip, limiter
from app.core.security import create_access_token
from app.schemas import LoginRequest, LoginResponse
from app.services import admins as admin_service

log = logging.getLogger("storefront.auth")

router = APIRouter(prefix="/api", tags=["auth"])


def login_limit() -> str:
    """Evaluated per request from the process settings; the limiter is shared by every app."""
    return f"{get_settings().rate_limit_login_per_minute}/minute;100/hour"


@router.post("/login", response_model=LoginResponse)
@limiter.limit(login_limit)
def login(
    request: Request,
    body: LoginRequest,
    db: Session = Depends(get_db),
):
    try:
        user = admin_service.authenticate(db, body.username, body.password)
    except AuthenticationFailure:
        log.warning("failed_login ip=%s username=%s", get_client_ip(request), body.username or "-")
        raise
    settings = request.app.state.settings
    token = create_access_token(
        user.id,
        user.role,
        settings.secret_key,
        expire_days=settings.access_token_expire_days,
    )
    log.info("login admin_id=%s role=%s", user.id, user.role)
    return LoginResponse(
        username=user.username,
        role=user.role,
        permissions=dict(user.permissions or {}),
        token=token,
    )
