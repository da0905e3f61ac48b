"""
Bearer-token gate for admin endpoints.

The token proves who is calling. What they may do is always read from the
current admin record: a role or permission change made by a superadmin
applies on the admin's next request, even though their token still carries
the role it was issued with.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.core.database import get_db
from app.core.errors import IdentityNotFound, InvalidToken, MissingToken, PermissionDenied
from app.core.permissions import Capability, Role, decide
from app.core.security import TokenError, verify_access_token
from app.models import AdminUser

log = logging.getLogger("storefront.auth")

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentAdmin:
    """Resolved identity handed to handlers; never carries the password hash."""

    id: int
    username: str
    role: Role
    permissions: dict[str, bool] = field(default_factory=dict)

    @property
    def is_superadmin(self) -> bool:
        return self.role is Role.SUPERADMIN

    def can(self, capability: Capability) -> bool:
        return decide(self.role, self.permissions, capability)


def get_token_subject(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> int:
    if not credentials or not credentials.credentials:
        raise MissingToken()
    try:
        claims = verify_access_token(credentials.credentials, request.app.state.settings.secret_key)
    except TokenError as e:
        log.info("rejected token path=%s reason=%s", request.url.path, type(e).__name__)
        raise InvalidToken() from e
    return claims.subject_id


def get_current_admin(
    subject_id: int = Depends(get_token_subject),
    db: Session = Depends(get_db),
) -> CurrentAdmin:
    user = db.get(AdminUser, subject_id)
    if not user:
        raise IdentityNotFound()
    return CurrentAdmin(
        id=user.id,
        username=user.username,
        role=Role(user.role),
        permissions=dict(user.permissions or {}),
    )


def require_superadmin(admin: CurrentAdmin = Depends(get_current_admin)) -> CurrentAdmin:
    if not admin.is_superadmin:
        log.info("superadmin-only denied admin_id=%s", admin.id)
        raise PermissionDenied("Access denied: Superadmin only")
    return admin


def require_capability(capability: Capability) -> Callable[..., CurrentAdmin]:
    def dependency(admin: CurrentAdmin = Depends(get_current_admin)) -> CurrentAdmin:
        if not admin.can(capability):
            log.info("capability denied admin_id=%s capability=%s", admin.id, capability.value)
            raise PermissionDenied(f"Access denied: '{capability.value}' permission is disabled")
        return admin

    return dependency
