"""Admin account management. Superadmin only, except /me."""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.api.deps import CurrentAdmin, get_current_admin, require_superadmin
from app.core.database import get_db
from app.core.permissions import effective_permissions
from app.models import AdminUser
from app.schemas import AdminCreate, AdminResponse, AdminUpdate, CurrentAdminResponse, PermissionsUpdate
from app.services import admins as admin_service

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _admin_response(user: AdminUser) -> AdminResponse:
    return AdminResponse(
        id=user.id or 0,
        username=user.username,
        role=user.role,
        permissions=dict(user.permissions or {}),
        created_at=user.created_at,
    )


@router.get("/me", response_model=CurrentAdminResponse)
def me(admin: CurrentAdmin = Depends(get_current_admin)):
    return CurrentAdminResponse(
        id=admin.id,
        username=admin.username,
        role=admin.role.value,
        permissions=admin.permissions,
        effective_permissions=effective_permissions(admin.role, admin.permissions),
    )


@router.post("/create", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def create_admin(
    body: AdminCreate,
    _: CurrentAdmin = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    user = admin_service.create_admin(db, body.username, body.password, body.permissions)
    return _admin_response(user)


@router.get("/list", response_model=list[AdminResponse])
def list_admins(
    _: CurrentAdmin = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    return [_admin_response(u) for u in admin_service.list_admins(db)]


@router.patch("/{admin_id}/permissions", response_model=AdminResponse)
def update_permissions(
    admin_id: int,
    body: PermissionsUpdate,
    _: CurrentAdmin = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    user = admin_service.replace_permissions(db, admin_id, body.permissions)
    return _admin_response(user)


@router.put("/{admin_id}", response_model=AdminResponse)
def update_admin(
    admin_id: int,
    body: AdminUpdate,
    _: CurrentAdmin = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    user = admin_service.update_admin(
        db,
        admin_id,
        username=body.username,
        password=body.password,
        permissions=body.permissions,
    )
    return _admin_response(user)


@router.delete("/{admin_id}")
def delete_admin(
    admin_id: int,
    _: CurrentAdmin = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    admin_service.delete_admin(db, admin_id)
    return {"message": "Admin deleted"}
