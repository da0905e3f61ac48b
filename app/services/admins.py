"""Admin accounts: login check, superadmin-managed CRUD and the bootstrap seed."""
import logging
from collections.abc import Mapping

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import AuthenticationFailure, Conflict, NotFound
from app.core.permissions import Capability, Role, normalize_permissions
from app.core.security import hash_password, verify_password
from app.models import AdminUser

log = logging.getLogger("storefront.admins")


def get_by_username(db: Session, username: str) -> AdminUser | None:
    return db.exec(select(AdminUser).where(AdminUser.username == username)).first()


def authenticate(db: Session, username: str, password: str) -> AdminUser:
    user = get_by_username(db, (username or "").strip())
    if not user or not verify_password(password or "", user.hashed_password):
        raise AuthenticationFailure()
    return user


def create_admin(
    db: Session,
    username: str,
    password: str,
    permissions: Mapping[Capability | str, bool] | None = None,
) -> AdminUser:
    """New accounts always get the plain admin role."""
    if get_by_username(db, username):
        raise Conflict("Username already exists")
    user = AdminUser(
        username=username,
        hashed_password=hash_password(password),
        role=Role.ADMIN.value,
        permissions=normalize_permissions(permissions),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Username already exists") from e
    db.refresh(user)
    log.info("admin created id=%s username=%s", user.id, user.username)
    return user


def list_admins(db: Session) -> list[AdminUser]:
    stmt = select(AdminUser).where(AdminUser.role == Role.ADMIN.value).order_by(AdminUser.created_at.desc())
    return list(db.exec(stmt).all())


def get_managed_admin(db: Session, admin_id: int) -> AdminUser:
    """Admin-role record by id; the superadmin is never a management target."""
    user = db.get(AdminUser, admin_id)
    if not user or user.role != Role.ADMIN.value:
        raise NotFound("Admin not found")
    return user


def replace_permissions(db: Session, admin_id: int, permissions: Mapping[Capability | str, bool]) -> AdminUser:
    # Whole-map replace, last write wins
    user = get_managed_admin(db, admin_id)
    user.permissions = normalize_permissions(permissions)
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("permissions replaced admin_id=%s permissions=%s", user.id, user.permissions)
    return user


def update_admin(
    db: Session,
    admin_id: int,
    username: str | None = None,
    password: str | None = None,
    permissions: Mapping[Capability | str, bool] | None = None,
) -> AdminUser:
    user = get_managed_admin(db, admin_id)
    if username is not None and username != user.username:
        if get_by_username(db, username):
            raise Conflict("Username already exists")
        user.username = username
    if password is not None:
        user.hashed_password = hash_password(password)
    if permissions is not None:
        user.permissions = normalize_permissions(permissions)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Username already exists") from e
    db.refresh(user)
    return user


def delete_admin(db: Session, admin_id: int) -> None:
    user = get_managed_admin(db, admin_id)
    db.delete(user)
    db.commit()
    log.info("admin deleted id=%s", admin_id)


def seed_superadmin(db: Session, username: str, password: str) -> AdminUser | None:
    """Creates the bootstrap superadmin unless one already exists. Returns the new record or None."""
    existing = db.exec(select(AdminUser).where(AdminUser.role == Role.SUPERADMIN.value)).first()
    if existing:
        return None
    if get_by_username(db, username):
        raise Conflict(f"Username {username!r} is taken by a non-superadmin account")
    user = AdminUser(
        username=username,
        hashed_password=hash_password(password),
        role=Role.SUPERADMIN.value,
        permissions={},
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    log.info("superadmin seeded username=%s", username)
    return user
