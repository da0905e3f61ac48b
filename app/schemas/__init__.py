from .admin import AdminCreate, AdminResponse, AdminUpdate, PermissionsUpdate
from .announcement import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate
from .auth import CurrentAdminResponse, LoginRequest, LoginResponse
from .push import PushKeys, PushSubscriptionCreate, SubscribeResponse

__all__ = [
    "AdminCreate",
    "AdminResponse",
    "AdminUpdate",
    "AnnouncementCreate",
    "AnnouncementResponse",
    "AnnouncementUpdate",
    "CurrentAdminResponse",
    "LoginRequest",
    "LoginResponse",
    "PermissionsUpdate",
    "PushKeys",
    "PushSubscriptionCreate",
    "SubscribeResponse",
]
