from .admin_user import AdminUser
from .announcement import Announcement
from .push_subscription import PushSubscription

__all__ = [
    "AdminUser",
    "Announcement",
    "PushSubscription",
]
