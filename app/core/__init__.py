from .config import Settings, get_settings
from .database import get_db, init_db

__all__ = ["Settings", "get_settings", "get_db", "init_db"]
