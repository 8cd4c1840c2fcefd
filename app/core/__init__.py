"""Core app configuration, database, cache and security."""

from app.core.config import get_settings, settings
from app.core.database import Database, get_db

__all__ = ["Database", "get_settings", "settings", "get_db"]
