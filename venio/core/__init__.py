"""Core app configuration and database."""

from venio.core.config import get_settings, settings
from venio.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
