"""Database repositories."""

from database.repositories.base import BaseRepository
from database.repositories.settings_repository import SettingsRepository

__all__ = [
    "BaseRepository",
    "SettingsRepository",
]
