"""Settings repository for database operations."""

from typing import Optional

from core.exceptions import SettingNotFoundError
from database.repositories.base import BaseRepository
from models.setting import Setting, utcnow


class SettingsRepository(BaseRepository[Setting]):
    """Repository for Setting rows.

    Values arrive already encoded (and encrypted when needed); this class
    only moves rows in and out of the ``settings`` table.
    """

    model_class = Setting
    primary_key = "key"

    def upsert(
        self,
        key: str,
        value: Optional[str],
        is_encrypted: bool = False,
        value_type: Optional[str] = None,
    ) -> Setting:
        """Insert a setting or update its value, flags and timestamp."""
        with self._session("upsert") as session:
            setting = session.query(Setting).filter(Setting.key == key).first()
            if setting:
                setting.value = value
                setting.is_encrypted = is_encrypted
                setting.value_type = value_type
                setting.updated_at = utcnow()
            else:
                setting = Setting(
                    key=key,
                    value=value,
                    is_encrypted=is_encrypted,
                    value_type=value_type,
                )
                session.add(setting)

            session.flush()
            session.refresh(setting)
            session.expunge(setting)
            return setting

    def delete_existing(self, key: str) -> None:
        """Delete a setting, raising SettingNotFoundError if it is absent."""
        if not self.delete(key):
            raise SettingNotFoundError(key)
