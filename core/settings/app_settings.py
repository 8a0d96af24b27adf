"""Application settings schema and its mapping onto the settings store.

The UI works with camelCase field names (``newsApiKey``); the store keeps
snake_case keys (``news_api_key``). API credentials are encrypted on
write.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.exceptions import InvalidSettingValue, SettingsError
from core.settings.store import SettingsStore
from utils.logger import get_logger, log_payload

logger = get_logger(__name__)

_UPPERCASE = re.compile(r"([A-Z])")


def camel_to_snake(name: str) -> str:
    """Insert an underscore before every uppercase letter, then lowercase."""
    return _UPPERCASE.sub(r"_\1", name).lower()


@dataclass(frozen=True)
class SettingField:
    """One named application setting and its default."""

    name: str
    default: Any = None
    sensitive: bool = False
    choices: Optional[Tuple[Any, ...]] = None

    @property
    def key(self) -> str:
        return camel_to_snake(self.name)


APP_SETTING_FIELDS: Tuple[SettingField, ...] = (
    # API keys (stored encrypted)
    SettingField("newsApiKey", sensitive=True),
    SettingField("openaiApiKey", sensitive=True),
    SettingField("xApiKey", sensitive=True),
    SettingField("xApiSecret", sensitive=True),
    SettingField("xBearerToken", sensitive=True),
    # Collection
    SettingField("autoCollectionEnabled", False),
    SettingField("collectionInterval", 24),  # hours
    SettingField("maxArticlesPerTheme", 20),
    # Generation
    SettingField("defaultTone", "casual", choices=("casual", "formal", "explanatory")),
    SettingField("maxCharacterCount", 280),
    SettingField("includeHashtagSuggestions", True),
    # Notifications
    SettingField("enableNotifications", True),
    SettingField("reminderEnabled", True),
    SettingField("defaultReminderMinutes", 10),
    # UI
    SettingField("theme", "auto", choices=("light", "dark", "auto")),
    SettingField("sidebarCollapsed", False),
    SettingField("compactMode", False),
    # Data management
    SettingField("autoBackupEnabled", True),
    SettingField("backupInterval", 7),  # days
    SettingField("maxBackups", 5),
    # Security
    SettingField("sessionTimeout", 30),  # minutes
    SettingField("requireConfirmation", True),
)


class AppSettingsFacade:
    """Typed view of the application settings over a SettingsStore."""

    def __init__(
        self,
        store: SettingsStore,
        fields: Tuple[SettingField, ...] = APP_SETTING_FIELDS,
    ):
        self.store = store
        self.fields = fields
        self._by_name = {field.name: field for field in fields}

    def defaults(self) -> Dict[str, Any]:
        """Schema defaults keyed by field name."""
        return {field.name: field.default for field in self.fields}

    def get_app_settings(self) -> Dict[str, Any]:
        """
        Read every application setting.

        A field that cannot be read falls back to its default; the other
        fields are still read.
        """
        settings: Dict[str, Any] = {}
        for field in self.fields:
            try:
                settings[field.name] = self.store.get(field.key, field.default)
            except SettingsError as e:
                logger.error(f"Failed to read app setting {field.name}: {e}")
                settings[field.name] = field.default
        return settings

    def update_app_settings(self, settings: Mapping[str, Any]) -> List[str]:
        """
        Write the given fields.

        Every value is validated before anything is written. Fields whose
        store key is sensitive are encrypted.

        Returns:
            Store keys that were written

        Raises:
            InvalidSettingValue: If a field is outside its allowed choices
            EncryptionError, PersistenceError: If a write fails
        """
        for name, value in settings.items():
            field = self._by_name.get(name)
            if field and field.choices and value is not None and value not in field.choices:
                raise InvalidSettingValue(name, value, list(field.choices))

        log_payload("Updating app settings", dict(settings))

        written: List[str] = []
        for name, value in settings.items():
            key = camel_to_snake(name)
            self.store.set(key, value, key in self.store.sensitive_keys)
            written.append(key)
        return written
