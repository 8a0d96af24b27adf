"""Settings persistence: cache, store, application settings and backups."""

from core.settings.app_settings import (
    APP_SETTING_FIELDS,
    AppSettingsFacade,
    SettingField,
    camel_to_snake,
)
from core.settings.backups import BackupManager
from core.settings.cache import CacheEntry, SettingsCache
from core.settings.store import (
    DECRYPT_ERROR_SENTINEL,
    ENCRYPTED_SENTINEL,
    SENSITIVE_KEYS,
    SettingsStore,
)

__all__ = [
    "APP_SETTING_FIELDS",
    "AppSettingsFacade",
    "SettingField",
    "camel_to_snake",
    "BackupManager",
    "CacheEntry",
    "SettingsCache",
    "DECRYPT_ERROR_SENTINEL",
    "ENCRYPTED_SENTINEL",
    "SENSITIVE_KEYS",
    "SettingsStore",
]
