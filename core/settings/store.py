"""Settings store with transparent encryption and a read-through cache.

Reads favor availability: a missing row, an undecryptable value or a
database error all log and return the caller's default. Writes favor
correctness: encryption and persistence failures propagate so the UI
never reports a change that was not saved.

Bulk operations (import, restore) are not transactional. Each key is
written on its own, so a failure part way through leaves earlier keys
updated.

A store-level lock is held from the row read or write to the matching
cache update, so a concurrent delete or set cannot leave the cache
holding a value the table no longer has. Cached values are copied on
the way out.

Usage:
    store = SettingsStore(SettingsRepository(session_factory), codec, SettingsCache())
    store.set("max_character_count", 280)
    store.get("max_character_count", 0)  # 280
"""

import copy
import json
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from core.exceptions import (
    DecryptionError,
    InvalidBackupFormat,
    InvalidSettingValue,
    SettingsError,
    SettingsImportError,
)
from core.security.codec import EncryptionCodec
from core.settings.cache import SettingsCache
from core.settings.values import decode_value, encode_value
from database.repositories.settings_repository import SettingsRepository
from models.setting import Setting
from utils.logger import get_logger, log_setting_write

logger = get_logger(__name__)

# Placeholders written into exported data
ENCRYPTED_SENTINEL = "[ENCRYPTED]"
DECRYPT_ERROR_SENTINEL = "[DECRYPT_ERROR]"
SENTINELS = frozenset({ENCRYPTED_SENTINEL, DECRYPT_ERROR_SENTINEL})

BACKUP_FORMAT_VERSION = "1.0.0"

# Keys that are always stored encrypted
SENSITIVE_KEYS = frozenset({
    "news_api_key",
    "openai_api_key",
    "x_api_key",
    "x_api_secret",
    "x_bearer_token",
})


class SettingsStore:
    """
    Key/value settings backed by the settings table.

    Args:
        repository: Row access for the settings table
        codec: Encryption codec for sensitive values
        cache: Read-through cache of decoded values
        sensitive_keys: Keys encrypted on import
    """

    def __init__(
        self,
        repository: SettingsRepository,
        codec: EncryptionCodec,
        cache: Optional[SettingsCache] = None,
        sensitive_keys: Iterable[str] = SENSITIVE_KEYS,
    ):
        self.repository = repository
        self.codec = codec
        self.cache = cache if cache is not None else SettingsCache()
        self.sensitive_keys = frozenset(sensitive_keys)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Single values
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key
            default: Returned when the setting is absent, NULL or unreadable

        Returns:
            The decoded value or ``default``
        """
        try:
            with self._lock:
                cached = self.cache.get(key)
                if cached is not None:
                    return copy.deepcopy(cached.value)

                setting = self.repository.get(key)
                if setting is None or setting.value is None:
                    return default

                value = self._read(setting)
                self.cache.set(key, value, bool(setting.is_encrypted))
                return copy.deepcopy(value)
        except (SettingsError, ValueError) as e:
            logger.error(f"Failed to get setting {key}: {e}")
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a boolean setting, accepting legacy string forms."""
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes")
        if isinstance(value, (int, float)):
            return value != 0
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        """Get an integer setting."""
        value = self.get(key)
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def set(self, key: str, value: Any, encrypt: bool = False) -> None:
        """
        Set a setting value.

        Args:
            key: Setting key
            value: Any JSON-serializable value; None stores NULL
            encrypt: Store the value as an encryption envelope

        Raises:
            InvalidSettingValue: If the value cannot be serialized
            EncryptionError: If encryption fails
            PersistenceError: If the upsert fails
        """
        try:
            text, value_type = encode_value(value)
        except (TypeError, ValueError) as e:
            raise InvalidSettingValue(key, type(value).__name__, reason=str(e)) from e

        is_encrypted = encrypt and text is not None
        stored = text
        if is_encrypted:
            try:
                stored = self.codec.encrypt(text)
            except SettingsError as e:
                logger.error(f"Failed to set setting {key}: {e}")
                raise

        with self._lock:
            try:
                self.repository.upsert(key, stored, is_encrypted, value_type)
            except SettingsError as e:
                self.cache.invalidate(key)
                logger.error(f"Failed to set setting {key}: {e}")
                raise

            if text is None:
                self.cache.invalidate(key)
            else:
                # Cache the stored form so cached and fresh reads agree
                self.cache.set(key, decode_value(text, value_type), is_encrypted)
        log_setting_write(key, is_encrypted)

    def delete(self, key: str) -> None:
        """
        Delete a setting.

        Raises:
            SettingNotFoundError: If no row exists for ``key``
            PersistenceError: If the delete fails
        """
        with self._lock:
            try:
                self.repository.delete_existing(key)
            except SettingsError as e:
                logger.error(f"Failed to delete setting {key}: {e}")
                raise
            finally:
                self.cache.invalidate(key)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def get_all(self, include_encrypted: bool = False) -> Dict[str, Any]:
        """
        Get all settings (for export/backup).

        Encrypted values are replaced by ENCRYPTED_SENTINEL unless
        ``include_encrypted`` is set. A value that cannot be decrypted or
        decoded is replaced by DECRYPT_ERROR_SENTINEL.

        Raises:
            PersistenceError: If the settings table cannot be read
        """
        result: Dict[str, Any] = {}

        for setting in self.repository.list_all():
            if setting.is_encrypted and not include_encrypted:
                result[setting.key] = ENCRYPTED_SENTINEL
                continue

            if setting.value is None:
                result[setting.key] = None
                continue

            try:
                result[setting.key] = self._read(setting)
            except (DecryptionError, ValueError) as e:
                logger.error(f"Failed to decrypt setting {setting.key}: {e}")
                result[setting.key] = DECRYPT_ERROR_SENTINEL

        return result

    def import_settings(
        self,
        settings: Dict[str, Any],
        encrypt_sensitive: bool = True,
    ) -> List[str]:
        """
        Import settings from an exported mapping.

        Sentinel values are skipped. A key that fails does not stop the
        remaining keys.

        Args:
            settings: Mapping of key to value
            encrypt_sensitive: Encrypt keys listed in ``sensitive_keys``

        Returns:
            Keys that were written

        Raises:
            SettingsImportError: After the pass, if any key failed
        """
        imported: List[str] = []
        failed: Dict[str, str] = {}

        for key, value in settings.items():
            if isinstance(value, str) and value in SENTINELS:
                continue

            should_encrypt = encrypt_sensitive and key in self.sensitive_keys
            try:
                self.set(key, value, should_encrypt)
                imported.append(key)
            except SettingsError as e:
                failed[key] = e.message

        if failed:
            logger.error(f"Imported {len(imported)} setting(s), {len(failed)} failed")
            raise SettingsImportError(failed, imported)

        logger.info(f"Imported {len(imported)} setting(s)")
        return imported

    def reset(self) -> int:
        """
        Delete every setting and clear the cache.

        Returns:
            Number of rows deleted
        """
        with self._lock:
            try:
                deleted = self.repository.delete_all()
            except SettingsError as e:
                logger.error(f"Failed to reset settings: {e}")
                raise
            finally:
                self.cache.clear()

        logger.info(f"All settings have been reset ({deleted} removed)")
        return deleted

    def clear_cache(self) -> None:
        """Clear all cached values."""
        self.cache.clear()

    # ------------------------------------------------------------------
    # Backup / restore
    # ------------------------------------------------------------------

    def create_backup(self) -> str:
        """
        Serialize all settings as a versioned JSON backup.

        Encrypted values are written as ENCRYPTED_SENTINEL, never in clear.
        """
        backup = {
            "version": BACKUP_FORMAT_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "settings": self.get_all(include_encrypted=False),
        }
        return json.dumps(backup, indent=2)

    def restore_from_backup(self, backup_data: str) -> List[str]:
        """
        Restore settings from a backup produced by create_backup().

        Sensitive keys are re-encrypted. Sentinel values leave the current
        value untouched.

        Returns:
            Keys that were restored

        Raises:
            InvalidBackupFormat: If the payload is not a backup
            SettingsImportError: If some keys could not be written
        """
        try:
            backup = json.loads(backup_data)
        except (TypeError, ValueError) as e:
            raise InvalidBackupFormat(f"Backup is not valid JSON: {e}") from e

        if not isinstance(backup, dict) or not isinstance(backup.get("settings"), dict):
            raise InvalidBackupFormat("Backup has no settings mapping")

        version = backup.get("version")
        if version != BACKUP_FORMAT_VERSION:
            logger.warning(f"Restoring backup with unexpected version {version!r}")

        restored = self.import_settings(backup["settings"], encrypt_sensitive=True)
        logger.info("Settings restored from backup successfully")
        return restored

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read(self, setting: Setting) -> Any:
        """Decrypt (if needed) and decode a row's value."""
        text = self.codec.decrypt(setting.value) if setting.is_encrypted else setting.value
        return decode_value(text, setting.value_type)
