"""Exception classes for the settings layer.

These exception classes have no Flask dependency and are raised by the
security and settings modules. The API middleware turns them into the
standard JSON error envelope using ``code`` and ``status_code``.

Propagation rules:
- KeyDerivationError is fatal at startup.
- EncryptionError and PersistenceError propagate out of write paths.
- DecryptionError is absorbed by read paths (defaults or sentinels).
"""

from typing import Any, Dict, List, Optional


class SettingsError(Exception):
    """Base class for settings-layer errors."""

    def __init__(
        self,
        message: str,
        code: str = "SETTINGS_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class KeyDerivationError(SettingsError):
    """The encryption key could not be derived."""

    def __init__(self, message: str = "Failed to derive encryption key"):
        super().__init__(message=message, code="KEY_DERIVATION_FAILED")


class EncryptionError(SettingsError):
    """A value could not be encrypted."""

    def __init__(self, message: str = "Failed to encrypt data"):
        super().__init__(message=message, code="ENCRYPTION_FAILED")


class DecryptionError(SettingsError):
    """Envelope is malformed, was made with another key, or was tampered with."""

    def __init__(self, message: str = "Failed to decrypt data"):
        super().__init__(message=message, code="DECRYPTION_FAILED")


class PersistenceError(SettingsError):
    """The settings table could not be read or written."""

    def __init__(
        self,
        message: str,
        code: str = "PERSISTENCE_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, status_code=status_code, details=details)


class SettingNotFoundError(PersistenceError):
    """No row exists for the requested key."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Setting '{key}' not found",
            code="SETTING_NOT_FOUND",
            status_code=404,
            details={"key": key},
        )
        self.key = key


class InvalidBackupFormat(SettingsError):
    """Backup payload is not JSON or has no settings mapping."""

    def __init__(self, message: str = "Invalid backup format"):
        super().__init__(message=message, code="INVALID_BACKUP_FORMAT", status_code=400)


class InvalidSettingValue(SettingsError):
    """An application setting was given a value outside its allowed choices."""

    def __init__(
        self,
        field: str,
        value: Any,
        choices: Optional[List[Any]] = None,
        reason: Optional[str] = None,
    ):
        message = f"Invalid value for '{field}': {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            message=message,
            code="INVALID_SETTING_VALUE",
            status_code=400,
            details={"field": field, "value": value, "choices": choices or []},
        )


class SettingsImportError(SettingsError):
    """One or more entries of a bulk import could not be written.

    Entries processed before and after a failing key are still applied,
    so ``imported`` lists what did land in the store.
    """

    def __init__(self, failed: Dict[str, str], imported: List[str]):
        keys = ", ".join(sorted(failed))
        super().__init__(
            message=f"Failed to import {len(failed)} setting(s): {keys}",
            code="IMPORT_INCOMPLETE",
            status_code=500,
            details={"failed": dict(failed), "imported": list(imported)},
        )
        self.failed = dict(failed)
        self.imported = list(imported)
