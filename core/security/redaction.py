"""Redaction of sensitive fields for safe logging.

Field names are matched by exact membership after normalization
(case-folded, with ``_``, ``-`` and spaces removed), so ``apiKey``,
``api_key`` and ``API-KEY`` all match while ``keyboard_layout`` does not.
Redacted copies are for log output only and are never stored.
"""

from typing import Any

REDACTED = "[REDACTED]"

SENSITIVE_FIELD_NAMES = frozenset({
    "password",
    "passphrase",
    "apikey",
    "token",
    "accesstoken",
    "refreshtoken",
    "bearertoken",
    "secret",
    "clientsecret",
    "key",
    "privatekey",
    "auth",
    "authorization",
    "credential",
    "credentials",
    # Application API credentials
    "newsapikey",
    "openaiapikey",
    "xapikey",
    "xapisecret",
    "xbearertoken",
})


def normalize_field_name(name: str) -> str:
    """Fold case and drop separators."""
    return name.casefold().replace("_", "").replace("-", "").replace(" ", "")


def is_sensitive_field(name: Any) -> bool:
    """Check whether a mapping key names a sensitive field."""
    return isinstance(name, str) and normalize_field_name(name) in SENSITIVE_FIELD_NAMES


def redact(value: Any) -> Any:
    """Return a copy of ``value`` with sensitive fields replaced by REDACTED."""
    if isinstance(value, dict):
        return {
            key: REDACTED if is_sensitive_field(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    if isinstance(value, tuple):
        return tuple(redact(item) for item in value)
    return value
