"""Key derivation, encryption, hashing and redaction."""

from core.security.codec import EncryptionCodec, generate_secure_random
from core.security.hashing import (
    HashResult,
    Hasher,
    constant_time_equals,
    hash_value,
    verify_hash,
)
from core.security.key_derivation import DerivedKey, HostIdentity, derive_key
from core.security.redaction import REDACTED, redact

__all__ = [
    "EncryptionCodec",
    "generate_secure_random",
    "HashResult",
    "Hasher",
    "constant_time_equals",
    "hash_value",
    "verify_hash",
    "DerivedKey",
    "HostIdentity",
    "derive_key",
    "REDACTED",
    "redact",
]
