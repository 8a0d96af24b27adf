"""Salted PBKDF2 hashing with constant-time verification."""

import os
from dataclasses import dataclass
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from core.config import MIN_KDF_ITERATIONS

HASH_LENGTH = 64  # bytes
SALT_LENGTH = 32  # bytes, hex-encoded when generated


@dataclass(frozen=True)
class HashResult:
    """Hex hash and the salt it was computed with."""

    hash: str
    salt: str


def hash_value(
    data: str,
    salt: Optional[str] = None,
    iterations: int = MIN_KDF_ITERATIONS,
    length: int = HASH_LENGTH,
) -> HashResult:
    """
    Hash a string with PBKDF2-HMAC-SHA256.

    Args:
        data: Value to hash
        salt: Salt string; a random hex salt is generated when omitted
        iterations: PBKDF2 iteration count
        length: Output length in bytes

    Returns:
        HashResult with the hex hash and the salt used
    """
    final_salt = salt if salt is not None else os.urandom(SALT_LENGTH).hex()
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=final_salt.encode("utf-8"),
        iterations=iterations,
    )
    digest = kdf.derive(data.encode("utf-8"))
    return HashResult(hash=digest.hex(), salt=final_salt)


def verify_hash(
    data: str,
    expected_hash: str,
    salt: str,
    iterations: int = MIN_KDF_ITERATIONS,
    length: int = HASH_LENGTH,
) -> bool:
    """Recompute the hash of ``data`` and compare it to ``expected_hash``."""
    computed = hash_value(data, salt, iterations=iterations, length=length)
    return constant_time_equals(expected_hash, computed.hash)


def constant_time_equals(a: str, b: str) -> bool:
    """
    Compare two strings without exiting early on the first mismatch.

    Only the length check short-circuits; equal-length inputs always
    visit every character.
    """
    if len(a) != len(b):
        return False

    result = 0
    for x, y in zip(a, b):
        result |= ord(x) ^ ord(y)
    return result == 0


class Hasher:
    """
    hash_value/verify_hash bound to configured parameters.

    Args:
        iterations: PBKDF2 iteration count
        length: Output length in bytes
    """

    def __init__(self, iterations: int = MIN_KDF_ITERATIONS, length: int = HASH_LENGTH):
        if iterations < MIN_KDF_ITERATIONS:
            raise ValueError(f"iterations must be at least {MIN_KDF_ITERATIONS}, got {iterations}")
        if length < HASH_LENGTH:
            raise ValueError(f"length must be at least {HASH_LENGTH} bytes, got {length}")
        self.iterations = iterations
        self.length = length

    def hash(self, data: str, salt: Optional[str] = None) -> HashResult:
        return hash_value(data, salt, iterations=self.iterations, length=self.length)

    def verify(self, data: str, expected_hash: str, salt: str) -> bool:
        return verify_hash(data, expected_hash, salt, iterations=self.iterations, length=self.length)
