"""Deterministic encryption key derivation from host and application identity.

The key is recomputed at every start instead of being stored in a key file.
Same identity inputs always give the same key, so values encrypted in an
earlier session can be read back.

Known limitation: this is obfuscation against casual inspection, not a
secret store. Any local process that can read the same identity inputs can
re-derive the key, and renaming the host or the OS account makes every
previously encrypted value unreadable.

Usage:
    from core.security.key_derivation import HostIdentity, derive_key

    identity = HostIdentity.current("Draftpad", "1.0.0")
    key = derive_key(identity)
"""

import getpass
import hashlib
import platform
import socket
import sys
from dataclasses import dataclass

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from core.config import MIN_KDF_ITERATIONS
from core.exceptions import KeyDerivationError

KEY_SIZE = 32  # 256 bits


@dataclass(frozen=True)
class HostIdentity:
    """Identity inputs for key derivation."""

    platform: str
    arch: str
    hostname: str
    username: str
    app_name: str
    app_version: str

    @classmethod
    def current(cls, app_name: str, app_version: str) -> "HostIdentity":
        """Read the identity of the running host and user."""
        try:
            username = getpass.getuser()
        except (KeyError, OSError) as e:
            raise KeyDerivationError(f"Cannot determine current user: {e}") from e

        return cls(
            platform=sys.platform,
            arch=platform.machine(),
            hostname=socket.gethostname(),
            username=username,
            app_name=app_name,
            app_version=app_version,
        )

    @property
    def machine_id(self) -> str:
        """SHA-256 hex digest of the machine and user fields."""
        machine_info = f"{self.platform}-{self.arch}-{self.hostname}-{self.username}"
        return hashlib.sha256(machine_info.encode("utf-8")).hexdigest()

    def identity_string(self) -> str:
        """Key material combining the machine id and application identity."""
        return f"{self.machine_id}-{self.app_name}-{self.app_version}"


@dataclass(frozen=True)
class DerivedKey:
    """A 32-byte symmetric key held in memory for the process lifetime."""

    material: bytes

    def __post_init__(self):
        if len(self.material) != KEY_SIZE:
            raise KeyDerivationError(
                f"Derived key must be {KEY_SIZE} bytes, got {len(self.material)}"
            )

    def hex(self) -> str:
        return self.material.hex()

    def __repr__(self) -> str:
        return "DerivedKey(<redacted>)"


def derive_key(identity: HostIdentity, iterations: int = MIN_KDF_ITERATIONS) -> DerivedKey:
    """
    Derive the settings encryption key.

    The salt is the SHA-256 digest of the identity string, and
    PBKDF2-HMAC-SHA256 stretches the identity string into 32 bytes.

    Args:
        identity: Host and application identity
        iterations: PBKDF2 iteration count

    Returns:
        The derived key

    Raises:
        KeyDerivationError: If the parameters are invalid or the
            primitive fails
    """
    if iterations < MIN_KDF_ITERATIONS:
        raise KeyDerivationError(
            f"At least {MIN_KDF_ITERATIONS} iterations are required, got {iterations}"
        )

    key_material = identity.identity_string().encode("utf-8")
    salt = hashlib.sha256(key_material).digest()

    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=salt,
            iterations=iterations,
        )
        return DerivedKey(kdf.derive(key_material))
    except (UnsupportedAlgorithm, ValueError, TypeError) as e:
        raise KeyDerivationError(f"Failed to derive encryption key: {e}") from e
