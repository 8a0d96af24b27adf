"""AES-256-GCM codec for setting values.

Each value is encrypted under the derived key with a fresh random IV and
stored as an opaque string:

    base64(json({"iv": hex, "authTag": hex, "ciphertext": hex}))

Decryption authenticates the ciphertext with the tag before returning
anything. A malformed envelope, the wrong key, or any flipped bit raises
DecryptionError; corrupted plaintext is never returned.

Usage:
    codec = EncryptionCodec(derive_key(identity))
    envelope = codec.encrypt("sk-live-123")
    codec.decrypt(envelope)  # "sk-live-123"
"""

import base64
import binascii
import json
import os
import secrets
from typing import Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.exceptions import DecryptionError, EncryptionError
from core.security.key_derivation import KEY_SIZE, DerivedKey

IV_SIZE = 16  # 128 bits, fresh per call
AUTH_TAG_SIZE = 16  # 128 bits, appended to ciphertext by AESGCM

ENVELOPE_FIELDS = ("iv", "authTag", "ciphertext")


class EncryptionCodec:
    """
    Authenticated encryption of strings under a single key.

    Args:
        key: A DerivedKey or 32 raw key bytes
        iv_size: IV length in bytes
    """

    def __init__(self, key: Union[DerivedKey, bytes], iv_size: int = IV_SIZE):
        material = key.material if isinstance(key, DerivedKey) else key
        if not isinstance(material, (bytes, bytearray)) or len(material) != KEY_SIZE:
            raise EncryptionError(f"Encryption key must be {KEY_SIZE} bytes")
        self._aesgcm = AESGCM(bytes(material))
        self.iv_size = iv_size

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a string into an envelope.

        Raises:
            EncryptionError: If the input is not a string or encryption fails
        """
        if not isinstance(plaintext, str):
            raise EncryptionError(
                f"Only strings can be encrypted, got {type(plaintext).__name__}"
            )

        iv = os.urandom(self.iv_size)
        try:
            sealed = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
        except (ValueError, OverflowError, UnicodeEncodeError) as e:
            raise EncryptionError(f"Failed to encrypt data: {e}") from e

        envelope = {
            "iv": iv.hex(),
            "authTag": sealed[-AUTH_TAG_SIZE:].hex(),
            "ciphertext": sealed[:-AUTH_TAG_SIZE].hex(),
        }
        return base64.b64encode(json.dumps(envelope).encode("utf-8")).decode("ascii")

    def decrypt(self, envelope: str) -> str:
        """
        Decrypt an envelope produced by encrypt().

        Raises:
            DecryptionError: If the envelope is malformed, the key is wrong,
                or authentication fails
        """
        iv, auth_tag, ciphertext = self._unpack(envelope)

        try:
            plaintext = self._aesgcm.decrypt(iv, ciphertext + auth_tag, None)
        except InvalidTag as e:
            raise DecryptionError("Authentication failed: wrong key or tampered data") from e
        except ValueError as e:
            raise DecryptionError(f"Failed to decrypt data: {e}") from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("Decrypted data is not valid UTF-8") from e

    def is_envelope(self, value: str) -> bool:
        """Check whether a string is structurally an envelope (no decryption)."""
        try:
            self._unpack(value)
        except DecryptionError:
            return False
        return True

    def _unpack(self, envelope: str):
        if not isinstance(envelope, str):
            raise DecryptionError(f"Envelope must be a string, got {type(envelope).__name__}")

        try:
            raw = base64.b64decode(envelope.encode("ascii"), validate=True)
            data = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeError, ValueError) as e:
            raise DecryptionError("Malformed envelope") from e

        if not isinstance(data, dict) or not all(
            isinstance(data.get(field), str) for field in ENVELOPE_FIELDS
        ):
            raise DecryptionError("Envelope is missing iv, authTag or ciphertext")

        try:
            iv = bytes.fromhex(data["iv"])
            auth_tag = bytes.fromhex(data["authTag"])
            ciphertext = bytes.fromhex(data["ciphertext"])
        except ValueError as e:
            raise DecryptionError("Envelope fields are not valid hex") from e

        if len(auth_tag) != AUTH_TAG_SIZE:
            raise DecryptionError(f"Authentication tag must be {AUTH_TAG_SIZE} bytes")
        if not iv:
            raise DecryptionError("Envelope IV is empty")

        return iv, auth_tag, ciphertext


def generate_secure_random(length: int = 32) -> str:
    """Return ``length`` random bytes as hex."""
    return secrets.token_hex(length)
