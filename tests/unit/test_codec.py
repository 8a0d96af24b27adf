"""Unit tests for the AES-256-GCM encryption codec."""

import base64
import json

import pytest

from core.exceptions import DecryptionError, EncryptionError
from core.security.codec import EncryptionCodec, generate_secure_random
from core.security.key_derivation import derive_key


def _unwrap(envelope):
    return json.loads(base64.b64decode(envelope))


def _wrap(data):
    return base64.b64encode(json.dumps(data).encode()).decode()


def _flip_hex_bit(hex_string, index=0):
    raw = bytearray(bytes.fromhex(hex_string))
    raw[index] ^= 0x01
    return raw.hex()


class TestRoundTrip:
    """Encrypt then decrypt returns the original text."""

    @pytest.mark.parametrize("plaintext", [
        "",
        "sk-live-abc123",
        "unicode: café ✓ 日本語",
        "x" * 10_000,
        '{"nested": "json"}',
    ])
    def test_round_trip(self, codec, plaintext):
        assert codec.decrypt(codec.encrypt(plaintext)) == plaintext

    def test_round_trip_with_derived_key(self, identity):
        codec = EncryptionCodec(derive_key(identity))
        assert codec.decrypt(codec.encrypt("token")) == "token"

    def test_fresh_iv_per_call(self, codec):
        """Same plaintext encrypts differently each time."""
        first = _unwrap(codec.encrypt("same"))
        second = _unwrap(codec.encrypt("same"))

        assert first["iv"] != second["iv"]
        assert first["ciphertext"] != second["ciphertext"]

    def test_envelope_shape(self, codec):
        """Envelope is base64 JSON with hex iv, authTag and ciphertext."""
        data = _unwrap(codec.encrypt("hello"))

        assert set(data) == {"iv", "authTag", "ciphertext"}
        assert len(bytes.fromhex(data["iv"])) == 16
        assert len(bytes.fromhex(data["authTag"])) == 16
        assert len(bytes.fromhex(data["ciphertext"])) == len("hello")


class TestTamperDetection:
    """Modified envelopes never decrypt."""

    def test_flipped_auth_tag_bit(self, codec):
        data = _unwrap(codec.encrypt("secret value"))
        data["authTag"] = _flip_hex_bit(data["authTag"], 5)

        with pytest.raises(DecryptionError):
            codec.decrypt(_wrap(data))

    @pytest.mark.parametrize("index", [0, 3, 11])
    def test_flipped_ciphertext_bit(self, codec, index):
        data = _unwrap(codec.encrypt("secret value"))
        data["ciphertext"] = _flip_hex_bit(data["ciphertext"], index)

        with pytest.raises(DecryptionError):
            codec.decrypt(_wrap(data))

    def test_flipped_iv_bit(self, codec):
        data = _unwrap(codec.encrypt("secret value"))
        data["iv"] = _flip_hex_bit(data["iv"])

        with pytest.raises(DecryptionError):
            codec.decrypt(_wrap(data))

    def test_wrong_key(self, codec):
        envelope = codec.encrypt("secret value")
        other = EncryptionCodec(bytes(32))

        with pytest.raises(DecryptionError):
            other.decrypt(envelope)


class TestMalformedEnvelopes:
    """Non-envelope input fails cleanly."""

    @pytest.mark.parametrize("envelope", [
        "",
        "plain text setting",
        "not-base64!!",
        base64.b64encode(b"not json").decode(),
        _wrap(["a", "list"]),
        _wrap({"iv": "00", "authTag": "00"}),
        _wrap({"iv": "zz", "authTag": "00" * 16, "ciphertext": "00"}),
        _wrap({"iv": "00" * 16, "authTag": "00" * 4, "ciphertext": "00"}),
        _wrap({"iv": "", "authTag": "00" * 16, "ciphertext": "00"}),
    ])
    def test_malformed_raises(self, codec, envelope):
        with pytest.raises(DecryptionError):
            codec.decrypt(envelope)

    def test_non_string_raises(self, codec):
        with pytest.raises(DecryptionError):
            codec.decrypt(None)

    def test_is_envelope(self, codec):
        assert codec.is_envelope(codec.encrypt("x"))
        assert not codec.is_envelope("280")


class TestEncryptionErrors:
    """Invalid encryption input."""

    def test_non_string_plaintext(self, codec):
        with pytest.raises(EncryptionError):
            codec.encrypt(280)

    def test_short_key(self):
        with pytest.raises(EncryptionError):
            EncryptionCodec(b"short")


class TestSecureRandom:

    def test_length(self):
        assert len(generate_secure_random()) == 64
        assert len(generate_secure_random(8)) == 16

    def test_unique(self):
        assert generate_secure_random() != generate_secure_random()
