"""Fernet-based encryption for stored values.

Key-value records are opaque bytes; they are encrypted before they reach
SQLite and decrypted on the way out.
"""

from __future__ import annotations

import logging

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class EncryptionError(Exception):
    """Raised when encryption/decryption fails."""


class FieldEncryptor:
    """Encrypts and decrypts byte strings using Fernet symmetric encryption.

    Usage::

        encryptor = FieldEncryptor(key="...")
        token = encryptor.encrypt(b'{"age": 30}')
        encryptor.decrypt(token)  # b'{"age": 30}'
    """

    def __init__(self, key: str) -> None:
        """Initialize with a Fernet key.

        Args:
            key: A valid Fernet key string. Generate with
                 ``FieldEncryptor.generate_key()``.

        Raises:
            EncryptionError: If the key is empty or invalid.
        """
        if not key or not key.strip():
            raise EncryptionError("Encryption key must not be empty")
        try:
            self._fernet = Fernet(key.encode())
        except (TypeError, ValueError) as exc:
            raise EncryptionError(f"Invalid encryption key: {exc}") from exc

    def encrypt(self, data: bytes) -> bytes:
        """Encrypt raw bytes to a Fernet token.

        Raises:
            EncryptionError: If ``data`` is not bytes.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise EncryptionError(f"Encryption expects bytes, got {type(data).__name__}")
        return self._fernet.encrypt(bytes(data))

    def decrypt(self, token: bytes) -> bytes:
        """Decrypt a Fernet token back to the original bytes.

        Raises:
            EncryptionError: If the token is invalid or was made with another key.
        """
        try:
            return self._fernet.decrypt(token)
        except InvalidToken as exc:
            raise EncryptionError("Decryption failed: invalid token or wrong key") from exc
        except TypeError as exc:
            raise EncryptionError(f"Decryption failed: {exc}") from exc

    @staticmethod
    def generate_key() -> str:
        """Generate a new Fernet key.

        Returns:
            A URL-safe base64-encoded 32-byte key as a string.
        """
        return Fernet.generate_key().decode("utf-8")
