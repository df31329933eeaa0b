"""Symmetric encryption for access tokens held in the credential table."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken


class TokenCipherService:
    """Encrypt and decrypt access tokens with a Fernet key derived from a secret."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Token encryption secret must be provided.")
        key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())
        self._fernet = Fernet(key)

    def encrypt(self, access_token: str) -> str:
        return self._fernet.encrypt(access_token.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        """Recover a stored access token; a key mismatch raises ``ValueError``."""
        try:
            plaintext = self._fernet.decrypt(ciphertext.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError(
                "Stored access token could not be decrypted with the configured secret."
            ) from exc
        return plaintext.decode("utf-8")


__all__ = ["TokenCipherService"]
