"""
school_portal.auth.crypto

Symmetric encryption shared with the web client.

Responsibilities:
- Encrypt issued tokens before they leave the API.
- Decrypt bearer tokens and submitted passwords.

The client and server share one secret (`PORTAL_CRYPTO_SECRET_KEY`). A Fernet key is
derived from it with SHA-256 so any secret length works.
"""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from school_portal.errors import CryptoError


def _fernet(secret: str | None) -> Fernet:
    if not secret:
        raise CryptoError("Encryption secret key is missing.")
    key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())
    return Fernet(key)


def encrypt_data(secret: str | None, text: str) -> str:
    return _fernet(secret).encrypt(text.encode("utf-8")).decode("ascii")


def decrypt_data(secret: str | None, token: str | None) -> str:
    if not token:
        raise CryptoError()
    try:
        plain = _fernet(secret).decrypt(token.encode("utf-8")).decode("utf-8")
    except (InvalidToken, ValueError, UnicodeError) as e:
        raise CryptoError() from e
    if not plain:
        raise CryptoError()
    return plain
