"""Encryption of provider tokens kept in session storage.

Keys are derived from ``SECRET_KEY`` (SHA-256, then urlsafe base64) so that
every worker sharing the secret can read what another worker stored. Older
secrets listed in ``SECRET_KEY_FALLBACKS`` still decrypt, which lets the
secret be rotated without logging every browser out; new ciphertext is
always produced with the current secret.
"""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

from itqan.core.config import get_settings

__all__ = ["InvalidToken", "decrypt", "encrypt"]


def _derive(secret: str) -> Fernet:
    digest = hashlib.sha256(secret.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def _get_fernet() -> MultiFernet:
    settings = get_settings()
    secrets = [settings.secret_key, *settings.secret_key_fallbacks]
    return MultiFernet([_derive(s) for s in secrets])


def encrypt(value: str) -> str:
    return _get_fernet().encrypt(value.encode()).decode()


def decrypt(ciphertext: str) -> str:
    """Decrypt *ciphertext*; raises ``InvalidToken`` when tampered with, unreadable
    with every configured secret, or older than the session lifetime.
    """
    ttl = get_settings().session_lifetime_days * 86400
    return _get_fernet().decrypt(ciphertext.encode(), ttl=ttl).decode()
