"""Encryption at rest for customer identity-document numbers.

Security:
- AES-256-GCM, random 96-bit nonce per value
- Stored as "enc:" + base64(nonce + ciphertext)
- Without ID_NUMBER_KEY values are stored as given (demo / dev setups)
"""

from __future__ import annotations

import base64
import os

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

_PREFIX = "enc:"
_NONCE_SIZE = 12


def _parse_key(key_hex: str) -> bytes:
    try:
        key = bytes.fromhex(key_hex)
    except ValueError:
        key = b""
    if len(key) != 32:
        raise RuntimeError(
            "ID_NUMBER_KEY must be 32 bytes hex (64 hex chars). "
            "Generate with: openssl rand -hex 32"
        )
    return key


def encrypt_id_number(value: str | None, key_hex: str | None) -> str | None:
    if not value or not key_hex:
        return value
    aesgcm = AESGCM(_parse_key(key_hex))
    nonce = os.urandom(_NONCE_SIZE)
    ciphertext = aesgcm.encrypt(nonce, value.encode(), None)
    return _PREFIX + base64.b64encode(nonce + ciphertext).decode()


def decrypt_id_number(stored: str | None, key_hex: str | None) -> str | None:
    """Decrypt a stored value; plaintext legacy values pass through.

    Raises:
        RuntimeError: If the value is encrypted and no key is configured.
    """
    if not stored or not stored.startswith(_PREFIX):
        return stored
    if not key_hex:
        raise RuntimeError("ID_NUMBER_KEY not configured; cannot read encrypted id numbers")
    data = base64.b64decode(stored[len(_PREFIX):])
    aesgcm = AESGCM(_parse_key(key_hex))
    return aesgcm.decrypt(data[:_NONCE_SIZE], data[_NONCE_SIZE:], None).decode()
