"""Encryption-at-rest wrapper for any storage substrate (Fernet)."""

import base64

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from sessionstore.application.interfaces.ports import StorageProtocol
from sessionstore.infrastructure.exceptions import DecryptionException

_KDF_ITERATIONS = 100_000


def derive_fernet_key(secret: str, salt: str) -> bytes:
    """Derive a 32-byte Fernet key from secret + salt via PBKDF2-HMAC-SHA256."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt.encode(),
        iterations=_KDF_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode()))


class EncryptedStorage:
    """StorageProtocol decorator: values are encrypted before reaching the inner substrate.

    Keys stay in plaintext so namespace enumeration still works. A value that
    cannot be decrypted (wrong key, tampered) raises DecryptionException, so
    callers can tell it apart from an absent key.
    """

    def __init__(self, inner: StorageProtocol, secret: str, salt: str) -> None:
        self._inner = inner
        self._fernet = Fernet(derive_fernet_key(secret, salt))

    def get(self, key: str) -> str | None:
        token = self._inner.get(key)
        if token is None:
            return None
        try:
            return self._fernet.decrypt(token.encode()).decode()
        except InvalidToken as e:
            raise DecryptionException() from e

    def set(self, key: str, value: str) -> None:
        self._inner.set(key, self._fernet.encrypt(value.encode()).decode())

    def remove(self, key: str) -> None:
        self._inner.remove(key)

    def clear(self) -> None:
        self._inner.clear()

    def keys(self) -> list[str]:
        return self._inner.keys()
