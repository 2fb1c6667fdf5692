"""Infrastructure exceptions for substrate I/O.

Storage errors extend StoreException so the facades convert them to result
values the same way as domain errors.
"""

from sessionstore.domain.exceptions import StoreException


class StorageException(StoreException):
    """Substrate read or write failed (e.g. Redis unreachable)."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Storage {operation} failed",
            "STORAGE_ERROR",
            {"operation": operation, "reason": reason},
        )


class DecryptionException(StorageException):
    """A stored value exists but cannot be decrypted (wrong key or tampered)."""

    def __init__(self) -> None:
        super().__init__("decrypt", "stored value could not be decrypted")
