"""Shared constants for key layout and session markers.

Changing any of these invalidates data already written to a substrate.
"""

# Separator between prefix, tenant id and collection in a storage key.
KEY_SEP = "_"

# Session markers, stored outside any tenant namespace.
SESSION_USER_KEY = "currentUser"
SESSION_EXPIRY_KEY = "session_expiry"

# Generic message returned when an unexpected error is converted at a boundary.
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
INTERNAL_ERROR_CODE = "INTERNAL_ERROR"

# Record fields the store owns; a patch can never overwrite these.
IMMUTABLE_RECORD_FIELDS = frozenset({"id", "created_at", "user_id"})

VALID_STORAGE_BACKENDS = ("memory", "redis")
