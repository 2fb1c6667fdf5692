"""ID and value generators (CUID2 record ids, tenant ids)."""

import uuid

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# Stable namespace so the same email always maps to the same tenant id.
_TENANT_NAMESPACE = uuid.UUID("6f1c2a4e-3b7d-5e8f-9a0b-1c2d3e4f5a6b")


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_record_id(prefix: str) -> str:
    """Return a new record id of the form '<prefix>_<cuid>'."""
    return f"{prefix}_{generate_cuid()}"


def synthesize_tenant_id(email: str) -> str:
    """Derive a deterministic tenant id from an email address.

    The id never contains the storage key separator, so it is safe as the
    tenant component of a storage key.

    Args:
        email: Email used to sign in (case-insensitive).

    Returns:
        Tenant id of the form 'user-<32 hex chars>'.
    """
    normalized = email.strip().lower()
    return f"user-{uuid.uuid5(_TENANT_NAMESPACE, normalized).hex}"
