"""Storage key builders. Single place for the key layout.

Tenant data lives under '<prefix>_<tenantId>_<collection>'. The prefix and
tenant id must not contain KEY_SEP, otherwise one tenant's namespace could
overlap another's; collection names may contain it.
"""

from sessionstore.core.constants import KEY_SEP


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the key separator.

    Args:
        value: String component used in a storage key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value is empty or contains KEY_SEP.
    """
    if not value:
        raise ValueError(f"Storage key component {name!r} must be non-empty")
    if KEY_SEP in value:
        raise ValueError(
            f"Storage key component {name!r} must not contain separator {KEY_SEP!r}"
        )


def tenant_namespace(prefix: str, tenant_id: str) -> str:
    """Key prefix shared by every collection of one tenant ('<prefix>_<tenantId>_')."""
    _validate_key_component(prefix, "prefix")
    _validate_key_component(tenant_id, "tenant_id")
    return f"{prefix}{KEY_SEP}{tenant_id}{KEY_SEP}"


def storage_key(prefix: str, tenant_id: str, collection: str) -> str:
    """Storage key for one tenant's collection.

    Args:
        prefix: Fixed store prefix (settings.storage_prefix).
        tenant_id: Active tenant id.
        collection: Collection name.

    Returns:
        '<prefix>_<tenantId>_<collection>'.
    """
    if not collection:
        raise ValueError("Storage key component 'collection' must be non-empty")
    return f"{tenant_namespace(prefix, tenant_id)}{collection}"
