"""Shared helpers: UTC datetimes and id generation."""

from sessionstore.shared.utils.datetime import (
    from_timestamp_ms_utc,
    to_iso,
    to_timestamp_ms,
    utc_now,
)
from sessionstore.shared.utils.generators import (
    generate_cuid,
    generate_record_id,
    synthesize_tenant_id,
)

__all__ = [
    "from_timestamp_ms_utc",
    "to_iso",
    "generate_cuid",
    "generate_record_id",
    "synthesize_tenant_id",
    "to_timestamp_ms",
    "utc_now",
]
