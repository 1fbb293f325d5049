"""Raw analyzer record adapters."""

from .record_formats import (
    DEFAULT_ADAPTERS,
    CanonicalRecordAdapter,
    FlatRecordAdapter,
    split_location_string,
)

__all__ = [
    "DEFAULT_ADAPTERS",
    "CanonicalRecordAdapter",
    "FlatRecordAdapter",
    "split_location_string",
]
