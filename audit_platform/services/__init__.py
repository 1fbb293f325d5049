"""Platform-owned workflow services."""

from .consolidation_service import normalize_concurrently, run_consolidation

__all__ = [
    "normalize_concurrently",
    "run_consolidation",
]
