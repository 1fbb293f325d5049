"""Platform layer: local orchestration over the stateless consensus core."""

__version__ = "1.0.0"

from .config import ConsolidationSettings, resolve_settings
from .core_client import CoreClient, CoreClientConflictError, CoreClientError, CoreClientHTTPError
from .facade import PlatformFacade
from .registry import (
    AUDIT_TYPES,
    expected_sources_for_audit,
    get_analyzer_counts,
    get_analyzers_for_audit,
    get_audit_type,
    get_audit_type_keys,
    source_aliases_for_audit,
)
from .rendering import render_markdown

__all__ = [
    "__version__",
    "AUDIT_TYPES",
    "ConsolidationSettings",
    "CoreClient",
    "CoreClientConflictError",
    "CoreClientError",
    "CoreClientHTTPError",
    "PlatformFacade",
    "expected_sources_for_audit",
    "get_analyzer_counts",
    "get_analyzers_for_audit",
    "get_audit_type",
    "get_audit_type_keys",
    "render_markdown",
    "resolve_settings",
    "source_aliases_for_audit",
]
