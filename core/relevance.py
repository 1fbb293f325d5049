"""Relevance filter: excludes groups whose categories are out of scope for the project context."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .domain import CONTEXT_TYPES, GENERAL, FindingGroup, ProjectContext

logger = logging.getLogger(__name__)

# Categories in scope for every project type.
BASELINE_CATEGORIES = frozenset({
    "accessibility",
    "cookie-consent",
    "data-protection",
    "data-retention",
    "international",
    "licensing",
    "open-source-license",
    "privacy",
    "privacy-policy",
    "security",
    "terms-of-service",
})

CONTEXT_CATEGORIES: dict[str, frozenset[str]] = {
    "SAAS": frozenset({
        "auto-renewal",
        "data-processing-agreement",
        "pricing-transparency",
        "sla",
        "subscription-cancellation",
    }),
    "ECOMMERCE": frozenset({
        "auto-renewal",
        "checkout",
        "consumer-protection",
        "pricing-transparency",
        "product-safety",
        "refund-policy",
        "subscription-cancellation",
    }),
    "HEALTHCARE": frozenset({
        "consent-records",
        "health-data",
        "hipaa",
        "medical-disclaimer",
    }),
    "SOCIAL_UGC": frozenset({
        "age-verification",
        "content-moderation",
        "dmca",
        "user-content",
        "user-reporting",
    }),
    "STATIC_CONTENT": frozenset(),
    "AI_ML": frozenset({
        "ai-disclosure",
        "ai-training-data",
        "automated-decision",
        "model-output-liability",
    }),
}

RELEVANT_CATEGORIES: dict[str, frozenset[str] | None] = {
    context_type: BASELINE_CATEGORIES | specific
    for context_type, specific in CONTEXT_CATEGORIES.items()
}
RELEVANT_CATEGORIES[GENERAL] = None


def resolve_context_type(context_type: str | None) -> tuple[str, bool]:
    """Return ``(context_type, fell_back)``; unknown types fail open to GENERAL."""
    token = (context_type or "").strip().upper().replace("-", "_")
    if token in CONTEXT_TYPES:
        return token, False
    logger.warning("Unknown project context type %r; applying no category filtering.", context_type)
    return GENERAL, True


def relevant_categories_for(
    context: ProjectContext,
    table: Mapping[str, frozenset[str] | None] | None = None,
) -> frozenset[str] | None:
    """Relevant category set for a context, or None meaning all categories."""
    if context.relevant_categories is not None:
        return frozenset(c.lower() for c in context.relevant_categories)
    lookup = RELEVANT_CATEGORIES if table is None else table
    return lookup.get(context.type)


def exclusion_reason(context_type: str, categories: Iterable[str]) -> str:
    listed = ", ".join(sorted({c or "uncategorized" for c in categories}))
    return f"Out of scope for {context_type} context: no member category is relevant ({listed})."


def apply_relevance(
    groups: list[FindingGroup],
    context: ProjectContext,
    *,
    table: Mapping[str, frozenset[str] | None] | None = None,
) -> int:
    """Mark groups with no in-scope member as excluded. Returns the count excluded.

    Excluded groups stay in the list so the report can cite them.
    """
    relevant = relevant_categories_for(context, table)
    if relevant is None:
        return 0

    excluded = 0
    for group in groups:
        categories = [m.category.lower() for m in group.members]
        if any(category in relevant for category in categories):
            continue
        group.excluded = True
        group.exclusion_reason = exclusion_reason(context.type, categories)
        excluded += 1
    if excluded:
        logger.info("Relevance filter excluded %d group(s) for %s context.", excluded, context.type)
    return excluded
