"""Priority ranker: fixed (severity, consensus confidence) matrix lookup."""

from __future__ import annotations

from .domain import CONFIRMED, INVESTIGATE, LIKELY, FindingGroup

PRIORITY_MATRIX: dict[tuple[str, str], str] = {
    ("CRITICAL", CONFIRMED): "CRITICAL_PRIORITY",
    ("CRITICAL", LIKELY): "CRITICAL_PRIORITY",
    ("CRITICAL", INVESTIGATE): "HIGH_PRIORITY",
    ("HIGH", CONFIRMED): "CRITICAL_PRIORITY",
    ("HIGH", LIKELY): "HIGH_PRIORITY",
    ("HIGH", INVESTIGATE): "MEDIUM_PRIORITY",
    ("MEDIUM", CONFIRMED): "HIGH_PRIORITY",
    ("MEDIUM", LIKELY): "MEDIUM_PRIORITY",
    ("MEDIUM", INVESTIGATE): "LOW_PRIORITY",
    ("LOW", CONFIRMED): "MEDIUM_PRIORITY",
    ("LOW", LIKELY): "LOW_PRIORITY",
    ("LOW", INVESTIGATE): "INFO",
}

RANKABLE_CONFIDENCES = (CONFIRMED, LIKELY, INVESTIGATE)


def rank_priority(severity: str, consensus_confidence: str) -> str:
    """Look up the priority bucket; raises ``ValueError`` outside the matrix domain."""
    try:
        return PRIORITY_MATRIX[(severity, consensus_confidence)]
    except KeyError:
        raise ValueError(
            f"No priority defined for severity '{severity}' with confidence '{consensus_confidence}'."
        ) from None


def apply_priorities(groups: list[FindingGroup]) -> None:
    """Assign priorities; disputed and excluded groups get none."""
    for group in groups:
        if group.excluded or group.consensus_confidence not in RANKABLE_CONFIDENCES:
            group.priority = None
            continue
        group.priority = rank_priority(group.severity, group.consensus_confidence)
