"""Confidence voter: consensus confidence from cross-analyzer agreement."""

from __future__ import annotations

from .domain import (
    CONFIRMED,
    DECLARED_CONFIDENCE_RANK,
    DISPUTED,
    INVESTIGATE,
    LIKELY,
    FindingGroup,
)


def vote(group: FindingGroup) -> str:
    """Consensus confidence for a group. Pure; first matching rule wins.

    A group carrying conflicts is DISPUTED regardless of agreement.
    """
    if group.conflicts:
        return DISPUTED
    if len({m.source for m in group.members}) >= 2:
        return CONFIRMED
    declared = max(
        (m.declared_confidence for m in group.members),
        key=DECLARED_CONFIDENCE_RANK.__getitem__,
    )
    if declared == "HIGH":
        return LIKELY
    return INVESTIGATE


def apply_votes(groups: list[FindingGroup]) -> None:
    """Annotate every non-excluded group with its consensus confidence."""
    for group in groups:
        if group.excluded:
            continue
        group.consensus_confidence = vote(group)
