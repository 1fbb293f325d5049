"""Conflict resolver: contradiction detection and external adjudication.

Contradiction is judged by a pluggable pairwise predicate. The engine never
picks a side on its own: disputed groups stay disputed until a caller
supplies a ``Resolution`` for their group key.
"""

from __future__ import annotations

import logging
import re
from itertools import combinations
from typing import Iterable

from .domain import CONFIRMED, DISPUTED, FALSE_POSITIVE, Finding, FindingGroup, Resolution
from .ports import ContradictionPredicate

logger = logging.getLogger(__name__)

DEFAULT_CLEARANCE_MARKERS = (
    "no issue",
    "not an issue",
    "no problem",
    "not vulnerable",
    "not exploitable",
    "false positive",
    "never empty",
    "always non-empty",
    "always initialized",
    "properly handled",
    "already handled",
    "compliant",
    "safe by construction",
)


def _marker_pattern(marker: str) -> re.Pattern[str]:
    # Whole words only, and not negated: "non-compliant", "noncompliant",
    # "incompliant" and "not compliant" must not count as "compliant".
    return re.compile(
        r"(?<![\w-])(?<!\bnot )(?<!\bnon )" + re.escape(marker.lower()) + r"(?![\w-])"
    )


def no_contradictions(first: Finding, second: Finding) -> bool:
    """Default predicate: findings never contradict."""
    return False


class ClearanceMarkerPredicate(ContradictionPredicate):
    """Fires when exactly one finding of the pair clears the location.

    A finding "clears" its location when its title or rationale contains one
    of the configured markers as whole words (case-insensitive, and not
    negated by a preceding ``non``/``not``), e.g. an invariant analyzer
    stating "array never empty" against an edge-case analyzer's "possible
    out-of-bounds access".
    """

    def __init__(
        self,
        markers: Iterable[str] = DEFAULT_CLEARANCE_MARKERS,
        *,
        require_distinct_categories: bool = False,
    ):
        self.markers = tuple(m.lower() for m in markers)
        self.require_distinct_categories = require_distinct_categories
        self._patterns = tuple(_marker_pattern(m) for m in self.markers)

    def is_clearance(self, finding: Finding) -> bool:
        text = f"{finding.title}\n{finding.rationale}".lower()
        return any(pattern.search(text) for pattern in self._patterns)

    def __call__(self, first: Finding, second: Finding) -> bool:
        if self.require_distinct_categories and first.category.lower() == second.category.lower():
            return False
        return self.is_clearance(first) != self.is_clearance(second)


PREDICATES: dict[str, ContradictionPredicate] = {
    "none": no_contradictions,
    "clearance-markers": ClearanceMarkerPredicate(),
}


def get_predicate(name: str) -> ContradictionPredicate:
    """Look up a built-in predicate by name."""
    try:
        return PREDICATES[name]
    except KeyError:
        valid = ", ".join(sorted(PREDICATES))
        raise ValueError(f"Unknown contradiction predicate '{name}'. Valid predicates: {valid}") from None


def detect_conflicts(group: FindingGroup, predicate: ContradictionPredicate) -> list[tuple[str, str]]:
    """Return member reference pairs for which the predicate fires."""
    return [
        (first.ref, second.ref)
        for first, second in combinations(group.members, 2)
        if predicate(first, second)
    ]


def apply_conflicts(groups: list[FindingGroup], predicate: ContradictionPredicate) -> int:
    """Mark contradictory non-excluded groups as DISPUTED. Returns the disputed count."""
    disputed = 0
    for group in groups:
        if group.excluded:
            continue
        group.conflicts = detect_conflicts(group, predicate)
        if group.conflicts:
            group.consensus_confidence = DISPUTED
            disputed += 1
    return disputed


def apply_resolutions(groups: list[FindingGroup], resolutions: Iterable[Resolution]) -> list[Resolution]:
    """Apply external verdicts by group key. Returns resolutions that matched no group.

    CONFIRMED settles the group as CONFIRMED; FALSE_POSITIVE excludes it with
    the resolution's reasoning. Later resolutions for the same key win.
    """
    by_key: dict[str, Resolution] = {}
    for resolution in resolutions:
        if resolution.group_key in by_key:
            logger.warning("Multiple resolutions for group '%s'; using the last one.", resolution.group_key)
        by_key[resolution.group_key] = resolution

    matched: set[str] = set()
    for group in groups:
        resolution = by_key.get(group.group_key)
        if resolution is None:
            continue
        matched.add(group.group_key)
        group.resolution = resolution
        if resolution.verdict == FALSE_POSITIVE:
            group.consensus_confidence = FALSE_POSITIVE
            group.excluded = True
            group.exclusion_reason = resolution.reasoning or "Ruled a false positive by adjudication."
        elif resolution.verdict == CONFIRMED:
            group.consensus_confidence = CONFIRMED
            group.excluded = False
            group.exclusion_reason = ""

    unmatched = [r for key, r in by_key.items() if key not in matched]
    for resolution in unmatched:
        logger.warning("Resolution for unknown group '%s' was not applied.", resolution.group_key)
    return unmatched
