"""Location grouper: partitions findings into ``FindingGroup`` clusters.

Located findings are sorted per artifact by line and merged in one
interval pass: a finding joins the current run when its line is within
``line_tolerance`` of the previous finding in that run. Findings without a
location group by subject (category + title).
"""

from __future__ import annotations

import hashlib
from typing import Iterable

from .domain import Finding, FindingGroup

DEFAULT_LINE_TOLERANCE = 0


def _normalize_text(value: str) -> str:
    return " ".join((value or "").lower().split())


def subject_key(finding: Finding) -> str:
    """Synthesized key for location-less findings."""
    category = _normalize_text(finding.category) or "uncategorized"
    digest = hashlib.sha1(
        f"{category}\x1f{_normalize_text(finding.title)}".encode("utf-8")
    ).hexdigest()[:12]
    return f"subject:{category}:{digest}"


def location_key(artifact: str, line_start: int | None, line_end: int | None) -> str:
    if line_start is None:
        return artifact
    if line_end is None or line_end == line_start:
        return f"{artifact}:{line_start}"
    return f"{artifact}:{line_start}-{line_end}"


def group_sort_key(group: FindingGroup) -> tuple[int, str, int, str]:
    """Natural ordering: located groups by artifact then line, subjects last."""
    if group.artifact is None:
        return (1, "", -1, group.group_key)
    line = group.line_start if group.line_start is not None else -1
    return (0, group.artifact, line, group.group_key)


def _sort_key(item: tuple[int, Finding]) -> tuple:
    position, finding = item
    location = finding.location
    if location is None:
        return (1, subject_key(finding), -1, position)
    line = location.line if location.line is not None else -1
    return (0, location.artifact, line, position)


def _joins(previous: Finding, finding: Finding, line_tolerance: int) -> bool:
    """Whether ``finding`` continues the run that ``previous`` ended."""
    if previous.location is None or finding.location is None:
        if previous.location is None and finding.location is None:
            return subject_key(previous) == subject_key(finding)
        return False
    if previous.location.artifact != finding.location.artifact:
        return False
    prev_line, line = previous.location.line, finding.location.line
    if prev_line is None or line is None:
        return prev_line is None and line is None
    return line - prev_line <= line_tolerance


def _build_group(run: list[tuple[int, Finding]]) -> FindingGroup:
    members = [finding for _, finding in sorted(run, key=lambda item: item[0])]
    first = members[0]
    if first.location is None:
        return FindingGroup(group_key=subject_key(first), members=members)

    lines = [m.location.line for m in members if m.location.line is not None]
    line_start = min(lines) if lines else None
    line_end = max(lines) if lines else None
    return FindingGroup(
        group_key=location_key(first.location.artifact, line_start, line_end),
        members=members,
        artifact=first.location.artifact,
        line_start=line_start,
        line_end=line_end,
    )


def group_findings(
    findings: Iterable[Finding],
    *,
    line_tolerance: int = DEFAULT_LINE_TOLERANCE,
) -> list[FindingGroup]:
    """Partition findings into groups, returned in first-seen order.

    One sort plus one linear merge pass, so O(n log n) overall. Runs chain:
    with a tolerance of 2, lines 10, 12 and 14 form a single group.
    """
    if line_tolerance < 0:
        raise ValueError(f"line_tolerance must be >= 0, got {line_tolerance}")

    indexed = sorted(enumerate(findings), key=_sort_key)

    runs: list[list[tuple[int, Finding]]] = []
    previous: Finding | None = None
    for position, finding in indexed:
        if previous is not None and _joins(previous, finding, line_tolerance):
            runs[-1].append((position, finding))
        else:
            runs.append([(position, finding)])
        previous = finding

    runs.sort(key=lambda run: min(position for position, _ in run))
    return [_build_group(run) for run in runs]
