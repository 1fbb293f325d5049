"""Markdown rendering of consolidated reports."""

from __future__ import annotations

from contracts.v1.schemas import FindingGroupContract, ReportContract

PRIORITY_HEADINGS = {
    "CRITICAL_PRIORITY": "Critical Priority",
    "HIGH_PRIORITY": "High Priority",
    "MEDIUM_PRIORITY": "Medium Priority",
    "LOW_PRIORITY": "Low Priority",
    "INFO": "Info",
}

MATRIX_SYMBOLS = {
    "flagged": "✓",
    "not_flagged": "·",
    "contradicted": "✗",
}


def _cell(text: str) -> str:
    return " ".join(str(text).split()).replace("|", "\\|")


def _location(group: FindingGroupContract) -> str:
    if group.artifact is None:
        return "(no location)"
    if group.line_start is None:
        return group.artifact
    if group.line_end is not None and group.line_end != group.line_start:
        return f"{group.artifact}:{group.line_start}-{group.line_end}"
    return f"{group.artifact}:{group.line_start}"


def _render_group(group: FindingGroupContract, heading_level: str = "###") -> list[str]:
    lines = [
        f"{heading_level} {_cell(group.title)}",
        "",
        f"- **Location**: `{_location(group)}`",
        f"- **Severity**: {group.severity}",
    ]
    if group.consensus_confidence:
        lines.append(f"- **Consensus**: {group.consensus_confidence}")
    lines.append(f"- **Sources**: {', '.join(group.sources)}")
    if group.resolution is not None:
        lines.append(f"- **Adjudicated**: {group.resolution.verdict}: {group.resolution.reasoning}")
    lines.append("")

    for member in group.members:
        lines.append(f"**{member.source}** ({member.severity}, declared {member.declared_confidence}): {member.title}")
        if member.rationale:
            lines.append(f"> {_cell(member.rationale)}")
        if member.remediation:
            lines.append(f"> Remediation: {_cell(member.remediation)}")
        lines.append("")
    return lines


def render_markdown(report: ReportContract, *, title: str = "Consensus Report") -> str:
    """Render a report contract as Markdown. Identical input renders identically."""
    lines = [
        f"# {title}",
        "",
        f"CONTEXT: {report.context_type}",
        f"FINDINGS: {report.totals.get('findings', 0)}",
        f"GROUPS: {report.totals.get('groups', 0)}",
        "",
    ]
    for note in report.notes:
        lines.append(f"> {note}")
    if report.notes:
        lines.append("")

    lines.extend([
        "## Summary",
        "",
        "| Priority | Count |",
        "|---|---|",
    ])
    for priority, heading in PRIORITY_HEADINGS.items():
        lines.append(f"| {heading} | {report.summary.get(priority, 0)} |")
    lines.append(f"| Disputed | {report.totals.get('disputed', 0)} |")
    lines.append(f"| Excluded | {report.totals.get('excluded', 0)} |")
    lines.append("")

    for priority, heading in PRIORITY_HEADINGS.items():
        groups = report.prioritized.get(priority, [])
        if not groups:
            continue
        lines.extend([f"## {heading}", ""])
        for group in groups:
            lines.extend(_render_group(group))

    lines.extend(["## Disputes", ""])
    if report.disputes:
        for group in report.disputes:
            lines.extend(_render_group(group))
            for first, second in group.conflicts:
                lines.append(f"- `{first}` contradicts `{second}`")
            lines.append("")
    else:
        lines.extend(["[none]", ""])

    lines.extend(["## False Positives (Excluded)", ""])
    if report.excluded:
        lines.extend(["| Location | Title | Sources | Reason |", "|---|---|---|---|"])
        for group in report.excluded:
            lines.append(
                f"| `{_location(group)}` | {_cell(group.title)} | {', '.join(group.sources)} "
                f"| {_cell(group.exclusion_reason)} |"
            )
        lines.append("")
    else:
        lines.extend(["[none]", ""])

    matrix = report.agreement_matrix
    lines.extend(["## Agreement Matrix", ""])
    if matrix.rows:
        lines.append("| Group | " + " | ".join(matrix.sources) + " |")
        lines.append("|---|" + "---|" * len(matrix.sources))
        for row in matrix.rows:
            cells = " | ".join(MATRIX_SYMBOLS[row.cells[s]] for s in matrix.sources)
            lines.append(f"| `{row.group_key}` | {cells} |")
        lines.extend(["", "✓ flagged · not flagged ✗ contradicted", ""])
    else:
        lines.extend(["[none]", ""])

    if report.errors:
        lines.extend(["## Normalization Errors", ""])
        for err in report.errors:
            lines.append(f"- {err.source} record #{err.index + 1}: {err.reason}")
        lines.append("")

    if report.unmatched_resolutions:
        lines.extend(["## Unmatched Resolutions", ""])
        for resolution in report.unmatched_resolutions:
            lines.append(f"- `{resolution.group_key}` ({resolution.verdict})")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
