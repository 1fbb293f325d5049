"""
Terminal output helpers for the audit-consensus CLI.
"""

import sys
from pathlib import Path

from contracts.v1.schemas import ReportContract

PRIORITY_LABELS = (
    ("CRITICAL_PRIORITY", "Critical"),
    ("HIGH_PRIORITY", "High"),
    ("MEDIUM_PRIORITY", "Medium"),
    ("LOW_PRIORITY", "Low"),
    ("INFO", "Info"),
)


def print_summary(report: ReportContract):
    """Print the consolidated counts."""
    print("\n" + "=" * 60)
    print(f"CONSENSUS SUMMARY ({report.context_type})")
    print("=" * 60)
    print(f"  Findings: {report.totals.get('findings', 0)}")
    print(f"  Groups:   {report.totals.get('groups', 0)}")
    for priority, label in PRIORITY_LABELS:
        count = report.summary.get(priority, 0)
        if count:
            print(f"  {label + ':':<9} {count}")
    print(f"  Disputed: {report.totals.get('disputed', 0)}")
    print(f"  Excluded: {report.totals.get('excluded', 0)}")
    if report.errors:
        print(f"  ✗ {len(report.errors)} record(s) rejected during normalization")
    for note in report.notes:
        print(f"  {note}")


def write_output(content: str, path: Path | None = None):
    """Write rendered output to ``path``, or to stdout when no path is given."""
    if path is None:
        sys.stdout.write(content)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    print(f"  ✓ Report written to {path}")
