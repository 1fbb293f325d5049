"""Tests for Markdown report rendering."""

from audit_platform.rendering import render_markdown
from contracts.v1.schemas import ConsolidateRequest
from core.service import consolidate


def _report(payload: dict):
    return consolidate(ConsolidateRequest.model_validate(payload)).report


def _record(id, location, **overrides):
    record = {"id": id, "title": "Issue", "location": location, "severity": "HIGH", "category": "security"}
    record.update(overrides)
    return record


def test_empty_report_renders_zero_summary_and_note():
    text = render_markdown(_report({"context": {"type": "STATIC_CONTENT"}}))

    assert text.startswith("# Consensus Report\n")
    assert "CONTEXT: STATIC_CONTENT" in text
    assert "> No findings: analyzers reported no issues (context: STATIC_CONTENT)." in text
    assert "| Critical Priority | 0 |" in text
    assert "## Disputes\n\n[none]" in text
    assert "## Agreement Matrix\n\n[none]" in text


def test_prioritized_groups_cite_every_source():
    report = _report({
        "analyzer_outputs": [
            {"source": "A", "records": [_record("1", "checkout.ts:15", rationale="Total not re-validated.")]},
            {"source": "B", "records": [_record("2", "checkout.ts:15")]},
        ],
    })

    text = render_markdown(report)

    assert "## Critical Priority" in text
    assert "- **Location**: `checkout.ts:15`" in text
    assert "- **Sources**: A, B" in text
    assert "> Total not re-validated." in text
    assert "| `checkout.ts:15` | ✓ | ✓ |" in text


def test_disputes_and_exclusions_are_rendered():
    report = _report({
        "analyzer_outputs": [
            {"source": "A", "records": [_record("1", "cart.ts:42", title="Array never empty")]},
            {"source": "B", "records": [_record("1", "cart.ts:42", title="Possible out-of-bounds")]},
            {"source": "C", "records": [_record("1", "home.ts:3", category="ai-disclosure")]},
        ],
        "context": {"type": "ECOMMERCE"},
        "options": {"contradiction_predicate": "clearance-markers"},
    })

    text = render_markdown(report)

    assert "- `A/1` contradicts `B/1`" in text
    assert "| `cart.ts:42` | ✗ | ✗ | · |" in text
    assert "## False Positives (Excluded)" in text
    assert "| `home.ts:3` | Issue | C | Out of scope for ECOMMERCE context" in text


def test_normalization_errors_and_unmatched_resolutions_sections():
    report = _report({
        "analyzer_outputs": [{"source": "A", "records": [{"id": "1"}]}],
        "resolutions": [{"group_key": "gone.ts:1", "verdict": "CONFIRMED"}],
    })

    text = render_markdown(report)

    assert "- A record #1: missing required field 'title'" in text
    assert "- `gone.ts:1` (CONFIRMED)" in text


def test_rendering_is_deterministic():
    payload = {"analyzer_outputs": [{"source": "A", "records": [_record("1", "a.ts:1")]}]}
    assert render_markdown(_report(payload)) == render_markdown(_report(payload))
