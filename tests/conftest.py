"""
Shared fixtures for audit-consensus tests.
"""

import json
from pathlib import Path

import pytest

from core.domain import AnalyzerOutput, Finding, Location
from audit_platform.config import (
    CORE_URL_ENV,
    LINE_TOLERANCE_ENV,
    LOG_LEVEL_ENV,
    PREDICATE_ENV,
    USER_CONFIG_PATH_ENV,
)


@pytest.fixture
def make_finding():
    """Build a normalized ``Finding`` with sensible defaults.

    Usage:
        make_finding("A", "checkout.ts", 15, severity="HIGH")
    """
    counter = {"n": 0}

    def _make(
        source: str = "A",
        artifact: str | None = "app.ts",
        line: int | None = 1,
        *,
        id: str | None = None,
        title: str = "Issue",
        severity: str = "MEDIUM",
        declared_confidence: str = "LOW",
        category: str = "security",
        rationale: str = "",
        remediation: str = "",
    ) -> Finding:
        counter["n"] += 1
        return Finding(
            id=id or f"f{counter['n']}",
            source=source,
            title=title,
            location=Location(artifact, line) if artifact else None,
            severity=severity,
            declared_confidence=declared_confidence,
            category=category,
            rationale=rationale,
            remediation=remediation,
        )

    return _make


@pytest.fixture
def raw_record():
    """Build a raw canonical-format analyzer record."""

    def _make(id: str = "1", artifact: str = "app.ts", line=1, **overrides) -> dict:
        record = {
            "id": id,
            "title": "Issue",
            "location": {"artifact": artifact, "line": line},
            "severity": "MEDIUM",
            "declared_confidence": "LOW",
            "category": "security",
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def analyzer_output(raw_record):
    """One analyzer output carrying the given raw records."""

    def _make(source: str, *records: dict, format: str = "canonical") -> AnalyzerOutput:
        return AnalyzerOutput(source=source, records=list(records), format=format)

    return _make


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document under ``tmp_path`` and return its path."""

    def _write(name: str, payload) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep tests away from the real user config and ambient env overrides."""
    monkeypatch.setenv(USER_CONFIG_PATH_ENV, str(tmp_path / "user-config" / "config.json"))
    for name in (LINE_TOLERANCE_ENV, PREDICATE_ENV, CORE_URL_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)
