"""Finding normalizer: heterogeneous analyzer output into canonical ``Finding`` records.

Malformed records never stop the batch. They are collected as
``NormalizationError`` entries so the caller can report them alongside the
consolidated result. Unknown enum values fall back to defaults with a warning.
"""

from __future__ import annotations

import logging
import re
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Iterable

from .adapters import DEFAULT_ADAPTERS
from .domain import (
    DECLARED_CONFIDENCES,
    SEVERITIES,
    AnalyzerOutput,
    DuplicateFindingError,
    Finding,
    Location,
    NormalizationError,
)
from .ports import RecordAdapter

logger = logging.getLogger(__name__)

DEFAULT_SEVERITY = "MEDIUM"
DEFAULT_DECLARED_CONFIDENCE = "LOW"

_RECORD_EXCERPT_CHARS = 500


@dataclass(slots=True)
class NormalizationResult:
    """Findings, rejected records, and substitution warnings from one batch."""

    findings: list[Finding] = field(default_factory=list)
    errors: list[NormalizationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def extend(self, other: "NormalizationResult") -> None:
        self.findings.extend(other.findings)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)


def _enum_token(value: Any) -> str:
    return re.sub(r"[\s\-]+", "_", str(value).strip()).upper()


def parse_enum(value: Any, allowed: tuple[str, ...], default: str) -> tuple[str, bool]:
    """Parse a case-insensitive enum value.

    Returns ``(value, substituted)`` where ``substituted`` is True when the
    default had to be used.
    """
    if value is None or str(value).strip() == "":
        return default, True
    token = _enum_token(value)
    if token in allowed:
        return token, False
    return default, True


def parse_line(value: Any) -> int | None:
    """Return a positive line number, or None when absent/unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"invalid line number {value!r}")
    try:
        line = int(str(value).strip())
    except ValueError as e:
        raise ValueError(f"invalid line number {value!r}") from e
    if line < 1:
        raise ValueError(f"invalid line number {value!r}")
    return line


def _excerpt(record: Any) -> Any:
    if isinstance(record, dict):
        return deepcopy(record)
    text = repr(record)
    return text[:_RECORD_EXCERPT_CHARS]


def normalize_record(
    fields: dict[str, Any],
    *,
    default_source: str,
    position: int,
    warnings: list[str],
) -> Finding:
    """Build a ``Finding`` from adapter fields.

    Raises ``ValueError`` when the title or source is missing.
    """
    source = fields.get("source") or (default_source or "").strip()
    if not source:
        raise ValueError("missing required field 'source'")
    title = fields.get("title")
    if not title:
        raise ValueError("missing required field 'title'")

    finding_id = fields.get("id") or f"{source}-{position + 1}"
    label = f"{source}/{finding_id}"

    severity, substituted = parse_enum(fields.get("severity"), SEVERITIES, DEFAULT_SEVERITY)
    if substituted:
        message = (
            f"Finding {label} has unrecognised severity {fields.get('severity')!r}; "
            f"defaulting to {DEFAULT_SEVERITY}."
        )
        logger.warning(message)
        warnings.append(message)

    confidence, substituted = parse_enum(
        fields.get("declared_confidence"), DECLARED_CONFIDENCES, DEFAULT_DECLARED_CONFIDENCE
    )
    if substituted:
        message = (
            f"Finding {label} has unrecognised declared confidence "
            f"{fields.get('declared_confidence')!r}; defaulting to {DEFAULT_DECLARED_CONFIDENCE}."
        )
        logger.warning(message)
        warnings.append(message)

    location = None
    artifact = fields.get("artifact")
    if artifact:
        try:
            line = parse_line(fields.get("line"))
        except ValueError as e:
            message = f"Finding {label} has {e}; clearing."
            logger.warning(message)
            warnings.append(message)
            line = None
        location = Location(artifact=artifact, line=line)

    return Finding(
        id=str(finding_id),
        source=source,
        title=title,
        location=location,
        severity=severity,
        declared_confidence=confidence,
        category=fields.get("category") or "",
        rationale=str(fields.get("rationale") or ""),
        remediation=str(fields.get("remediation") or ""),
    )


def normalize_output(
    output: AnalyzerOutput,
    *,
    adapters: dict[str, RecordAdapter] | None = None,
) -> NormalizationResult:
    """Normalize one analyzer's output. Safe to run concurrently per output."""
    registry = adapters or DEFAULT_ADAPTERS
    result = NormalizationResult()
    source_label = output.source or "unknown"

    adapter = registry.get(output.format)
    if adapter is None:
        valid = ", ".join(sorted(registry))
        reason = f"unknown record format '{output.format}'. Valid formats: {valid}"
        for index, record in enumerate(output.records):
            result.errors.append(NormalizationError(source_label, index, reason, _excerpt(record)))
        if output.records:
            logger.warning("Rejected %d record(s) from '%s': %s", len(output.records), source_label, reason)
        return result

    for index, record in enumerate(output.records):
        try:
            fields = adapter.read(record)
            finding = normalize_record(
                fields,
                default_source=output.source,
                position=index,
                warnings=result.warnings,
            )
        except ValueError as e:
            logger.warning("Rejected record #%d from '%s': %s", index + 1, source_label, e)
            result.errors.append(NormalizationError(source_label, index, str(e), _excerpt(record)))
            continue
        result.findings.append(finding)

    return result


def ensure_unique_identities(findings: Iterable[Finding]) -> None:
    """Fail loudly on a repeated ``(id, source)`` pair."""
    seen: set[tuple[str, str]] = set()
    for finding in findings:
        identity = (finding.id, finding.source)
        if identity in seen:
            raise DuplicateFindingError(finding.id, finding.source)
        seen.add(identity)


def merge_results(results: Iterable[NormalizationResult]) -> NormalizationResult:
    """Fan-in per-analyzer results, preserving input order."""
    merged = NormalizationResult()
    for result in results:
        merged.extend(result)
    return merged


def normalize_outputs(
    outputs: Iterable[AnalyzerOutput],
    *,
    adapters: dict[str, RecordAdapter] | None = None,
) -> NormalizationResult:
    """Normalize a batch of analyzer outputs and validate identity uniqueness."""
    merged = merge_results(normalize_output(output, adapters=adapters) for output in outputs)
    ensure_unique_identities(merged.findings)
    return merged
