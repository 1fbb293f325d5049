"""Adapters that read each analyzer's raw record shape into canonical fields."""

from __future__ import annotations

import re
from typing import Any

from core.ports import RecordAdapter

_LOCATION_STRING = re.compile(r"^(?P<artifact>.+?):(?P<line>\d+)(?:[-:]\d+)?$")


def _first(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def split_location_string(value: str) -> tuple[str, str | None]:
    """Split ``"path/file.ts:42"`` into artifact and line text.

    Windows drive letters (``C:\\src\\a.py``) are left intact because the
    trailing segment must be numeric to count as a line.
    """
    match = _LOCATION_STRING.match(value.strip())
    if match:
        return match.group("artifact"), match.group("line")
    return value.strip(), None


class CanonicalRecordAdapter(RecordAdapter):
    """Reads records already shaped like a ``Finding``."""

    format_name = "canonical"

    def read(self, record: Any) -> dict[str, Any]:
        if not isinstance(record, dict):
            raise ValueError(f"record must be an object, got {type(record).__name__}")

        location = record.get("location")
        artifact = None
        line = None
        if isinstance(location, dict):
            artifact = _text(location.get("artifact"))
            line = location.get("line")
        elif isinstance(location, str):
            artifact, line = split_location_string(location)
            artifact = _text(artifact)

        return {
            "id": _text(record.get("id")),
            "source": _text(record.get("source")),
            "title": _text(record.get("title")),
            "artifact": artifact,
            "line": line,
            "severity": record.get("severity"),
            "declared_confidence": _first(record, "declared_confidence", "declaredConfidence"),
            "category": _text(record.get("category")) or "",
            "rationale": record.get("rationale") or "",
            "remediation": record.get("remediation") or "",
        }


class FlatRecordAdapter(RecordAdapter):
    """Reads scanner-style flat records (``file``/``line``/``description``)."""

    format_name = "flat"

    def read(self, record: Any) -> dict[str, Any]:
        if not isinstance(record, dict):
            raise ValueError(f"record must be an object, got {type(record).__name__}")

        artifact = _text(_first(record, "file", "path", "artifact"))
        line = record.get("line")
        location = record.get("location")
        if artifact is None and isinstance(location, str):
            artifact, parsed_line = split_location_string(location)
            artifact = _text(artifact)
            if line is None:
                line = parsed_line

        return {
            "id": _text(_first(record, "id", "finding_id")),
            "source": _text(_first(record, "source", "analyzer", "tool")),
            "title": _text(_first(record, "title", "name", "message")),
            "artifact": artifact,
            "line": line,
            "severity": record.get("severity"),
            "declared_confidence": record.get("confidence"),
            "category": _text(_first(record, "category", "rule", "rule_id", "type")) or "",
            "rationale": _first(record, "description", "rationale", "details") or "",
            "remediation": _first(record, "recommendation", "fix", "remediation") or "",
        }


DEFAULT_ADAPTERS: dict[str, RecordAdapter] = {
    adapter.format_name: adapter
    for adapter in (CanonicalRecordAdapter(), FlatRecordAdapter())
}
