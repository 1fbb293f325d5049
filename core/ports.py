"""Core extension ports: raw-record adapters and contradiction predicates."""

from __future__ import annotations

from typing import Any, Protocol

from .domain import Finding


class RecordAdapter(Protocol):
    """Port for reading one analyzer's raw record shape.

    Returns a dict of canonical field values (any subset of ``id``, ``source``,
    ``title``, ``artifact``, ``line``, ``severity``, ``declared_confidence``,
    ``category``, ``rationale``, ``remediation``). Raises ``ValueError`` when
    the record cannot be read at all.
    """

    format_name: str

    def read(self, record: Any) -> dict[str, Any]:
        ...


class ContradictionPredicate(Protocol):
    """Port deciding whether two findings at one location contradict each other."""

    def __call__(self, first: Finding, second: Finding) -> bool:
        ...
