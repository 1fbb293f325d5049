"""
Configuration for audit-consensus clients.

Settings resolve in order: explicit arguments, environment variables, the
user-level config file, then built-in defaults.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from core.conflicts import PREDICATES
from core.grouping import DEFAULT_LINE_TOLERANCE

logger = logging.getLogger(__name__)

LINE_TOLERANCE_ENV = "AUDIT_CONSENSUS_LINE_TOLERANCE"
PREDICATE_ENV = "AUDIT_CONSENSUS_PREDICATE"
CORE_URL_ENV = "AUDIT_CONSENSUS_CORE_URL"
LOG_LEVEL_ENV = "AUDIT_CONSENSUS_LOG_LEVEL"
USER_CONFIG_PATH_ENV = "AUDIT_CONSENSUS_USER_CONFIG_PATH"

DEFAULT_PREDICATE = "none"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class ConsolidationSettings:
    line_tolerance: int = DEFAULT_LINE_TOLERANCE
    contradiction_predicate: str = DEFAULT_PREDICATE
    core_url: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    relevant_categories: dict[str, list[str]] = field(default_factory=dict)


def get_user_config_path() -> Path:
    """Return the user-level config file path.

    Uses a platform-appropriate location and supports an override via
    ``AUDIT_CONSENSUS_USER_CONFIG_PATH`` for tests.
    """
    override = os.environ.get(USER_CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override)

    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))
        return base / "audit-consensus" / "config.json"

    return Path.home() / ".config" / "audit-consensus" / "config.json"


def _to_int(value: Any, default: int) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 0 else default


def _valid_predicate(value: Any, default: str) -> str:
    name = str(value or "").strip()
    if name in PREDICATES:
        return name
    if name:
        logger.warning("Ignoring unknown contradiction predicate %r.", name)
    return default


def _valid_log_level(value: Any, default: str) -> str:
    level = str(value or "").strip().upper()
    return level if level in LOG_LEVELS else default


def load_user_settings() -> ConsolidationSettings:
    """Read settings from the user config file; missing or broken files yield defaults."""
    path = get_user_config_path()
    if not path.exists():
        return ConsolidationSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read user config %s: %s", path, e)
        return ConsolidationSettings()
    if not isinstance(data, dict):
        return ConsolidationSettings()

    defaults = ConsolidationSettings()
    core_url = data.get("core_url")
    categories = data.get("relevant_categories")
    return ConsolidationSettings(
        line_tolerance=_to_int(data.get("line_tolerance"), defaults.line_tolerance),
        contradiction_predicate=_valid_predicate(
            data.get("contradiction_predicate"), defaults.contradiction_predicate
        ),
        core_url=core_url.strip() or None if isinstance(core_url, str) else None,
        log_level=_valid_log_level(data.get("log_level"), defaults.log_level),
        relevant_categories={
            str(k).upper(): [str(c) for c in v]
            for k, v in categories.items()
            if isinstance(v, list)
        } if isinstance(categories, dict) else {},
    )


def save_user_settings(settings: ConsolidationSettings) -> None:
    path = get_user_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "line_tolerance": settings.line_tolerance,
        "contradiction_predicate": settings.contradiction_predicate,
        "core_url": settings.core_url,
        "log_level": settings.log_level,
        "relevant_categories": settings.relevant_categories,
    }
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def apply_env_overrides(settings: ConsolidationSettings) -> ConsolidationSettings:
    updates: dict[str, Any] = {}
    raw = os.environ.get(LINE_TOLERANCE_ENV, "").strip()
    if raw:
        updates["line_tolerance"] = _to_int(raw, settings.line_tolerance)
    raw = os.environ.get(PREDICATE_ENV, "").strip()
    if raw:
        updates["contradiction_predicate"] = _valid_predicate(raw, settings.contradiction_predicate)
    raw = os.environ.get(CORE_URL_ENV, "").strip()
    if raw:
        updates["core_url"] = raw
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if raw:
        updates["log_level"] = _valid_log_level(raw, settings.log_level)
    return replace(settings, **updates)


def resolve_settings(**overrides: Any) -> ConsolidationSettings:
    """Resolve effective settings; ``None`` overrides are ignored."""
    settings = apply_env_overrides(load_user_settings())
    explicit = {k: v for k, v in overrides.items() if v is not None}
    if "contradiction_predicate" in explicit and explicit["contradiction_predicate"] not in PREDICATES:
        valid = ", ".join(sorted(PREDICATES))
        raise ValueError(
            f"Unknown contradiction predicate '{explicit['contradiction_predicate']}'. "
            f"Valid predicates: {valid}"
        )
    if "line_tolerance" in explicit and explicit["line_tolerance"] < 0:
        raise ValueError("line_tolerance must be >= 0")
    return replace(settings, **explicit)
