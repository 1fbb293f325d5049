"""Static registry mapping audit types to their analyzers and consensus coordinator."""

from __future__ import annotations

from copy import deepcopy

DEPTHS = ("quick", "deep", "ultradeep")
DEFAULT_DEPTH = "quick"


def _analyzers(prefix: str, labels: dict[str, str]) -> dict[str, dict[str, str]]:
    return {
        key: {"subagent_type": f"{prefix}-{key}", "label": label}
        for key, label in labels.items()
    }


AUDIT_TYPES: dict[str, dict] = {
    "logic": {
        "name": "Logic Analysis",
        "prefix": "Logic",
        "color": "#7aa2f7",
        "command": "code/logic",
        "analyzers": _analyzers("logic-analyzer", {
            "edge": "Edge Cases",
            "invariant": "Invariants",
            "flow": "Control Flow",
            "type": "Type Safety",
            "race": "Race Conditions",
        }),
        "consensus": {"subagent_type": "logic-consensus", "label": "Logic Consensus"},
        "quick_analyzers": ["edge", "invariant", "flow", "type", "race"],
        "deep_analyzers": ["edge", "invariant", "flow", "type", "race"],
    },
    "security": {
        "name": "Security Vulnerability",
        "prefix": "Sec",
        "color": "#f7768e",
        "command": "code/security",
        "analyzers": _analyzers("security-analyzer", {
            "injection": "Injection",
            "auth": "Authentication",
            "authz": "Authorization",
            "secrets": "Secrets",
            "input": "Input Validation",
            "deps": "Dependencies",
            "infra": "Infrastructure",
            "api": "API Security",
        }),
        "consensus": {"subagent_type": "security-consensus", "label": "Security Consensus"},
        "quick_analyzers": ["injection", "auth", "authz", "secrets", "input"],
        "deep_analyzers": ["injection", "auth", "authz", "secrets", "input", "deps", "infra", "api"],
    },
    "performance": {
        "name": "Performance Bottleneck",
        "prefix": "Perf",
        "color": "#73daca",
        "command": "code/performance",
        "analyzers": _analyzers("perf-analyzer", {
            "queries": "Queries",
            "rendering": "Rendering",
            "memory": "Memory",
            "bundle": "Bundle Size",
            "compute": "Compute",
            "network": "Network",
            "caching": "Caching",
            "assets": "Assets",
        }),
        "consensus": {"subagent_type": "perf-consensus", "label": "Performance Consensus"},
        "quick_analyzers": ["queries", "rendering", "memory", "bundle", "compute"],
        "deep_analyzers": [
            "queries", "rendering", "memory", "bundle", "compute", "network", "caching", "assets",
        ],
    },
    "test": {
        "name": "Test Quality",
        "prefix": "Test",
        "color": "#e0af68",
        "command": "code/test",
        "analyzers": _analyzers("test-analyzer", {
            "coverage": "Coverage",
            "fragility": "Fragility",
            "mocking": "Mocking",
            "assertions": "Assertions",
            "structure": "Structure",
            "integration": "Integration",
            "maintenance": "Maintenance",
            "patterns": "Anti-Patterns",
        }),
        "consensus": {"subagent_type": "test-consensus", "label": "Test Consensus"},
        "quick_analyzers": ["coverage", "fragility", "mocking", "assertions", "structure"],
        "deep_analyzers": [
            "coverage", "fragility", "mocking", "assertions", "structure",
            "integration", "maintenance", "patterns",
        ],
    },
    "completeness": {
        "name": "Completeness",
        "prefix": "Comp",
        "color": "#bb9af7",
        "command": "code/completeness",
        "analyzers": _analyzers("completeness-analyzer", {
            "handlers": "Handlers",
            "routes": "Routes",
            "api": "API Endpoints",
            "stubs": "Stubs",
            "state": "State",
            "imports": "Imports",
            "conditional": "Conditionals",
        }),
        "consensus": {"subagent_type": "completeness-consensus", "label": "Completeness Consensus"},
        "quick_analyzers": ["handlers", "routes", "api", "stubs", "state"],
        "deep_analyzers": ["handlers", "routes", "api", "stubs", "state", "imports", "conditional"],
    },
    "brainstorm": {
        "name": "Feature Brainstorm",
        "prefix": "Brain",
        "color": "#c0caf5",
        "command": "ideate/features",
        "analyzers": _analyzers("brainstorm-analyzer", {
            "features": "Feature Gaps",
            "ux": "UX Improvements",
            "market": "Market Features",
            "growth": "Growth & Engagement",
            "integration": "Integrations",
        }),
        "consensus": {"subagent_type": "brainstorm-consensus", "label": "Brainstorm Consensus"},
        "quick_analyzers": ["features", "ux", "market"],
        "deep_analyzers": ["features", "ux", "market", "growth", "integration"],
    },
    "ideate": {
        "name": "Ideation",
        "prefix": "Idea",
        "color": "#ff9e64",
        "command": "ideate/new",
        "analyzers": {
            key: {"subagent_type": f"agileflow-{key}", "label": label}
            for key, label in {
                "security": "Security",
                "performance": "Performance",
                "refactor": "Code Quality",
                "ui": "UX/Design",
                "testing": "Testing",
                "api": "API/Architecture",
                "accessibility": "Accessibility",
                "compliance": "Compliance",
                "database": "Database",
                "monitoring": "Monitoring",
                "qa": "QA",
                "analytics": "Analytics",
                "documentation": "Documentation",
            }.items()
        },
        # Ideation synthesizes on its own; there is no consensus coordinator.
        "consensus": None,
        "quick_analyzers": ["security", "performance", "refactor", "ui", "testing", "api"],
        "deep_analyzers": [
            "security", "performance", "refactor", "ui", "testing", "api", "accessibility",
            "compliance", "database", "monitoring", "qa", "analytics", "documentation",
        ],
    },
    "legal": {
        "name": "Legal Risk",
        "prefix": "Legal",
        "color": "#9ece6a",
        "command": "code/legal",
        "analyzers": _analyzers("legal-analyzer", {
            "privacy": "Privacy",
            "terms": "Terms",
            "a11y": "Accessibility",
            "licensing": "Licensing",
            "consumer": "Consumer",
            "security": "Security",
            "ai": "AI Compliance",
            "content": "Content",
            "international": "International",
        }),
        "consensus": {"subagent_type": "legal-consensus", "label": "Legal Consensus"},
        "quick_analyzers": ["privacy", "terms", "a11y", "licensing", "consumer"],
        "deep_analyzers": [
            "privacy", "terms", "a11y", "licensing", "consumer",
            "security", "ai", "content", "international",
        ],
    },
}


def get_audit_type(audit_type: str) -> dict | None:
    """Return a copy of the audit type configuration, or None if unknown."""
    audit = AUDIT_TYPES.get(audit_type)
    return deepcopy(audit) if audit is not None else None


def get_audit_type_keys() -> list[str]:
    return list(AUDIT_TYPES)


def get_analyzers_for_audit(
    audit_type: str,
    depth: str | None = None,
    focus: list[str] | None = None,
) -> dict | None:
    """Select analyzers for an audit run.

    ``ultradeep`` uses the deep selection. A focus list narrows the depth's
    analyzers but also pulls in focused analyzers the depth would skip;
    ``["all"]`` or an empty focus means no narrowing.
    """
    audit = AUDIT_TYPES.get(audit_type)
    if audit is None:
        return None

    effective_depth = "deep" if depth == "ultradeep" else (depth or DEFAULT_DEPTH)
    keys = audit["deep_analyzers"] if effective_depth == "deep" else audit["quick_analyzers"]

    selected = list(keys)
    if focus and "all" not in focus:
        selected = [key for key in keys if key in focus]
        for key in focus:
            if key in audit["analyzers"] and key not in selected:
                selected.append(key)

    return {
        "analyzers": [
            {
                "key": key,
                "subagent_type": audit["analyzers"][key]["subagent_type"],
                "label": audit["analyzers"][key]["label"],
            }
            for key in selected
        ],
        "consensus": deepcopy(audit["consensus"]),
    }


def get_analyzer_counts(audit_type: str) -> dict[str, int] | None:
    audit = AUDIT_TYPES.get(audit_type)
    if audit is None:
        return None
    return {
        "quick": len(audit["quick_analyzers"]),
        "deep": len(audit["deep_analyzers"]),
        "total": len(audit["analyzers"]),
    }


def expected_sources_for_audit(
    audit_type: str,
    depth: str | None = None,
    focus: list[str] | None = None,
) -> list[str]:
    """Subagent types expected to report for an audit run.

    Raises ``ValueError`` for an unknown audit type.
    """
    selection = get_analyzers_for_audit(audit_type, depth, focus)
    if selection is None:
        valid = ", ".join(get_audit_type_keys())
        raise ValueError(f"Unknown audit type '{audit_type}'. Valid audit types: {valid}")
    return [a["subagent_type"] for a in selection["analyzers"]]


def source_aliases_for_audit(audit_type: str) -> dict[str, str]:
    """Map each analyzer key of an audit type to its subagent type.

    Lets an output file named after the short key (``edge.json``) report under
    the same source name the agreement matrix expects (``logic-analyzer-edge``).
    """
    audit = AUDIT_TYPES.get(audit_type)
    if audit is None:
        return {}
    return {key: entry["subagent_type"] for key, entry in audit["analyzers"].items()}
