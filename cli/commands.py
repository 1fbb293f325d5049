"""
CLI subcommand implementations for audit-consensus.

Subcommands::

    audit-consensus consolidate FILE... --context TYPE [--audit T] [--depth D] [--focus K]
                                [--resolutions FILE] [--line-tolerance N] [--predicate P]
                                [--format markdown|json] [--output FILE] [--core-url URL]
    audit-consensus audits list
    audit-consensus audits show TYPE [--depth D] [--focus K ...]
    audit-consensus contexts
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from audit_platform.config import LOG_LEVELS, resolve_settings
from audit_platform.core_client import CoreClient, CoreClientError
from audit_platform.facade import PlatformFacade
from audit_platform.registry import (
    DEPTHS,
    get_analyzer_counts,
    get_analyzers_for_audit,
    get_audit_type,
    get_audit_type_keys,
)
from audit_platform.rendering import render_markdown
from core.conflicts import PREDICATES
from core.domain import CONTEXT_TYPES, ConsensusError
from core.relevance import BASELINE_CATEGORIES, CONTEXT_CATEGORIES

from .interface import print_summary, write_output


async def cmd_consolidate(args):
    """Consolidate analyzer output files into one prioritized report."""
    paths = [Path(p) for p in args.inputs]
    missing = [p for p in paths if not p.exists()]
    if missing:
        print(f"Error: Input file not found: {missing[0]}")
        sys.exit(1)

    if args.audit and get_audit_type(args.audit) is None:
        print(f"Error: Unknown audit type '{args.audit}'. Valid: {', '.join(get_audit_type_keys())}")
        sys.exit(1)

    try:
        settings = resolve_settings(
            line_tolerance=args.line_tolerance,
            contradiction_predicate=args.predicate,
            core_url=args.core_url,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    core_client = CoreClient.from_settings(settings)
    facade = PlatformFacade(settings=settings, core_client=core_client)

    try:
        response = await facade.consolidate_files(
            paths,
            context_type=args.context,
            resolutions_path=Path(args.resolutions) if args.resolutions else None,
            audit_type=args.audit,
            depth=args.depth,
            focus=args.focus,
        )
    except (ConsensusError, CoreClientError, ValueError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.format == "json":
        content = json.dumps(response.model_dump(mode="json"), indent=2) + "\n"
    else:
        content = render_markdown(response.report)

    write_output(content, Path(args.output) if args.output else None)
    if args.output:
        print_summary(response.report)


def cmd_audits(args):
    """Inspect the audit registry."""
    if args.audits_action == "list":
        print(f"\n{'Audit':<14}  {'Name':<24}  {'Quick':>5}  {'Deep':>5}  {'Consensus'}")
        print("-" * 75)
        for key in get_audit_type_keys():
            audit = get_audit_type(key)
            counts = get_analyzer_counts(key)
            consensus = audit["consensus"]["subagent_type"] if audit["consensus"] else "(none)"
            print(f"{key:<14}  {audit['name']:<24}  {counts['quick']:>5}  {counts['deep']:>5}  {consensus}")
        return

    selection = get_analyzers_for_audit(args.type, args.depth, args.focus)
    if selection is None:
        print(f"Error: Unknown audit type '{args.type}'. Valid: {', '.join(get_audit_type_keys())}")
        sys.exit(1)
    audit = get_audit_type(args.type)
    print(f"\n{audit['name']} ({args.depth or 'quick'})")
    print("-" * 60)
    for analyzer in selection["analyzers"]:
        print(f"  {analyzer['key']:<14} {analyzer['subagent_type']:<36} {analyzer['label']}")
    consensus = selection["consensus"]
    print(f"\n  Consensus: {consensus['subagent_type'] if consensus else '(none)'}")


def cmd_contexts(args):
    """List project context types and their in-scope categories."""
    print(f"\nBaseline (all contexts): {', '.join(sorted(BASELINE_CATEGORIES))}")
    for context_type in CONTEXT_TYPES:
        if context_type == "GENERAL":
            print("  GENERAL: all categories")
            continue
        specific = CONTEXT_CATEGORIES.get(context_type, frozenset())
        print(f"  {context_type}: {', '.join(sorted(specific)) or '(baseline only)'}")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="audit-consensus",
        description="Merge findings from many analyzers into one prioritized, auditable report",
    )
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default=None,
        help="Logging level (default: AUDIT_CONSENSUS_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- consolidate ---
    p_cons = subparsers.add_parser("consolidate", help="Consolidate analyzer outputs")
    p_cons.add_argument(
        "inputs", nargs="+",
        help="Analyzer output JSON files; a bare list takes its source from the file name "
             "(with --audit, an analyzer key such as edge.json maps to its subagent type)",
    )
    p_cons.add_argument(
        "--context", default="GENERAL",
        help=f"Project context type: {', '.join(CONTEXT_TYPES)} (default: GENERAL)",
    )
    p_cons.add_argument("--resolutions", help="JSON file of adjudications for disputed groups")
    p_cons.add_argument("--audit", help="Audit type, to list silent analyzers in the agreement matrix")
    p_cons.add_argument("--depth", choices=DEPTHS, default=None, help="Audit depth (default: quick)")
    p_cons.add_argument("--focus", action="append", help="Focus analyzer key (repeatable)")
    p_cons.add_argument(
        "--line-tolerance", type=int, default=None,
        help="Merge findings whose lines differ by at most N (default: 0)",
    )
    p_cons.add_argument(
        "--predicate", choices=sorted(PREDICATES), default=None,
        help="Contradiction predicate (default: none)",
    )
    p_cons.add_argument("--format", choices=["markdown", "json"], default="markdown")
    p_cons.add_argument("--output", help="Write the report here instead of stdout")
    p_cons.add_argument("--core-url", help="Use a remote core API instead of running in-process")

    # --- audits ---
    p_audits = subparsers.add_parser("audits", help="Inspect the audit registry")
    sp_audits = p_audits.add_subparsers(dest="audits_action", required=True)
    sp_audits.add_parser("list", help="List audit types")
    sp_show = sp_audits.add_parser("show", help="Show analyzers for an audit type")
    sp_show.add_argument("type", help="Audit type key")
    sp_show.add_argument("--depth", choices=DEPTHS, default=None)
    sp_show.add_argument("--focus", action="append")

    # --- contexts ---
    subparsers.add_parser("contexts", help="List project context types and categories")

    return parser


def configure_logging(level: str | None) -> None:
    settings = resolve_settings(log_level=level)
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def main(argv: list[str] | None = None):
    """Entry point for the CLI."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == 'consolidate':
        await cmd_consolidate(args)
    elif args.command == 'audits':
        cmd_audits(args)
    elif args.command == 'contexts':
        cmd_contexts(args)
