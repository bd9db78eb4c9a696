"""
interfaces/cli.py
──────────────────────────────────────────────────────────────────────────────
Command-line interface for JobScope.

Usage:
  # One ingestion run (fetch → classify → upsert), summary printed
  python -m jobscope.interfaces.cli ingest

  # Ingest every INGEST_INTERVAL_SECONDS until interrupted
  python -m jobscope.interfaces.cli schedule --now

  # Category bubbles / one category / search
  python -m jobscope.interfaces.cli categories
  python -m jobscope.interfaces.cli category "Middle management"
  python -m jobscope.interfaces.cli search developer --page 2

  # Classify codes without touching the network or database
  python -m jobscope.interfaces.cli classify --noc 2171 --naics 541510

  # JSON output (any subcommand)
  python -m jobscope.interfaces.cli --json categories

  # Via installed entry-point (pyproject.toml [project.scripts])
  jobscope ingest

Exit codes:
  0 — success
  1 — fatal error (fetch, DB, etc.)
  2 — argument error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from jobscope.domain.exceptions import CategoryNotFoundError
from jobscope.services.classifier import classify_occupation, classify_sector
from jobscope.services.container import (
    build_scheduler,
    get_ingestion_pipeline,
    get_query_service,
)
from jobscope.services.metadata import metadata_for

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jobscope",
        description="Ingest and explore job postings classified by NOC and NAICS.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    sub.add_parser("ingest", help="Run one ingestion pass.")

    sched = sub.add_parser("schedule", help="Ingest periodically until interrupted.")
    sched.add_argument(
        "--now",
        action="store_true",
        help="Run once immediately instead of waiting one interval.",
    )

    sub.add_parser("categories", help="List category bubbles.")

    cat = sub.add_parser("category", help="Show one category and its newest postings.")
    cat.add_argument("name", help="Category name, e.g. 'Middle management'.")
    cat.add_argument("--limit", "-n", type=int, default=None, help="Postings to show.")

    search = sub.add_parser("search", help="Search titles, employers and excerpts.")
    search.add_argument("query", nargs="?", default="", help="Search text.")
    search.add_argument("--page", type=int, default=1)
    search.add_argument("--limit", type=int, default=20)

    classify = sub.add_parser("classify", help="Classify NOC / NAICS codes offline.")
    classify.add_argument("--noc", metavar="CODE", help="NOC 2021 code, e.g. 2171.")
    classify.add_argument("--naics", metavar="CODE", help="NAICS code, e.g. 541510.")
    return p


# ── Formatting helpers ─────────────────────────────────────────────────────

def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _print_summary_text(summary) -> None:
    print(f"\n{'─' * 60}")
    print(f"Pages   : {summary.pages_fetched}")
    print(f"Fetched : {summary.fetched}")
    print(f"Upserted: {summary.upserted}")
    print(f"Failed  : {summary.failed}")
    print(f"Skipped : {summary.skipped}")
    print(f"Duration: {summary.duration_seconds:.2f}s")
    print()


def _print_categories_text(categories) -> None:
    print(f"\n{'─' * 60}")
    for c in categories:
        related = "  *related" if c.is_related else ""
        print(f"  #{c.id}  {c.name}  ({c.count}){related}")
        print(f"       Sector: {c.sector}")
        print(f"       Salary: {c.salary}  (median ${c.median_salary:,})")
        if c.noc_codes:
            print(f"       NOC: {', '.join(c.noc_codes)}")
    print()


def _print_detail_text(detail) -> None:
    print(f"\n{'─' * 60}")
    print(f"{detail.name}  |  {detail.sector}  |  {detail.count} postings")
    print(f"{'─' * 60}")
    print(detail.description)
    print(f"Skills: {', '.join(detail.skills)}")
    print(f"Salary: {detail.salary}")
    for job in detail.jobs:
        where = f"  [{job.location}]" if job.location else ""
        print(f"  • {job.title or '(untitled)'} — {job.employer or '?'}{where}")
        print(f"    {job.url}")
    print()


def _print_search_text(result) -> None:
    pg = result.pagination
    print(f"\n{'─' * 60}")
    # An empty result still renders as "page 1 of 1".
    print(f"{pg.total} matches  |  page {pg.page} of {max(pg.pages, 1)}")
    print(f"{'─' * 60}")
    for job in result.jobs:
        print(f"  • {job.job_title or '(untitled)'} — {job.employer or '?'}  [{job.category}]")
        print(f"    {job.url}")
    print()


# ── Commands ───────────────────────────────────────────────────────────────

def _cmd_ingest(args: argparse.Namespace) -> int:
    summary = get_ingestion_pipeline().ingest_all()
    if args.json_output:
        _print_json(summary.to_dict())
    else:
        _print_summary_text(summary)
    return 0


def _cmd_schedule(args: argparse.Namespace) -> int:
    scheduler = build_scheduler(run_immediately=args.now)
    scheduler.start()
    try:
        scheduler.wait()
    except KeyboardInterrupt:
        print("Stopping scheduler …", file=sys.stderr)
    finally:
        scheduler.stop()
    return 0


def _cmd_categories(args: argparse.Namespace) -> int:
    categories = get_query_service().categories()
    if args.json_output:
        _print_json([c.model_dump(mode="json") for c in categories])
    else:
        _print_categories_text(categories)
    return 0


def _cmd_category(args: argparse.Namespace) -> int:
    try:
        detail = get_query_service().category_detail(args.name, limit=args.limit)
    except CategoryNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    if args.json_output:
        _print_json(detail.model_dump(mode="json"))
    else:
        _print_detail_text(detail)
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    result = get_query_service().search(args.query, page=args.page, limit=args.limit)
    if args.json_output:
        _print_json(result.model_dump(mode="json"))
    else:
        _print_search_text(result)
    return 0


def _cmd_classify(args: argparse.Namespace) -> int:
    if not args.noc and not args.naics:
        print("ERROR: provide --noc and/or --naics", file=sys.stderr)
        return 2
    category = classify_occupation(args.noc)
    sector = classify_sector(args.naics)
    meta = metadata_for(category, sector)
    result = {
        "noc_code": args.noc,
        "naics_code": args.naics,
        "category": category,
        "sector": sector,
        **meta.model_dump(),
    }
    if args.json_output:
        _print_json(result)
    else:
        print(f"Category: {category}")
        print(f"Sector  : {sector}")
        print(f"Salary  : {meta.salary}")
    return 0


_COMMANDS = {
    "ingest": _cmd_ingest,
    "schedule": _cmd_schedule,
    "categories": _cmd_categories,
    "category": _cmd_category,
    "search": _cmd_search,
    "classify": _cmd_classify,
}


def run(args: argparse.Namespace) -> int:
    """Execute the selected subcommand.

    Returns:
        Exit code (0 = success, 1 = error, 2 = bad arguments).
    """
    handler = _COMMANDS.get(args.command)
    if handler is None:
        print("ERROR: provide a command", file=sys.stderr)
        return 2
    try:
        return handler(args)
    except Exception as exc:
        logger.exception("Command %r failed", args.command)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


def main() -> None:
    """Entry point for the jobscope console script."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(2)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
