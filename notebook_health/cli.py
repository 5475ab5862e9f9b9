"""
notebook_health/cli.py — Command-line interface for notebook health scoring.

Usage:
    python -m notebook_health report --executions executions.csv --notebooks notebooks.csv
    python -m notebook_health report ... --cell-status cell_status.csv --days 7 --json
    python -m notebook_health recent --executions executions.csv [--failed]

Input files:
    executions.csv   notebook_id, user_id, code_cell_number, success, timestamp[, runtime]
    notebooks.csv    notebook_id, cell_number[, title]
    cell_status.csv  notebook_id, cell_number, status

Author: notebook-health maintainers
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from notebook_health.config import DEFAULT_CONFIG
from notebook_health.log.accessor import (
    DataFrameExecutionLog,
    StaticCellStatusProvider,
    load_notebooks_csv,
)
from notebook_health.pipeline import run_health_pipeline

# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "INFO") -> None:
    """Configure root logger with timestamps."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)


logger = logging.getLogger("notebook_health.cli")


def _na(value):
    """pandas stores missing floats as NaN; map them back to None."""
    if value is None:
        return None
    try:
        return None if value != value else value
    except TypeError:
        return value


def _fmt(value, pattern: str = "{:.3f}") -> str:
    return "-" if value is None else pattern.format(value)


# ── Subcommand: report ────────────────────────────────────────────────────────

def cmd_report(args: argparse.Namespace) -> int:
    """Score every notebook in the inventory and print the reports."""
    _setup_logging(args.log_level)

    execution_log = DataFrameExecutionLog.from_csv(args.executions, as_of=args.as_of)
    notebooks = load_notebooks_csv(args.notebooks)
    provider = (
        StaticCellStatusProvider.from_csv(args.cell_status)
        if args.cell_status
        else StaticCellStatusProvider()
    )

    result = run_health_pipeline(
        notebooks,
        execution_log,
        provider,
        window_days=args.days,
    )

    if args.json:
        payload = {
            "window_days": result.window_days,
            "summary": result.summary,
            "reports": {nid: r.to_dict() for nid, r in result.reports.items()},
        }
        print(json.dumps(payload, indent=2, default=str))
        return 0

    print()
    print(f"  {'NOTEBOOK':<24} {'STATUS':<10} {'SCORE':>7} {'PASS':>6} {'DEPTH':>6}  DESCRIPTION")
    for row in result.summary_frame.itertuples(index=False):
        print(
            f"  {str(row.notebook_id):<24} {row.status:<10} "
            f"{_fmt(_na(row.score)):>7} {_fmt(_na(row.pass_rate), '{:.2f}'):>6} "
            f"{_fmt(_na(row.execution_depth), '{:.2f}'):>6}  {row.description}"
        )
    summary = result.summary
    print()
    print(
        f"  {summary['total_notebooks']} notebooks: {summary['healthy']} healthy, "
        f"{summary['unhealthy']} unhealthy, {summary['unknown']} unknown "
        f"(window {result.window_days} days)"
    )
    return 0


# ── Subcommand: recent ────────────────────────────────────────────────────────

def cmd_recent(args: argparse.Namespace) -> int:
    """List notebooks by most recent execution (or most recent failure)."""
    _setup_logging(args.log_level)

    execution_log = DataFrameExecutionLog.from_csv(args.executions)
    if args.failed:
        df = execution_log.recently_failed(args.limit)
    else:
        df = execution_log.recently_executed(args.limit)

    if len(df) == 0:
        print("  No executions recorded.")
        return 0
    print(df.to_string(index=False))
    return 0


# ── Argument parser ───────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notebook-health",
        description="Notebook health scoring from cell execution logs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Health of every notebook over the last 30 days
  python -m notebook_health report --executions executions.csv --notebooks notebooks.csv

  # Last week, with per-cell statuses, as JSON
  python -m notebook_health report --executions executions.csv --notebooks notebooks.csv \\
      --cell-status cell_status.csv --days 7 --json

  # Notebooks with the most recent failures
  python -m notebook_health recent --executions executions.csv --failed
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # report
    p_report = subparsers.add_parser("report", help="Health report for every notebook")
    p_report.add_argument("--executions", required=True, metavar="CSV", help="Execution log CSV")
    p_report.add_argument("--notebooks", required=True, metavar="CSV", help="Notebook/cell inventory CSV")
    p_report.add_argument(
        "--cell-status", default=None, metavar="CSV",
        help="Per-cell status CSV (default: every cell unknown)",
    )
    p_report.add_argument(
        "--days", type=int, default=DEFAULT_CONFIG.window_days, metavar="N",
        help=f"Trailing window in days (default: {DEFAULT_CONFIG.window_days})",
    )
    p_report.add_argument(
        "--as-of", default=None, metavar="ISO",
        help="End of the window as an ISO timestamp (default: now)",
    )
    p_report.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    p_report.set_defaults(func=cmd_report)

    # recent
    p_recent = subparsers.add_parser("recent", help="Recently executed / failed notebooks")
    p_recent.add_argument("--executions", required=True, metavar="CSV", help="Execution log CSV")
    p_recent.add_argument("--failed", action="store_true", help="Order by most recent failure")
    p_recent.add_argument(
        "--limit", type=int, default=DEFAULT_CONFIG.recent_limit, metavar="N",
        help=f"Rows to show (default: {DEFAULT_CONFIG.recent_limit})",
    )
    p_recent.set_defaults(func=cmd_recent)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
