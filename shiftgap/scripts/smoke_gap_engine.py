#!/usr/bin/env python3
"""
Smoke test for the gap engine against a live database.

Builds the line overview for one org/line/date/shift, runs the gap engine
and prints a summary. Arguments fall back to environment variables:

    SMOKE_ORG_ID=xxx SMOKE_LINE=Line1 SMOKE_DATE=2025-01-27 SMOKE_SHIFT=Day \
        python -m shiftgap.scripts.smoke_gap_engine
"""

import argparse
import asyncio
import os
import re
import sys

from dotenv import load_dotenv

from shiftgap.core.observability import (
    get_logger,
    set_correlation_id,
    set_org_id,
    setup_structured_logging,
)
from shiftgap.domain.staffing.entities.gap_report import LineGapsResult
from shiftgap.domain.staffing.services.gap_engine import compute_line_gaps
from shiftgap.domain.staffing.services.line_overview import (
    fetch_line_overview,
    shift_param_to_db_value,
)
from shiftgap.infrastructure.database import (
    SqlStaffingDataClient,
    create_engine,
    create_session_factory,
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the gap engine for one line")
    parser.add_argument("--org-id", default=os.getenv("SMOKE_ORG_ID"))
    parser.add_argument("--line", default=os.getenv("SMOKE_LINE"))
    parser.add_argument("--date", default=os.getenv("SMOKE_DATE"))
    parser.add_argument("--shift", default=os.getenv("SMOKE_SHIFT"))
    parser.add_argument("--database-url", default=None)
    return parser.parse_args(argv)


def validate_args(args: argparse.Namespace) -> list[str]:
    """Return the problems with the arguments; empty when usable."""
    problems = []
    if not args.org_id:
        problems.append("SMOKE_ORG_ID is required")
    if not args.line:
        problems.append("SMOKE_LINE is required")
    if not args.date:
        problems.append("SMOKE_DATE is required (format: YYYY-MM-DD)")
    elif not DATE_PATTERN.match(args.date):
        problems.append(f"Invalid date format: {args.date}. Expected YYYY-MM-DD")
    if not args.shift:
        problems.append("SMOKE_SHIFT is required (Day/Evening/Night)")
    return problems


def format_summary(result: LineGapsResult, sample_size: int = 3) -> str:
    summary = result.summary()
    lines = [
        "Results:",
        f"  Total machine rows: {summary.total_rows}",
        f"  Rows with staffing_gap > 0: {summary.rows_with_staffing_gap}",
        f"  Rows with competence_status != OK: {summary.rows_with_competence_issues}",
    ]
    if result.machine_rows:
        lines.append("")
        lines.append("  Sample machine rows:")
        for row in result.machine_rows[:sample_size]:
            lines.append(f"    - {row.station_or_machine} ({row.station_or_machine_code})")
            lines.append(
                f"      required: {row.required}, assigned: {row.assigned}, "
                f"gap: {row.staffing_gap}"
            )
            lines.append(f"      competence_status: {row.competence_status.value}")
            lines.append(f"      competence_gaps: {len(row.competence_gaps)}")
    return "\n".join(lines)


async def run(args: argparse.Namespace) -> int:
    set_correlation_id()
    set_org_id(args.org_id)
    shift = shift_param_to_db_value(args.shift)

    engine = create_engine(args.database_url)
    session_factory = create_session_factory(engine)
    try:
        async with session_factory() as session:
            client = SqlStaffingDataClient(session)
            overview = await fetch_line_overview(
                client, args.org_id, args.date, shift, args.line
            )
            if overview is None:
                print("Failed to fetch line-overview data", file=sys.stderr)
                return 1

            result = await compute_line_gaps(
                org_id=args.org_id,
                line=args.line,
                date=args.date,
                shift_type=shift,
                data_client=client,
                line_overview_data=overview,
                strict_org_scope=True,
            )
    finally:
        await engine.dispose()

    print(format_summary(result))
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv(".env.local")
    setup_structured_logging()

    args = parse_args(argv)
    problems = validate_args(args)
    if problems:
        print("Missing or invalid arguments:", file=sys.stderr)
        for problem in problems:
            print(f"  {problem}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run(args))
    except Exception:
        logger.exception("Gap engine smoke test failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
