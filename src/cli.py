"""Command line preview for SObject filters and generated SOQL.

Examples:
    python -m src.cli validate --duration "1 days, 2 hours" --offset "30 minutes"
    python -m src.cli query Opportunity --fields Id,Name,Amount --schema Id,Amount
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import UTC, datetime

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import Settings, load_settings
from src.filters.dates import InvalidDatetimeError, parse_datetime
from src.filters.range_spec import RangeSpecError
from src.filters.schema import FilterProperties
from src.filters.validator import validate_filters
from src.sobject.describe import SObjectDescriber, StaticDescriber
from src.sobject.query import build_query
from src.soql.builder import SOQLBuilderError
from src.soql.fields import IllegalInputError

logger = logging.getLogger(__name__)


def _split_names(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [name.strip() for name in value.split(",") if name.strip()]


def _aware_datetime(value: str) -> datetime:
    try:
        parsed = parse_datetime("run-start-time", value)
    except InvalidDatetimeError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    if parsed is None:
        raise argparse.ArgumentTypeError("run-start-time must not be blank")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate SObject filters and preview SOQL.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log resolved filters and generated SOQL to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_filter_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--datetime-after", help="Interval start, e.g. 2019-03-12T11:29:52Z")
        p.add_argument("--datetime-before", help="Interval end (exclusive)")
        p.add_argument("--duration", help='Range duration, e.g. "1 days, 2 hours"')
        p.add_argument("--offset", help='Range offset, e.g. "30 minutes"')

    validate = subparsers.add_parser("validate", help="Validate filter properties")
    add_filter_args(validate)

    query = subparsers.add_parser("query", help="Print the SOQL query for an SObject")
    query.add_argument("object_name")
    add_filter_args(query)
    query.add_argument("--schema", help="Comma-separated field names to narrow the selection")
    query.add_argument(
        "--fields",
        help="Comma-separated field catalog; skips the describe call when given",
    )
    query.add_argument(
        "--run-start-time",
        type=_aware_datetime,
        default=None,
        help="Anchor for range filters (ISO-8601 with offset); defaults to now",
    )
    return parser


def _filters_from_args(args: argparse.Namespace) -> FilterProperties:
    return FilterProperties(
        datetime_after=args.datetime_after,
        datetime_before=args.datetime_before,
        duration=args.duration,
        offset=args.offset,
    )


def _describer_for(args: argparse.Namespace, settings: Settings) -> SObjectDescriber:
    fields = _split_names(args.fields)
    if fields is not None:
        return StaticDescriber({args.object_name: fields})
    return create_app(settings).describer


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""

    args = _build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level, debug_queries=args.verbose)

    filters = _filters_from_args(args)
    problems = validate_filters(filters)
    for problem in problems:
        logger.info("invalid property=%s", problem.property_name)
        print(f"{problem.property_name}: {problem.message}")
    if problems:
        return 1
    if args.command == "validate":
        print("OK")
        return 0

    run_start_time = args.run_start_time or datetime.now(UTC)
    try:
        soql = build_query(
            args.object_name,
            _split_names(args.schema),
            run_start_time,
            filters=filters,
            describer=_describer_for(args, settings),
            timestamp_field=settings.soql_timestamp_field,
        )
    except (IllegalInputError, RangeSpecError, SOQLBuilderError, RuntimeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(soql)
    return 0


if __name__ == "__main__":
    sys.exit(main())
