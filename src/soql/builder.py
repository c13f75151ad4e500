"""Deterministic SOQL builder.

The builder converts a field list, an SObject name and a resolved `FilterDescriptor` into a SOQL
query. Identifiers are validated against a strict pattern; date-time bounds are rendered as
unquoted UTC SOQL date-time literals. Interval and range filters both yield a half-open window on
the timestamp field: `ts >= start AND ts < end`.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from src.filters.schema import FilterDescriptor, IntervalFilter, RangeFilter

DEFAULT_TIMESTAMP_FIELD = "LastModifiedDate"

_IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_.]*")
_SOQL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class SOQLBuilderError(ValueError):
    """Raised when inputs cannot be converted into a SOQL query."""


def is_identifier(name: str) -> bool:
    """Whether `name` is safe to interpolate as a SOQL object/field name."""

    return _IDENTIFIER_RE.fullmatch(name) is not None


def _identifier(name: str) -> str:
    if not is_identifier(name):
        raise SOQLBuilderError(f"Invalid SOQL identifier: {name!r}")
    return name


def format_soql_datetime(value: datetime) -> str:
    """Render an aware datetime as a SOQL date-time literal in UTC.

    SOQL literals have whole-second precision. A fractional second is rounded up, which keeps
    both `>=` and `<` exact against whole-second record timestamps.
    """

    value = value.astimezone(UTC)
    if value.microsecond:
        value = value.replace(microsecond=0) + timedelta(seconds=1)
    return value.strftime(_SOQL_DATETIME_FORMAT)


def _where_and(clauses: list[str]) -> str:
    if not clauses:
        return ""
    return " WHERE " + " AND ".join(clauses)


def _bound_clauses(
        timestamp_field: str,
        start: datetime | None,
        end: datetime | None,
) -> list[str]:
    clauses: list[str] = []
    if start is not None:
        clauses.append(f"{timestamp_field}>={format_soql_datetime(start)}")
    if end is not None:
        clauses.append(f"{timestamp_field}<{format_soql_datetime(end)}")
    return clauses


def filter_bounds(descriptor: FilterDescriptor) -> tuple[datetime | None, datetime | None]:
    """Return the `(start inclusive, end exclusive)` window of a resolved filter."""

    if isinstance(descriptor, IntervalFilter):
        return descriptor.start, descriptor.end
    if isinstance(descriptor, RangeFilter):
        return descriptor.bounds()
    raise SOQLBuilderError(f"Unsupported filter: {descriptor!r}")


def build_soql(
        fields: Sequence[str],
        object_name: str,
        descriptor: FilterDescriptor,
        *,
        timestamp_field: str = DEFAULT_TIMESTAMP_FIELD,
) -> str:
    """Build a SOQL query selecting `fields` from `object_name` within the filter window."""

    if not fields:
        raise SOQLBuilderError("At least one field is required")

    select_list = ",".join(_identifier(f) for f in fields)
    start, end = filter_bounds(descriptor)
    clauses = _bound_clauses(_identifier(timestamp_field), start, end)

    return f"SELECT {select_list} FROM {_identifier(object_name)}{_where_and(clauses)}"
