"""Configuration-time validation of SObject filter properties.

Validation never stops at the first problem: all four properties are checked and every problem is
returned, so the user can fix them in one pass.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from src.filters.dates import InvalidDatetimeError, parse_datetime
from src.filters.range_spec import RangeSpecError, RangeValue, parse_range, subtract_range
from src.filters.schema import (
    PROPERTY_DATETIME_AFTER,
    PROPERTY_DATETIME_BEFORE,
    PROPERTY_DURATION,
    PROPERTY_OFFSET,
    FilterProperties,
)

RANGE_FILTER_MIN_VALUE = 0

# Latest anchor a run can have. A range that cannot be subtracted even from it can never resolve.
LATEST_ANCHOR_TIME = datetime(9999, 12, 31, 23, 59, 59, tzinfo=UTC)


@dataclass(frozen=True)
class ConfigProblem:
    """A single configuration problem attributed to one property."""

    property_name: str
    message: str


class FilterValidationError(ValueError):
    """Raised by `raise_for_problems` when validation found problems."""

    def __init__(self, problems: list[ConfigProblem]) -> None:
        super().__init__("; ".join(f"{p.property_name}: {p.message}" for p in problems))
        self.problems = problems


def _check_interval_property(
        problems: list[ConfigProblem],
        props: FilterProperties,
        property_name: str,
) -> list[ConfigProblem]:
    if props.is_deferred(property_name):
        return problems

    try:
        parse_datetime(property_name, props.value_of(property_name))
    except InvalidDatetimeError as exc:
        return [*problems, ConfigProblem(property_name, str(exc))]
    return problems


def _check_range_property(
        problems: list[ConfigProblem],
        props: FilterProperties,
        property_name: str,
) -> list[ConfigProblem]:
    if props.is_deferred(property_name):
        return problems

    try:
        range_value = parse_range(property_name, props.value_of(property_name))
    except RangeSpecError as exc:
        return [*problems, ConfigProblem(exc.property_name, str(exc))]

    invalid = [
        (unit, value) for unit, value in range_value.items() if value < RANGE_FILTER_MIN_VALUE
    ]
    if not invalid:
        return _check_range_span(problems, property_name, range_value)

    listed = ", ".join(f"{unit.value}={value}" for unit, value in invalid)
    message = (
        f"Invalid SObject '{property_name}' values: '{listed}'. "
        f"Values must be '{RANGE_FILTER_MIN_VALUE}' or greater"
    )
    return [*problems, ConfigProblem(property_name, message)]


def _check_range_span(
        problems: list[ConfigProblem],
        property_name: str,
        range_value: RangeValue,
) -> list[ConfigProblem]:
    try:
        subtract_range(property_name, LATEST_ANCHOR_TIME, range_value)
    except RangeSpecError as exc:
        return [*problems, ConfigProblem(property_name, str(exc))]
    return problems


def validate_filters(props: FilterProperties) -> list[ConfigProblem]:
    """Check all filter properties and return every problem found (empty list if valid)."""

    problems: list[ConfigProblem] = []
    problems = _check_interval_property(problems, props, PROPERTY_DATETIME_AFTER)
    problems = _check_interval_property(problems, props, PROPERTY_DATETIME_BEFORE)
    problems = _check_range_property(problems, props, PROPERTY_DURATION)
    problems = _check_range_property(problems, props, PROPERTY_OFFSET)
    return problems


def raise_for_problems(problems: Iterable[ConfigProblem]) -> None:
    """Raise `FilterValidationError` if there is at least one problem."""

    collected = list(problems)
    if collected:
        raise FilterValidationError(collected)
