"""Execution-time filter resolution.

Interval mode always wins: if either interval bound is set, duration and offset are ignored.
Otherwise the filter is a range anchored at the run start time.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from src.filters.dates import datetime_from_epoch_millis, parse_datetime
from src.filters.range_spec import parse_range
from src.filters.schema import (
    PROPERTY_DATETIME_AFTER,
    PROPERTY_DATETIME_BEFORE,
    PROPERTY_DURATION,
    PROPERTY_OFFSET,
    FilterDescriptor,
    FilterProperties,
    IntervalFilter,
    RangeFilter,
)

logger = logging.getLogger(__name__)


def _anchor_time(run_start_time: datetime | int) -> datetime:
    if isinstance(run_start_time, datetime):
        if run_start_time.tzinfo is None:
            raise ValueError("run_start_time must be timezone-aware")
        return run_start_time
    return datetime_from_epoch_millis(run_start_time)


def resolve_filter(props: FilterProperties, run_start_time: datetime | int) -> FilterDescriptor:
    """Resolve the effective filter for one run.

    Args:
        props: Filter properties with all macros already substituted.
        run_start_time: Logical start of the run, as an aware datetime or epoch milliseconds.

    Raises:
        InvalidDatetimeError: If an interval bound is malformed.
        RangeSpecError: If duration or offset is malformed.
    """

    start = parse_datetime(PROPERTY_DATETIME_AFTER, props.datetime_after)
    end = parse_datetime(PROPERTY_DATETIME_BEFORE, props.datetime_before)

    if start is not None or end is not None:
        logger.debug("resolved interval filter start=%s end=%s", start, end)
        return IntervalFilter(start=start, end=end)

    descriptor = RangeFilter(
        anchor_time=_anchor_time(run_start_time),
        duration=parse_range(PROPERTY_DURATION, props.duration),
        offset=parse_range(PROPERTY_OFFSET, props.offset),
    )
    logger.debug(
        "resolved range filter anchor=%s duration=%s offset=%s",
        descriptor.anchor_time,
        descriptor.duration,
        descriptor.offset,
    )
    return descriptor


def normalized_filters(props: FilterProperties) -> dict[str, Any]:
    """Return parsed filter values keyed by property name.

    Deferred properties are omitted since they cannot be parsed yet.
    """

    parsers = {
        PROPERTY_DATETIME_AFTER: parse_datetime,
        PROPERTY_DATETIME_BEFORE: parse_datetime,
        PROPERTY_DURATION: parse_range,
        PROPERTY_OFFSET: parse_range,
    }
    return {
        name: parse(name, props.value_of(name))
        for name, parse in parsers.items()
        if not props.is_deferred(name)
    }
