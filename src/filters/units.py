"""Time unit kinds accepted in duration/offset expressions.

Every unit maps onto a single `relativedelta` field so that month and year arithmetic stays
calendar-aware (subtracting "1 months" from March 31 lands on February 28/29, not on a fixed
number of days).
"""

from __future__ import annotations

from enum import StrEnum

from dateutil.relativedelta import relativedelta


class TimeUnit(StrEnum):
    """Calendar and clock granularities, smallest first."""

    nanos = "nanos"
    micros = "micros"
    millis = "millis"
    seconds = "seconds"
    minutes = "minutes"
    hours = "hours"
    half_days = "half_days"
    days = "days"
    weeks = "weeks"
    months = "months"
    years = "years"
    decades = "decades"
    centuries = "centuries"
    millennia = "millennia"


# unit -> (relativedelta keyword, multiplier). Nanoseconds are handled separately because
# `datetime` only has microsecond resolution.
_RELATIVEDELTA_FIELDS: dict[TimeUnit, tuple[str, int]] = {
    TimeUnit.micros: ("microseconds", 1),
    TimeUnit.millis: ("microseconds", 1000),
    TimeUnit.seconds: ("seconds", 1),
    TimeUnit.minutes: ("minutes", 1),
    TimeUnit.hours: ("hours", 1),
    TimeUnit.half_days: ("hours", 12),
    TimeUnit.days: ("days", 1),
    TimeUnit.weeks: ("weeks", 1),
    TimeUnit.months: ("months", 1),
    TimeUnit.years: ("years", 1),
    TimeUnit.decades: ("years", 10),
    TimeUnit.centuries: ("years", 100),
    TimeUnit.millennia: ("years", 1000),
}


def unit_from_name(name: str) -> TimeUnit | None:
    """Match a unit name case-insensitively; `None` if it is not a known unit."""

    try:
        return TimeUnit(name.strip().lower())
    except ValueError:
        return None


def unit_delta(unit: TimeUnit, amount: int) -> relativedelta:
    """Return `amount` of `unit` as a calendar-aware delta."""

    if unit == TimeUnit.nanos:
        return relativedelta(microseconds=round(amount / 1000))

    field, multiplier = _RELATIVEDELTA_FIELDS[unit]
    return relativedelta(**{field: amount * multiplier})
