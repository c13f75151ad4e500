"""ISO-8601 date-time parsing for interval filter bounds.

Bounds must carry a zone: either an offset (`Z`, `+02:00`), a bracketed region id
(`[Europe/Paris]`), or both. Local date-times without a zone are rejected because a filter bound
must denote a single instant.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.parser import isoparse

DATETIME_EXAMPLE = "2019-03-12T11:29:52Z"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class InvalidDatetimeError(ValueError):
    """Raised when a filter bound is not an ISO-8601 date-time with a zone."""

    def __init__(self, property_name: str, value: str) -> None:
        super().__init__(
            f"Invalid SObject '{property_name}' value: '{value}'. Value must be in Salesforce "
            f"Date Formats. For example, {DATETIME_EXAMPLE}"
        )
        self.property_name = property_name
        self.value = value


def _split_zone_id(text: str) -> tuple[str, str | None]:
    """Split a trailing `[Region/City]` zone id off an ISO date-time."""

    if not text.endswith("]") or "[" not in text:
        return text, None
    idx = text.rindex("[")
    return text[:idx], text[idx + 1: -1]


def parse_datetime(property_name: str, value: str | None) -> datetime | None:
    """Parse a filter bound; blank or missing input yields `None`.

    Raises:
        InvalidDatetimeError: If the value is not an ISO-8601 date-time with a zone.
    """

    if value is None or not value.strip():
        return None

    text, zone = _split_zone_id(value.strip())
    # A bare date is not a date-time; `isoparse` would accept it as midnight.
    if "T" not in text:
        raise InvalidDatetimeError(property_name, value)

    try:
        dt = isoparse(text)
        if zone is not None:
            tz = ZoneInfo(zone)
            dt = dt.astimezone(tz) if dt.tzinfo is not None else dt.replace(tzinfo=tz)
    except (ValueError, OverflowError, ZoneInfoNotFoundError) as exc:
        raise InvalidDatetimeError(property_name, value) from exc

    if dt.tzinfo is None:
        raise InvalidDatetimeError(property_name, value)
    return dt


def datetime_from_epoch_millis(millis: int) -> datetime:
    """Convert epoch milliseconds into an aware UTC datetime."""

    return _EPOCH + timedelta(milliseconds=millis)
