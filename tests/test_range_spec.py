"""Tests for the duration/offset expression parser."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from src.filters.range_spec import RangeSpecError, format_range, parse_range, range_to_delta
from src.filters.units import TimeUnit


def test_parse_compound_expression() -> None:
    assert parse_range("duration", "1 days, 2 hours, 30 minutes") == {
        TimeUnit.days: 1,
        TimeUnit.hours: 2,
        TimeUnit.minutes: 30,
    }


@pytest.mark.parametrize("text", [None, "", "   "])
def test_blank_expression_is_empty(text: str | None) -> None:
    assert parse_range("duration", text) == {}


def test_unit_names_are_case_insensitive() -> None:
    assert parse_range("offset", "3 DAYS,1 Half_Days") == {TimeUnit.days: 3, TimeUnit.half_days: 1}


def test_negative_magnitude_parses() -> None:
    assert parse_range("duration", "-2 weeks") == {TimeUnit.weeks: -2}


def test_trailing_comma_is_ignored() -> None:
    assert parse_range("duration", "1 days,") == {TimeUnit.days: 1}


def test_duplicate_unit_is_rejected() -> None:
    with pytest.raises(RangeSpecError) as exc_info:
        parse_range("duration", "1 days, 1 days")
    assert exc_info.value.property_name == "duration"
    assert "duplicate unit types '1 days, 1 days'" in str(exc_info.value)


def test_unknown_unit_is_rejected() -> None:
    with pytest.raises(RangeSpecError) as exc_info:
        parse_range("offset", "5 fortnights")
    assert exc_info.value.property_name == "offset"
    assert "invalid unit type 'fortnights'" in str(exc_info.value)


@pytest.mark.parametrize("text", ["x days", "1.5 days", "99999999999 days"])
def test_bad_magnitude_is_rejected(text: str) -> None:
    with pytest.raises(RangeSpecError) as exc_info:
        parse_range("duration", text)
    assert "invalid unit value" in str(exc_info.value)


@pytest.mark.parametrize("text", ["days", "1 days,,2 hours", "5"])
def test_missing_unit_is_format_error(text: str) -> None:
    with pytest.raises(RangeSpecError) as exc_info:
        parse_range("duration", text)
    assert "Expected format is <VALUE_1> <TYPE_1>,<VALUE_2> <TYPE_2>..." in str(exc_info.value)


def test_format_then_parse_is_stable() -> None:
    parsed = parse_range("duration", "30 minutes, 1 days,2 HOURS")
    text = format_range(parsed)
    assert text == "30 minutes, 2 hours, 1 days"
    assert parse_range("duration", text) == parsed


def test_range_to_delta_is_calendar_aware() -> None:
    anchor = datetime(2024, 3, 31, 12, tzinfo=UTC)
    delta = range_to_delta({TimeUnit.months: 1, TimeUnit.half_days: 1, TimeUnit.millis: 1500})
    assert anchor - delta == datetime(2024, 2, 28, 23, 59, 58, 500000, tzinfo=UTC)


def test_empty_range_is_zero_delta() -> None:
    anchor = datetime(2024, 1, 1, tzinfo=UTC)
    assert anchor - range_to_delta({}) == anchor
