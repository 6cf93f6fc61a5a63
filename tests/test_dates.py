from datetime import datetime, UTC

import pytest

from campaign_feed.data.dates import normalize_date


def test_day_first_with_slashes():
    result = normalize_date("31/12/2023")
    assert result.parsed is True
    assert (result.timestamp.year, result.timestamp.month, result.timestamp.day) == (2023, 12, 31)


def test_iso_date_is_utc_midnight():
    result = normalize_date("2024-02-01")
    assert result.timestamp == datetime(2024, 2, 1, tzinfo=UTC)


def test_timezone_aware_input_converted_to_utc():
    result = normalize_date("2024-02-01T05:30:00+05:30")
    assert result.timestamp == datetime(2024, 2, 1, 0, 0, tzinfo=UTC)


@pytest.mark.parametrize("text,expected", [
    ("31.12.23", datetime(2023, 12, 31, tzinfo=UTC)),
    ("25-06-2024", datetime(2024, 6, 25, tzinfo=UTC)),
    ("01-01-2024", datetime(2024, 1, 1, tzinfo=UTC)),
])
def test_numeric_variants(text, expected):
    result = normalize_date(text)
    assert result.parsed is True
    assert result.timestamp == expected


def test_unparseable_falls_back_to_now(fixed_now):
    result = normalize_date("not-a-date", now=fixed_now)
    assert result.parsed is False
    assert result.timestamp == fixed_now()


def test_unparseable_uses_wall_clock_by_default():
    before = datetime.now(UTC)
    result = normalize_date("not-a-date")
    after = datetime.now(UTC)
    assert result.parsed is False
    assert before <= result.timestamp <= after


@pytest.mark.parametrize("text", ["", "   ", None, "31-13-2023", "12/ab/2024"])
def test_empty_or_invalid_calendar_dates_fall_back(text, fixed_now):
    result = normalize_date(text, now=fixed_now)
    assert result.parsed is False
    assert result.timestamp == fixed_now()


def test_same_text_same_instant():
    assert normalize_date("March 2024") == normalize_date("March 2024")
