"""Unit tests for calendar date utilities"""
import pytest
from datetime import date, datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

from studytrack.utils.datetime_helpers import FixedClock, SystemClock, days_between, parse_iso_date


def test_parse_iso_date():
    assert parse_iso_date("2024-01-03") == date(2024, 1, 3)
    assert parse_iso_date(date(2024, 1, 3)) == date(2024, 1, 3)
    assert parse_iso_date(datetime(2024, 1, 3, 23, 59)) == date(2024, 1, 3)


@pytest.mark.parametrize("value", ["03/01/2024", "2024-13-01", "", 20240103, None])
def test_parse_iso_date_invalid(value):
    with pytest.raises(ValueError):
        parse_iso_date(value)


def test_days_between_is_signed():
    assert days_between("2024-01-03", "2024-01-01") == 2
    assert days_between("2024-01-01", "2024-01-03") == -2
    assert days_between("2024-01-01", "2024-01-01") == 0


def test_days_between_crosses_month_and_leap_day():
    assert days_between("2024-03-01", "2024-02-28") == 2
    assert days_between("2025-01-01", "2024-12-31") == 1


def test_fixed_clock_advance_and_set():
    clock = FixedClock("2024-01-31")

    assert clock.today() == "2024-01-31"
    assert clock.advance() == "2024-02-01"

    clock.set(date(2024, 5, 5))
    assert clock.today() == "2024-05-05"


def test_system_clock_uses_configured_zone():
    """Late evening in New York is already tomorrow in Tokyo"""
    instant = datetime(2024, 1, 15, 23, 30, tzinfo=ZoneInfo("America/New_York"))

    with patch("studytrack.utils.datetime_helpers.datetime") as mock_datetime:
        mock_datetime.now.side_effect = lambda tz=None: instant.astimezone(tz)
        assert SystemClock("America/New_York").today() == "2024-01-15"
        assert SystemClock("Asia/Tokyo").today() == "2024-01-16"


def test_system_clock_invalid_zone_falls_back_to_local():
    clock = SystemClock("Mars/Olympus_Mons")

    assert clock.tz is None
    assert clock.today() == datetime.now().astimezone().date().isoformat()
