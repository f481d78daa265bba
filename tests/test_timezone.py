"""
Tests for timezone utility functions
"""
from datetime import date, datetime, time
import pytest
import pytz
from hrms.utils.timezone_utils import (
    get_org_timezone,
    convert_utc_to_org_tz,
    convert_org_tz_to_utc,
    org_today,
    parse_clock_time,
    is_late_arrival,
    format_datetime_for_org
)


def test_utc_to_nairobi_conversion():
    """Test converting a naive UTC datetime to East Africa Time"""
    local = convert_utc_to_org_tz(datetime(2025, 3, 3, 5, 30), 'Africa/Nairobi')

    # EAT is UTC+3 all year
    assert local.hour == 8
    assert local.minute == 30


def test_org_local_to_utc_is_naive():
    """Test local times are stored as naive UTC"""
    utc_time = convert_org_tz_to_utc(datetime(2025, 3, 4, 8, 0), 'Africa/Nairobi')

    assert utc_time == datetime(2025, 3, 4, 5, 0)
    assert utc_time.tzinfo is None


def test_aware_datetime_is_respected():
    """Test an aware datetime keeps its own offset"""
    pacific = pytz.timezone('America/Los_Angeles').localize(datetime(2024, 12, 1, 12, 0))

    # Noon PST is 8pm UTC
    assert convert_org_tz_to_utc(pacific, 'Africa/Nairobi') == datetime(2024, 12, 1, 20, 0)


def test_unknown_timezone_falls_back_to_utc():
    """Test invalid timezone names resolve to UTC"""
    assert get_org_timezone('Mars/Olympus_Mons') == pytz.UTC
    assert get_org_timezone(None) == pytz.UTC


def test_org_today_crosses_midnight():
    """Test the organisation's date can differ from the UTC date"""
    utc_now = datetime(2025, 3, 3, 22, 30)

    assert org_today('UTC', utc_now) == date(2025, 3, 3)
    assert org_today('Africa/Nairobi', utc_now) == date(2025, 3, 4)
    assert org_today('America/Los_Angeles', datetime(2025, 3, 4, 3, 0)) == date(2025, 3, 3)


def test_parse_clock_time():
    """Test HH:MM parsing"""
    assert parse_clock_time('08:15') == time(8, 15)

    with pytest.raises(ValueError):
        parse_clock_time('eight')


def test_late_arrival_with_grace():
    """Test the cutoff is the workday start plus grace"""
    assert is_late_arrival(datetime(2025, 3, 3, 8, 15), 'UTC', '08:00', 15) is False
    assert is_late_arrival(datetime(2025, 3, 3, 8, 15, 30), 'UTC', '08:00', 15) is True
    assert is_late_arrival(datetime(2025, 3, 3, 8, 1), 'UTC', '08:00') is True


def test_late_arrival_in_org_timezone():
    """Test lateness is judged on the local clock"""
    # 05:10 UTC is 08:10 in Nairobi
    assert is_late_arrival(datetime(2025, 3, 3, 5, 10), 'Africa/Nairobi', '08:00', 15) is False
    # 08:10 UTC is 11:10 in Nairobi
    assert is_late_arrival(datetime(2025, 3, 3, 8, 10), 'Africa/Nairobi', '08:00', 15) is True


def test_format_datetime_for_org():
    """Test display formatting in the organisation timezone"""
    formatted = format_datetime_for_org(datetime(2025, 3, 3, 5, 30), 'Africa/Nairobi')

    assert formatted == '2025-03-03 08:30 AM EAT'
    assert format_datetime_for_org(None, 'UTC') == ''
