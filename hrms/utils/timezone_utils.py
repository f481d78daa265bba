"""
Timezone utility functions
Attendance is stored in UTC and judged against the organisation's local workday
"""
from datetime import datetime, time
import pytz


def get_org_timezone(tz_name):
    """Return a pytz timezone, falling back to UTC for unknown names"""
    try:
        return pytz.timezone(tz_name or 'UTC')
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def convert_utc_to_org_tz(utc_datetime, tz_name):
    """Convert a (naive or aware) UTC datetime to the organisation timezone"""
    if not utc_datetime:
        return None

    if utc_datetime.tzinfo is None:
        utc_datetime = pytz.UTC.localize(utc_datetime)

    return utc_datetime.astimezone(get_org_timezone(tz_name))


def convert_org_tz_to_utc(local_datetime, tz_name):
    """Convert an organisation-local datetime to naive UTC for storage"""
    if not local_datetime:
        return None

    if local_datetime.tzinfo is None:
        local_datetime = get_org_timezone(tz_name).localize(local_datetime)

    return local_datetime.astimezone(pytz.UTC).replace(tzinfo=None)


def org_today(tz_name, utc_now=None):
    """Today's date in the organisation timezone"""
    utc_now = utc_now or datetime.utcnow()
    return convert_utc_to_org_tz(utc_now, tz_name).date()


def parse_clock_time(value):
    """Parse 'HH:MM' into a time; raises ValueError on bad input"""
    hours, minutes = str(value).split(':')
    return time(int(hours), int(minutes))


def is_late_arrival(utc_datetime, tz_name, workday_start='08:00', grace_minutes=0):
    """
    Whether a clock-in happened after the workday start plus grace period

    Args:
        utc_datetime: Clock-in time in UTC
        tz_name: Organisation timezone name
        workday_start: 'HH:MM' local start of the workday
        grace_minutes: Minutes of tolerance after the start

    Returns:
        True if the local clock-in time is past the cutoff
    """
    local = convert_utc_to_org_tz(utc_datetime, tz_name)
    start = parse_clock_time(workday_start)
    cutoff_minutes = start.hour * 60 + start.minute + int(grace_minutes or 0)
    arrival_minutes = local.hour * 60 + local.minute + local.second / 60.0
    return arrival_minutes > cutoff_minutes


def format_datetime_for_org(utc_datetime, tz_name, format_str='%Y-%m-%d %I:%M %p %Z'):
    """Format UTC datetime for display in the organisation timezone"""
    if not utc_datetime:
        return ''

    local_dt = convert_utc_to_org_tz(utc_datetime, tz_name)
    return local_dt.strftime(format_str)
