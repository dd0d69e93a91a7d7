"""
Clinic-local calendar helpers.

Appointment days are calendar days in the clinic's time zone, not in UTC,
so "today" has to be computed there.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from healthwire.config import settings


def clinic_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """Get current datetime in the clinic time zone (with DST handling)."""
    return datetime.now(clinic_tz())


def today_local() -> date:
    return now_local().date()


def format_api_date(day: date) -> str:
    """Format a day the way the appointments API expects (YYYY-MM-DD)."""
    return day.strftime("%Y-%m-%d")


def format_day_label(day: date) -> str:
    """Short label for a day picker cell, e.g. "Mon 3 Mar"."""
    return f"{day.strftime('%a')} {day.day} {day.strftime('%b')}"
