"""Utility modules for the portal client."""

from healthwire.utils.timezone import (
    clinic_tz,
    now_local,
    today_local,
    format_api_date,
    format_day_label,
)

__all__ = [
    "clinic_tz",
    "now_local",
    "today_local",
    "format_api_date",
    "format_day_label",
]
