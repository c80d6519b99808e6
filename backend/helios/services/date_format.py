"""
Fixed-width display strings for the watch.

Tables are spelled out rather than taken from strftime so the output never
depends on the process locale.
"""
from datetime import date, datetime

WEEKDAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_clock(instant: datetime) -> str:
    """HH:MM, 24-hour, in the wall-clock time the datetime already carries."""
    return f"{instant.hour:02d}:{instant.minute:02d}"


def format_day_label(day: date | datetime) -> str:
    """e.g. "Wed Sep 03"."""
    # isoweekday(): Monday=1 .. Sunday=7
    weekday = WEEKDAYS[day.isoweekday() % 7]
    return f"{weekday} {MONTHS[day.month - 1]} {day.day:02d}"
