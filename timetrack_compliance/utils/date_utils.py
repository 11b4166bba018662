"""Date manipulation utilities"""

from datetime import date, datetime, timedelta

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def parse_iso_date(value: date | str) -> date:
    """Accept a date or an ISO YYYY-MM-DD string (timestamps are cut to the date part)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def weekday_index(day_name: str) -> int:
    """Map a weekday name to date.weekday() numbering, defaulting to Monday"""
    try:
        return WEEKDAYS.index(day_name.strip().capitalize())
    except (ValueError, AttributeError):
        return 0


def workweek_start(day: date, start_day: str = "Monday") -> date:
    """First day of the workweek containing `day`"""
    offset = (day.weekday() - weekday_index(start_day)) % 7
    return day - timedelta(days=offset)


def month_day(day: date) -> str:
    """MM-DD key, year-agnostic"""
    return day.strftime("%m-%d")
