"""Date parsing utilities for report and listing filters."""

from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from tillbook.domain.errors import ValidationError

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Accepts absolute dates ("2024-01-15", "15 Jan 2024") and relative ones:
    "today", "yesterday", "this week", "last month", "last friday", etc.

    Args:
        date_str: Date string
        today: Reference date for relative expressions (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in fixed:
        return fixed[text]

    prefix, _, period = text.partition(" ")
    if prefix in ("last", "this", "next") and period:
        offset = {"last": -1, "this": 0, "next": 1}[prefix]
        if period == "week":
            monday = today - timedelta(days=today.weekday())
            return monday + timedelta(weeks=offset)
        if period == "month":
            return today.replace(day=1) + relativedelta(months=offset)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=offset)
        if prefix == "last" and period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Supported: today, this-week, this-month, this-year, last-week, last-month,
    last-year.

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()
    monday = today - timedelta(days=today.weekday())

    if period == "today":
        return today, today
    if period == "this-week":
        return monday, today
    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-week":
        start = monday - timedelta(weeks=1)
        return start, start + timedelta(days=6)
    if period == "last-month":
        first_of_month = today.replace(day=1)
        return first_of_month - relativedelta(months=1), first_of_month - timedelta(days=1)
    if period == "last-year":
        first_of_year = today.replace(month=1, day=1)
        return first_of_year - relativedelta(years=1), first_of_year - timedelta(days=1)

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: today, this-week, this-month, "
        "this-year, last-week, last-month, last-year"
    )


def day_bounds(start_date: Optional[date], end_date: Optional[date]) -> tuple[Optional[datetime], Optional[datetime]]:
    """Turn an inclusive date range into [start, end) datetimes for timestamp filters.

    An end date of ``date.max`` has no following day and leaves the range open.
    """
    start = datetime.combine(start_date, time.min) if start_date is not None else None
    if end_date is None or end_date == date.max:
        end = None
    else:
        end = datetime.combine(end_date + timedelta(days=1), time.min)
    return start, end
