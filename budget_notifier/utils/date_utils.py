"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, time, timedelta


def at_local_time(day: date, hour: int, minute: int = 0) -> datetime:
    """Naive local datetime for a calendar date at hour:minute"""
    return datetime.combine(day, time(hour, minute))


def js_weekday(moment: date) -> int:
    """Weekday number with Sunday as 0 (Monday=1 ... Saturday=6)"""
    return (moment.weekday() + 1) % 7


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length"""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return day.replace(year=year, month=month, day=min(day.day, last_day))


def next_due_date(due: date, period: str) -> date:
    """Next due date for a recurring bill ("weekly", "monthly" or "yearly")"""
    if period == "weekly":
        return due + timedelta(days=7)
    if period == "monthly":
        return add_months(due, 1)
    if period == "yearly":
        return add_months(due, 12)
    raise ValueError(f"Unknown recurring period: {period}")
