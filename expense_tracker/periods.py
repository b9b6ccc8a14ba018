# expense_tracker/periods.py
"""Date window helpers. Every function takes ``now`` explicitly."""
import calendar
import math
from datetime import datetime, timedelta

DAY_SECONDS = 24 * 60 * 60


def month_window(year, month):
    """First instant through the last second of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, 1), datetime(year, month, last_day, 23, 59, 59)


def shift_month(year, month, offset):
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def resolve_period(period, now):
    """
    Map a period keyword to an inclusive (start, end) window.

    week  -> rolling 7 days ending at ``now``
    month -> the whole calendar month containing ``now``
    year  -> the whole calendar year containing ``now``
    Anything else falls back to month.
    """
    if period == "week":
        return now - timedelta(days=7), now
    if period == "year":
        return datetime(now.year, 1, 1), datetime(now.year, 12, 31, 23, 59, 59)
    return month_window(now.year, now.month)


def days_spanned(start, end):
    """Calendar days covered by the window, never less than 1."""
    days = math.ceil((end - start).total_seconds() / DAY_SECONDS)
    return max(1, days)
