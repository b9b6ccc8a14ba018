# expense_tracker/analytics.py
import logging

import pandas as pd

from . import store
from .models import DEFAULT_PERIOD, PERIODS, isoformat_or_none
from .periods import days_spanned, month_window, resolve_period, shift_month

logger = logging.getLogger("expense-tracker")

TREND_MONTHS = 12
TOP_EXPENSES = 5


def _money(value):
    return round(float(value or 0), 2)


def category_breakdown(user_id, start, end):
    """Spending per category inside the window, largest total first."""
    return [
        {
            'category': row['category'],
            'total': _money(row['total']),
            'count': row['count'],
            'average': _money(row['average']),
        }
        for row in store.group_by_category(user_id, start, end)
    ]


def monthly_trend(user_id, now, months=TREND_MONTHS):
    """
    Total and count for each of the ``months`` calendar months ending at now's
    month, oldest first. Months without expenses are reported as zero.
    """
    periods = pd.period_range(end=pd.Period(year=now.year, month=now.month, freq="M"),
                              periods=months, freq="M")
    start, _ = month_window(periods[0].year, periods[0].month)
    _, end = month_window(now.year, now.month)

    grouped = store.group_by_month(user_id, start, end)
    frame = pd.DataFrame(
        [{'month': key, 'total': v['total'], 'count': v['count']} for key, v in grouped.items()],
        columns=['month', 'total', 'count'],
    ).set_index('month')
    frame = frame.reindex([p.strftime("%Y-%m") for p in periods], fill_value=0)

    trend = []
    for period, (_, row) in zip(periods, frame.iterrows()):
        trend.append({
            'month': period.strftime("%b"),
            'year': int(period.year),
            'total': _money(row['total']),
            'count': int(row['count']),
        })
    return trend


def daily_pattern(user_id, start, end):
    return [
        {'day_index': row['day_index'], 'total': _money(row['total']), 'count': row['count']}
        for row in store.group_by_day_of_week(user_id, start, end)
    ]


def top_expenses(user_id, start, end, limit=TOP_EXPENSES):
    return [expense.to_dict() for expense in store.top_n(user_id, start, end, limit)]


def build_summary(user_id, period, now):
    """
    All window-scoped analytics for one user.

    ``now`` is the single request instant; every window below is derived from
    it. A store failure in any part propagates and fails the whole summary.
    """
    if period not in PERIODS:
        period = DEFAULT_PERIOD
    start, end = resolve_period(period, now)
    logger.info(f"📊 Summary for user {user_id}: {period} {start:%Y-%m-%d} -> {end:%Y-%m-%d}")

    total_spent = _money(store.sum_amount(user_id, start, end))
    return {
        'total_spent': total_spent,
        'daily_average': _money(total_spent / days_spanned(start, end)),
        'category_breakdown': category_breakdown(user_id, start, end),
        'monthly_trend': monthly_trend(user_id, now),
        'daily_pattern': daily_pattern(user_id, start, end),
        'top_expenses': top_expenses(user_id, start, end),
        'period': period,
        'start_date': start.isoformat(),
        'end_date': end.isoformat(),
    }


def category_insights(user_id):
    """Lifetime profile per category; no date window applies."""
    return [
        {
            'category': row['category'],
            'total_spent': _money(row['total_spent']),
            'transaction_count': row['transaction_count'],
            'average_amount': _money(row['average_amount']),
            'max_amount': _money(row['max_amount']),
            'min_amount': _money(row['min_amount']),
            'last_transaction': isoformat_or_none(row['last_transaction']),
        }
        for row in store.group_by_category_all_time(user_id)
    ]


def compare_months(user_id, now):
    """Current calendar month against the one before it."""
    current_start, current_end = month_window(now.year, now.month)
    last_year, last_month = shift_month(now.year, now.month, -1)
    last_start, _ = month_window(last_year, last_month)

    grouped = store.group_by_month(user_id, last_start, current_end)
    empty = {'total': 0, 'count': 0}
    current = grouped.get(f"{current_start:%Y-%m}", empty)
    last = grouped.get(f"{last_start:%Y-%m}", empty)

    current_total = _money(current['total'])
    last_total = _money(last['total'])
    change = _money(current_total - last_total)
    # no baseline last month -> 0%, never a division by zero
    percentage = round((change / last_total) * 100, 2) if last_total > 0 else 0

    return {
        'current_month': {'total': current_total, 'count': current['count']},
        'last_month': {'total': last_total, 'count': last['count']},
        'change': {'amount': change, 'percentage': percentage},
    }
