from datetime import datetime

from expense_tracker import analytics

NOW = datetime(2024, 3, 15, 12, 30)


def test_summary_with_no_expenses(make_user):
    summary = analytics.build_summary(make_user().id, "month", NOW)

    assert summary["total_spent"] == 0
    assert summary["daily_average"] == 0
    assert summary["category_breakdown"] == []
    assert summary["daily_pattern"] == []
    assert summary["top_expenses"] == []
    assert len(summary["monthly_trend"]) == 12
    assert all(p["total"] == 0 and p["count"] == 0 for p in summary["monthly_trend"])
    assert summary["period"] == "month"
    assert summary["start_date"] == "2024-03-01T00:00:00"
    assert summary["end_date"] == "2024-03-31T23:59:59"


def test_category_breakdown_ties_keep_first_used_category(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 10, "Food & Dining")
    make_expense(user.id, 20, "Food & Dining")
    make_expense(user.id, 30, "Transportation")

    summary = analytics.build_summary(user.id, "month", NOW)
    assert summary["category_breakdown"] == [
        {"category": "Food & Dining", "total": 30.0, "count": 2, "average": 15.0},
        {"category": "Transportation", "total": 30.0, "count": 1, "average": 30.0},
    ]
    assert summary["total_spent"] == sum(c["total"] for c in summary["category_breakdown"])


def test_daily_average_divides_by_days_in_window(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 62)

    assert analytics.build_summary(user.id, "month", NOW)["daily_average"] == 2.0
    assert analytics.build_summary(user.id, "week", NOW)["daily_average"] == round(62 / 7, 2)


def test_week_window_excludes_older_expenses(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 10, date=datetime(2024, 3, 9))
    make_expense(user.id, 99, date=datetime(2024, 3, 1))

    summary = analytics.build_summary(user.id, "week", NOW)
    assert summary["total_spent"] == 10
    assert summary["start_date"] == "2024-03-08T12:30:00"
    assert summary["end_date"] == "2024-03-15T12:30:00"


def test_unknown_period_falls_back_to_month(make_user):
    summary = analytics.build_summary(make_user().id, "decade", NOW)
    assert summary["period"] == "month"
    assert summary["start_date"] == "2024-03-01T00:00:00"


def test_monthly_trend_is_twelve_months_oldest_first(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 100, date=datetime(2023, 4, 2))
    make_expense(user.id, 25, date=datetime(2023, 12, 31, 23, 0))
    make_expense(user.id, 5, date=datetime(2024, 3, 15))
    make_expense(user.id, 7, date=datetime(2024, 3, 1))
    make_expense(user.id, 1000, date=datetime(2023, 3, 31))   # thirteen months back

    trend = analytics.monthly_trend(user.id, NOW)
    assert len(trend) == 12
    assert trend[0] == {"month": "Apr", "year": 2023, "total": 100.0, "count": 1}
    assert trend[8] == {"month": "Dec", "year": 2023, "total": 25.0, "count": 1}
    assert trend[9] == {"month": "Jan", "year": 2024, "total": 0.0, "count": 0}
    assert trend[-1] == {"month": "Mar", "year": 2024, "total": 12.0, "count": 2}


def test_monthly_trend_does_not_depend_on_period(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 40, date=datetime(2023, 9, 9))

    week = analytics.build_summary(user.id, "week", NOW)["monthly_trend"]
    year = analytics.build_summary(user.id, "year", NOW)["monthly_trend"]
    assert week == year


def test_top_expenses_limited_to_five_descending(make_user, make_expense):
    user = make_user()
    for amount in (3, 9, 1, 7, 5, 11, 2):
        make_expense(user.id, amount)

    top = analytics.build_summary(user.id, "month", NOW)["top_expenses"]
    assert [e["amount"] for e in top] == [11.0, 9.0, 7.0, 5.0, 3.0]
    assert set(top[0]) >= {"id", "amount", "description", "category", "date"}


def test_daily_pattern_sorted_by_day_index(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 4, date=datetime(2024, 3, 14))   # Thursday
    make_expense(user.id, 6, date=datetime(2024, 3, 10))   # Sunday

    pattern = analytics.build_summary(user.id, "month", NOW)["daily_pattern"]
    assert pattern == [
        {"day_index": 1, "total": 6.0, "count": 1},
        {"day_index": 5, "total": 4.0, "count": 1},
    ]


def test_category_insights_cover_all_time(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 15, "Healthcare", date=datetime(2019, 1, 5))
    make_expense(user.id, 45, "Healthcare", date=datetime(2024, 3, 2, 10, 0))
    make_expense(user.id, 100, "Travel", date=datetime(2020, 7, 7))

    insights = analytics.category_insights(user.id)
    assert [i["category"] for i in insights] == ["Travel", "Healthcare"]
    assert insights[1] == {
        "category": "Healthcare",
        "total_spent": 60.0,
        "transaction_count": 2,
        "average_amount": 30.0,
        "max_amount": 45.0,
        "min_amount": 15.0,
        "last_transaction": "2024-03-02T10:00:00",
    }


def test_compare_months_percentage_change(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 500, date=datetime(2024, 3, 3))
    make_expense(user.id, 200, date=datetime(2024, 2, 1))
    make_expense(user.id, 50, date=datetime(2024, 2, 29, 23, 59, 59))

    result = analytics.compare_months(user.id, NOW)
    assert result == {
        "current_month": {"total": 500.0, "count": 1},
        "last_month": {"total": 250.0, "count": 2},
        "change": {"amount": 250.0, "percentage": 100.0},
    }


def test_compare_months_without_baseline_is_zero_percent(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 100, date=datetime(2024, 3, 3))

    change = analytics.compare_months(user.id, NOW)["change"]
    assert change == {"amount": 100.0, "percentage": 0}


def test_compare_months_in_january_uses_previous_december(make_user, make_expense):
    user = make_user()
    make_expense(user.id, 80, date=datetime(2023, 12, 20))
    make_expense(user.id, 20, date=datetime(2024, 1, 5))

    result = analytics.compare_months(user.id, datetime(2024, 1, 10))
    assert result["last_month"] == {"total": 80.0, "count": 1}
    assert result["change"] == {"amount": -60.0, "percentage": -75.0}
