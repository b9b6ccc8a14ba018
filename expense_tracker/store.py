# expense_tracker/store.py
"""
Record store: every query the API and the analytics engine run against the
database. All expense queries are scoped by ``user_id``; date bounds are
inclusive on both ends.
"""
from . import db
from .models import Expense, User, to_db_datetime

_RANGE = "user_id = ? AND date >= ? AND date <= ?"


def _range_args(user_id, start, end):
    return (user_id, to_db_datetime(start), to_db_datetime(end))


# ---------------- Users ----------------
def create_user(username, email, password_hash, currency='USD', monthly_budget=0):
    user_id = db.execute_db(
        "INSERT INTO users (username, email, password_hash, currency, monthly_budget) VALUES (?,?,?,?,?)",
        (username, email, password_hash, currency, monthly_budget)
    )
    return get_user_by_id(user_id)


def get_user_by_id(user_id):
    row = db.query_db("SELECT * FROM users WHERE id=?", (user_id,), one=True)
    return User.from_row(row) if row else None


def get_user_by_email(email):
    row = db.query_db("SELECT * FROM users WHERE email=?", (email,), one=True)
    return User.from_row(row) if row else None


def find_user(email, username):
    """Any user already holding this email or username."""
    row = db.query_db("SELECT * FROM users WHERE email=? OR username=?", (email, username), one=True)
    return User.from_row(row) if row else None


# ---------------- Expenses ----------------
def create_record(user_id, fields):
    expense_id = db.execute_db(
        "INSERT INTO expenses (user_id, amount, description, category, date, payment_method, notes) VALUES (?,?,?,?,?,?,?)",
        (user_id, fields['amount'], fields['description'], fields['category'],
         to_db_datetime(fields['date']), fields['payment_method'], fields.get('notes'))
    )
    row = db.query_db("SELECT * FROM expenses WHERE id=?", (expense_id,), one=True)
    return Expense.from_row(row)


def delete_record(user_id, expense_id):
    """Delete one of the user's expenses. False if it is absent or owned by someone else."""
    deleted = db.execute_db(
        "DELETE FROM expenses WHERE id=? AND user_id=?", (expense_id, user_id), rowcount=True
    )
    return deleted > 0


def _filter_clause(user_id, category=None, start=None, end=None):
    clauses, args = ["user_id = ?"], [user_id]
    if category:
        clauses.append("category = ?")
        args.append(category)
    if start:
        clauses.append("date >= ?")
        args.append(to_db_datetime(start))
    if end:
        clauses.append("date <= ?")
        args.append(to_db_datetime(end))
    return " AND ".join(clauses), args


def list_records(user_id, category=None, start=None, end=None, page=1, limit=50):
    """One page of expenses, newest first, plus the total number matching the filters."""
    where, args = _filter_clause(user_id, category, start, end)
    total = db.query_db(f"SELECT COUNT(*) AS count FROM expenses WHERE {where}", args, one=True)['count']
    rows = db.query_db(
        f"SELECT * FROM expenses WHERE {where} ORDER BY date DESC, created_at DESC, id DESC LIMIT ? OFFSET ?",
        args + [limit, (page - 1) * limit]
    )
    return [Expense.from_row(r) for r in rows], total


def all_records(user_id, category=None, start=None, end=None):
    where, args = _filter_clause(user_id, category, start, end)
    rows = db.query_db(f"SELECT * FROM expenses WHERE {where} ORDER BY date DESC, id DESC", args)
    return [Expense.from_row(r) for r in rows]


# ---------------- Aggregations ----------------
def sum_amount(user_id, start, end):
    row = db.query_db(
        f"SELECT COALESCE(SUM(amount), 0) AS total FROM expenses WHERE {_RANGE}",
        _range_args(user_id, start, end), one=True
    )
    return float(row['total'])


def group_by_category(user_id, start, end):
    # equal totals keep the order in which the categories were first used
    rows = db.query_db(f"""
        SELECT category, SUM(amount) AS total, COUNT(*) AS count, AVG(amount) AS average,
               MIN(id) AS first_id
        FROM expenses
        WHERE {_RANGE}
        GROUP BY category
        ORDER BY total DESC, first_id ASC
    """, _range_args(user_id, start, end))
    return [
        {'category': r['category'], 'total': float(r['total']),
         'count': r['count'], 'average': float(r['average'])}
        for r in rows
    ]


def group_by_category_all_time(user_id):
    rows = db.query_db("""
        SELECT category,
               SUM(amount) AS total_spent,
               COUNT(*) AS transaction_count,
               AVG(amount) AS average_amount,
               MAX(amount) AS max_amount,
               MIN(amount) AS min_amount,
               MAX(date) AS last_transaction,
               MIN(id) AS first_id
        FROM expenses
        WHERE user_id = ?
        GROUP BY category
        ORDER BY total_spent DESC, first_id ASC
    """, (user_id,))
    return [
        {
            'category': r['category'],
            'total_spent': float(r['total_spent']),
            'transaction_count': r['transaction_count'],
            'average_amount': float(r['average_amount']),
            'max_amount': float(r['max_amount']),
            'min_amount': float(r['min_amount']),
            'last_transaction': r['last_transaction'],
        }
        for r in rows
    ]


def group_by_month(user_id, start, end):
    """Totals keyed by ``YYYY-MM`` for the months that have records in range."""
    rows = db.query_db(f"""
        SELECT strftime('%Y-%m', date) AS month, SUM(amount) AS total, COUNT(*) AS count
        FROM expenses
        WHERE {_RANGE}
        GROUP BY strftime('%Y-%m', date)
    """, _range_args(user_id, start, end))
    return {r['month']: {'total': float(r['total']), 'count': r['count']} for r in rows}


def group_by_day_of_week(user_id, start, end):
    # strftime('%w') is 0=Sunday; shift to 1=Sunday..7=Saturday
    rows = db.query_db(f"""
        SELECT CAST(strftime('%w', date) AS INTEGER) + 1 AS day_index,
               SUM(amount) AS total, COUNT(*) AS count
        FROM expenses
        WHERE {_RANGE}
        GROUP BY day_index
        ORDER BY day_index ASC
    """, _range_args(user_id, start, end))
    return [
        {'day_index': r['day_index'], 'total': float(r['total']), 'count': r['count']}
        for r in rows
    ]


def top_n(user_id, start, end, n=5):
    rows = db.query_db(
        f"SELECT * FROM expenses WHERE {_RANGE} ORDER BY amount DESC, date DESC, id ASC LIMIT ?",
        _range_args(user_id, start, end) + (n,)
    )
    return [Expense.from_row(r) for r in rows]
