# expense_tracker/models.py
# lightweight model classes (not DB-bound ORM)
from datetime import datetime

# Storage format for every instant written to or compared in the database.
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

CATEGORIES = [
    "Food & Dining", "Transportation", "Entertainment", "Shopping",
    "Bills & Utilities", "Healthcare", "Travel", "Education",
    "Investment", "Subscription", "Personal Care", "Gifts & Donations",
    "Business", "Insurance", "Taxes", "Other"
]

PAYMENT_METHODS = ["Cash", "Credit Card", "Debit Card", "Digital Wallet", "Bank Transfer", "Other"]
DEFAULT_PAYMENT_METHOD = "Cash"

PERIODS = ("week", "month", "year")
DEFAULT_PERIOD = "month"


def to_db_datetime(value):
    # isoformat zero-pads the year, strftime('%Y') does not on every platform
    return value.replace(microsecond=0).isoformat(sep=" ")


def from_db_datetime(value):
    if value is None:
        return None
    return datetime.strptime(value, DATETIME_FORMAT)


def isoformat_or_none(value):
    parsed = from_db_datetime(value)
    return parsed.isoformat() if parsed else None


class User:
    def __init__(self, id, username, email, password_hash, currency='USD', monthly_budget=0, created_at=None):
        self.id = id
        self.username = username
        self.email = email
        self.password_hash = password_hash
        self.currency = currency
        self.monthly_budget = monthly_budget
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            username=row['username'],
            email=row['email'],
            password_hash=row['password_hash'],
            currency=row['currency'],
            monthly_budget=row['monthly_budget'],
            created_at=row['created_at'],
        )

    def to_dict(self):
        # never expose the password hash
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'currency': self.currency,
            'monthly_budget': round(float(self.monthly_budget or 0), 2),
        }


class Expense:
    def __init__(self, id, user_id, amount, description, category, date,
                 payment_method=DEFAULT_PAYMENT_METHOD, notes=None, created_at=None):
        self.id = id
        self.user_id = user_id
        self.amount = amount
        self.description = description
        self.category = category
        self.date = date
        self.payment_method = payment_method
        self.notes = notes
        self.created_at = created_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            user_id=row['user_id'],
            amount=row['amount'],
            description=row['description'],
            category=row['category'],
            date=row['date'],
            payment_method=row['payment_method'],
            notes=row['notes'],
            created_at=row['created_at'],
        )

    def to_dict(self):
        return {
            'id': self.id,
            'amount': round(float(self.amount), 2),
            'description': self.description,
            'category': self.category,
            'date': isoformat_or_none(self.date),
            'payment_method': self.payment_method,
            'notes': self.notes,
            'created_at': isoformat_or_none(self.created_at),
        }
