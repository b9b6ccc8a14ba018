# expense_tracker/validation.py
"""
Request validation helpers.

Each ``validate_*`` function returns a ``(data, error)`` pair: cleaned data and
``None`` on success, ``None`` and a human readable reason otherwise.
"""
import math
import re
from datetime import datetime, timezone

from .models import CATEGORIES, DEFAULT_PAYMENT_METHOD, PAYMENT_METHODS

DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%Y"]
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_AMOUNT = 0.01
MAX_DESCRIPTION_LENGTH = 200
MAX_NOTES_LENGTH = 500
USERNAME_LENGTH = (3, 30)
MIN_PASSWORD_LENGTH = 6
MAX_PAGE = 100000
# stored dates must keep a four digit year
YEAR_RANGE = (1900, 9999)
AMOUNT_RE = re.compile(r"^-?\d+(\.\d+)?$")


def normalize_choice(value, choices):
    """Case-insensitive match against a fixed list; None when nothing matches."""
    if value is None:
        return None
    value = str(value).strip()
    for choice in choices:
        if value.lower() == choice.lower():
            return choice
    return None


def normalize_category(cat):
    return normalize_choice(cat, CATEGORIES)


def parse_date(s, end_of_day=False):
    """Try the plain date formats first, then ISO 8601.

    Plain dates become midnight, or 23:59:59 with ``end_of_day``. Aware
    datetimes are converted to UTC and made naive.
    """
    if not s or not isinstance(s, str):
        return None
    s = s.strip()
    parsed = None
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(s, fmt)
        except ValueError:
            continue
        if end_of_day:
            parsed = parsed.replace(hour=23, minute=59, second=59)
        break
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is not None:
            try:
                parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
            except OverflowError:
                return None
        parsed = parsed.replace(microsecond=0)
    low, high = YEAR_RANGE
    if not low <= parsed.year <= high:
        return None
    return parsed


def _text(data, field, label):
    """Stripped string value of an optional field; '' when absent."""
    value = data.get(field)
    if value is None:
        return '', None
    if not isinstance(value, str):
        return None, f"{label} must be a string"
    return value.strip(), None


def parse_amount(value):
    if value is None:
        return None, "Amount is required"
    if isinstance(value, bool):
        return None, "Invalid amount format"
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        # tolerate currency symbols, thousands separators and spaces only
        amount_str = re.sub(r'[\s,$€£₹]', '', value)
        if not AMOUNT_RE.match(amount_str):
            return None, "Invalid amount format"
        amount = float(amount_str)
    else:
        return None, "Invalid amount format"
    if not math.isfinite(amount):
        return None, "Invalid amount format"
    amount = round(amount, 2)
    if amount < MIN_AMOUNT:
        return None, f"Amount must be at least {MIN_AMOUNT}"
    return amount, None


def validate_expense(data):
    if not isinstance(data, dict):
        return None, "Request body must be a JSON object"

    amount, error = parse_amount(data.get('amount'))
    if error:
        return None, error

    desc, error = _text(data, 'description', "Description")
    if error:
        return None, error
    if not desc:
        return None, "Description is required"
    if len(desc) > MAX_DESCRIPTION_LENGTH:
        return None, f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"

    if not data.get('category'):
        return None, "Category is required"
    category = normalize_category(data.get('category'))
    if not category:
        return None, f"Invalid category: {data.get('category')}"

    if not data.get('date'):
        return None, "Date is required"
    date_val = parse_date(data.get('date'))
    if not date_val:
        return None, "Invalid date"

    payment_method = DEFAULT_PAYMENT_METHOD
    if data.get('payment_method'):
        payment_method = normalize_choice(data.get('payment_method'), PAYMENT_METHODS)
        if not payment_method:
            return None, f"Invalid payment method: {data.get('payment_method')}"

    notes, error = _text(data, 'notes', "Notes")
    if error:
        return None, error
    notes = notes or None
    if notes and len(notes) > MAX_NOTES_LENGTH:
        return None, f"Notes must be at most {MAX_NOTES_LENGTH} characters"

    return {
        'amount': amount,
        'description': desc,
        'category': category,
        'date': date_val,
        'payment_method': payment_method,
        'notes': notes,
    }, None


def validate_registration(data):
    if not isinstance(data, dict):
        return None, "Request body must be a JSON object"

    fields = {}
    for field in ('username', 'email', 'password'):
        fields[field], error = _text(data, field, field.capitalize())
        if error:
            return None, error
    username = fields['username']
    email = fields['email'].lower()
    password = data.get('password') or ''

    if not username or not email or not password:
        return None, "All fields are required"
    low, high = USERNAME_LENGTH
    if not low <= len(username) <= high:
        return None, f"Username must be between {low} and {high} characters"
    if not EMAIL_RE.match(email):
        return None, "Invalid email address"
    if len(password) < MIN_PASSWORD_LENGTH:
        return None, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    return {'username': username, 'email': email, 'password': password}, None


def _positive_int(value, default, name, maximum=None):
    if value is None or value == '':
        return default, None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None, f"{name} must be an integer"
    if number < 1:
        return None, f"{name} must be at least 1"
    if maximum is not None and number > maximum:
        return None, f"{name} must be at most {maximum}"
    return number, None


def validate_list_filters(args, default_limit=50, max_limit=500, paginate=True):
    """Parse listing/export query parameters."""
    filters = {'category': None, 'start': None, 'end': None}

    if args.get('category'):
        category = normalize_category(args.get('category'))
        if not category:
            return None, f"Invalid category: {args.get('category')}"
        filters['category'] = category

    if args.get('start_date'):
        filters['start'] = parse_date(args.get('start_date'))
        if not filters['start']:
            return None, "Invalid start_date"
    if args.get('end_date'):
        filters['end'] = parse_date(args.get('end_date'), end_of_day=True)
        if not filters['end']:
            return None, "Invalid end_date"
    if filters['start'] and filters['end'] and filters['start'] > filters['end']:
        return None, "start_date must not be after end_date"

    if paginate:
        page, error = _positive_int(args.get('page'), 1, "page", maximum=MAX_PAGE)
        if error:
            return None, error
        limit, error = _positive_int(args.get('limit'), default_limit, "limit")
        if error:
            return None, error
        filters['page'] = page
        filters['limit'] = min(limit, max_limit)

    return filters, None
