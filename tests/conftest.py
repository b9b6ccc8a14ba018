from datetime import datetime

import pytest

from expense_tracker import create_app, store

# Friday, March 15th 2024 (leap year)
FIXED_NOW = datetime(2024, 3, 15, 12, 30, 0)


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "DB_PATH": str(tmp_path / "test.db"),
        "JWT_SECRET_KEY": "test-secret-key-long-enough-for-hs256-signing",
        "CLOCK": lambda: FIXED_NOW,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def make_user(ctx):
    counter = {"n": 0}

    def _make(username=None):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        return store.create_user(username, f"{username}@example.com", "not-a-real-hash")
    return _make


@pytest.fixture
def make_expense(ctx):
    def _make(user_id, amount, category="Food & Dining", date=datetime(2024, 3, 10, 9, 0), description="test expense"):
        return store.create_record(user_id, {
            "amount": amount,
            "description": description,
            "category": category,
            "date": date,
            "payment_method": "Cash",
            "notes": None,
        })
    return _make


@pytest.fixture
def register(client):
    def _register(username="alice", email=None, password="secret123"):
        email = email or f"{username}@example.com"
        res = client.post("/api/auth/register", json={
            "username": username, "email": email, "password": password,
        })
        assert res.status_code == 201, res.get_json()
        return {"Authorization": f"Bearer {res.get_json()['access_token']}"}
    return _register


@pytest.fixture
def auth_headers(register):
    return register()


@pytest.fixture
def post_expense(client, auth_headers):
    def _post(amount, category="Food & Dining", date="2024-03-10", description="lunch", headers=None):
        res = client.post("/api/expenses", headers=headers or auth_headers, json={
            "amount": amount, "category": category, "date": date, "description": description,
        })
        assert res.status_code == 201, res.get_json()
        return res.get_json()
    return _post
