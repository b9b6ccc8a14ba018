# expense_tracker/db.py
import logging
import os
import sqlite3

from flask import current_app, g

from .errors import StoreError

logger = logging.getLogger("expense-tracker")

DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "expenses.db")
SCHEMA_FILE = os.path.join(os.path.dirname(__file__), "schema.sql")


def _connect(db_path):
    # ensure directory exists
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db():
    db = getattr(g, '_database', None)
    if db is None:
        try:
            db = g._database = _connect(current_app.config['DB_PATH'])
        except (sqlite3.Error, OSError) as e:
            raise StoreError(f"Database unavailable: {e}") from e
    return db


def close_db(exception=None):
    db = g.pop('_database', None)
    if db is not None:
        try:
            db.close()
        except sqlite3.Error:
            logger.exception("Error closing DB connection")


def query_db(query, args=(), one=False):
    try:
        cur = get_db().execute(query, args)
        rv = cur.fetchall()
        cur.close()
    except sqlite3.Error as e:
        logger.exception("DB query failed")
        raise StoreError(f"Database query failed: {e}") from e
    return (rv[0] if rv else None) if one else rv


def execute_db(query, args=(), rowcount=False):
    """Run a write statement and commit.

    Returns the new row id, or the number of affected rows when
    ``rowcount`` is set.
    """
    conn = get_db()
    try:
        cur = conn.cursor()
        cur.execute(query, args)
        conn.commit()
        result = cur.rowcount if rowcount else cur.lastrowid
        cur.close()
    except sqlite3.Error as e:
        conn.rollback()
        logger.exception("DB write failed")
        raise StoreError(f"Database write failed: {e}") from e
    return result


def init_db(db_path):
    """
    Create the tables from schema.sql. Idempotent (CREATE ... IF NOT EXISTS),
    so it is safe to call at every app startup.
    """
    if not os.path.exists(SCHEMA_FILE):
        raise FileNotFoundError(f"schema.sql not found at expected path: {SCHEMA_FILE}")

    conn = _connect(db_path)
    try:
        with open(SCHEMA_FILE, 'r', encoding='utf-8') as f:
            sql = f.read()
        conn.executescript(sql)
        conn.commit()
    finally:
        conn.close()


def ping():
    """Return True if the database answers a trivial query."""
    try:
        query_db("SELECT 1", one=True)
        return True
    except StoreError:
        return False
