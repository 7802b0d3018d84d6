"""Opening the application database and creating its tables."""

from __future__ import annotations

import logging
import os
import sqlite3

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    user_id INTEGER PRIMARY KEY AUTOINCREMENT,
    reg_number TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    vjudge_handle TEXT,
    codeforces_handle TEXT,
    is_admin INTEGER DEFAULT 0,
    is_manager INTEGER DEFAULT 0,
    status TEXT DEFAULT 'pending',
    id_card_path TEXT
);

CREATE TABLE IF NOT EXISTS announcements (
    post_id INTEGER PRIMARY KEY AUTOINCREMENT,
    author_id INTEGER REFERENCES users(user_id) ON DELETE SET NULL,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    category TEXT,
    event_date TEXT,
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS contests (
    contest_no INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    contest_link TEXT NOT NULL,
    contest_date TEXT,
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS events (
    event_id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT NOT NULL,
    event_date TEXT NOT NULL,
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS teams (
    team_id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER REFERENCES events(event_id) ON DELETE CASCADE,
    coach_name TEXT
);

CREATE TABLE IF NOT EXISTS team_members (
    member_id INTEGER PRIMARY KEY AUTOINCREMENT,
    team_id INTEGER REFERENCES teams(team_id) ON DELETE CASCADE,
    reg_number TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS otp_codes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL,
    code TEXT NOT NULL,
    expires_at TEXT NOT NULL,
    used INTEGER NOT NULL DEFAULT 0,
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);
"""


def _sqlite_path(database_url: str) -> str:
    for prefix in ("sqlite:///", "sqlite://"):
        if database_url.startswith(prefix):
            return database_url[len(prefix):] or ":memory:"
    if "://" in database_url:
        raise RuntimeError(f"Failed to connect to database: unsupported URL scheme in {database_url!r}")
    return database_url


def connect(database_url: str | None = None) -> sqlite3.Connection:
    """Open the database named by the URL, or by DATABASE_URL when none is given."""
    url = database_url if database_url is not None else os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL must be set in .env file")
    path = _sqlite_path(url)
    try:
        conn = sqlite3.connect(path, check_same_thread=False)
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as exc:
        raise RuntimeError("Failed to connect to database") from exc
    conn.row_factory = sqlite3.Row
    logger.info("connected to database")
    return conn


def init_schema(conn: sqlite3.Connection) -> None:
    """Create every table the application uses, if missing."""
    conn.executescript(_SCHEMA)
    conn.commit()