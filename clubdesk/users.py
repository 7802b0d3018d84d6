"""The signed-in user's own profile."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from .errors import AppError, Claims, NotFound
from .models import UpdateProfile, User


@contextmanager
def _database() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise AppError.from_database_error(exc) from exc


def _fetch_user(conn: sqlite3.Connection, user_id: int) -> User:
    with _database():
        row = conn.execute("SELECT * FROM users WHERE user_id = ?", (user_id,)).fetchone()
    if row is None:
        raise NotFound("User not found")
    return User.from_row(row)


def get_me(conn: sqlite3.Connection, claims: Claims) -> dict:
    """Return the caller's profile."""
    return {"success": True, "data": _fetch_user(conn, claims.user_id).to_dict()}


def update_me(conn: sqlite3.Connection, claims: Claims, body) -> dict:
    """Update the caller's name and handles, keeping fields that are not given."""
    update = body if isinstance(body, UpdateProfile) else UpdateProfile.from_dict(body)
    existing = _fetch_user(conn, claims.user_id)
    name = update.name if update.name is not None else existing.name
    vjudge = update.vjudge_handle if update.vjudge_handle is not None else existing.vjudge_handle
    codeforces = (
        update.codeforces_handle
        if update.codeforces_handle is not None
        else existing.codeforces_handle
    )
    with _database(), conn:
        conn.execute(
            "UPDATE users SET name = ?, vjudge_handle = ?, codeforces_handle = ? "
            "WHERE user_id = ?",
            (name, vjudge, codeforces, claims.user_id),
        )
    user = _fetch_user(conn, claims.user_id)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": user.to_dict(),
    }