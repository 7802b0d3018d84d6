"""Programming contests: listing for members, editing for admins."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from http import HTTPStatus

from .errors import AppError, Claims, NotFound, require_admin
from .models import Contest, CreateContest, UpdateContest, format_datetime, parse_datetime
from .validation import validate_string, validate_url


@contextmanager
def _database() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise AppError.from_database_error(exc) from exc


def _fetch(conn: sqlite3.Connection, contest_no: int) -> Contest:
    with _database():
        row = conn.execute(
            "SELECT * FROM contests WHERE contest_no = ?", (contest_no,)
        ).fetchone()
    if row is None:
        raise NotFound("Contest not found")
    return Contest.from_row(row)


def get_contests(conn: sqlite3.Connection, claims: Claims) -> dict:
    """List all contests, newest first."""
    with _database():
        rows = conn.execute(
            "SELECT * FROM contests ORDER BY created_at DESC, contest_no DESC"
        ).fetchall()
    data = [Contest.from_row(row).to_dict() for row in rows]
    return {"success": True, "count": len(data), "data": data}


def get_contest(conn: sqlite3.Connection, claims: Claims, contest_no: int) -> dict:
    """Return one contest."""
    return {"success": True, "data": _fetch(conn, contest_no).to_dict()}


def create_contest(conn: sqlite3.Connection, claims: Claims, body) -> tuple[int, dict]:
    """Create a contest; return status 201 and the body."""
    require_admin(claims)
    request = body if isinstance(body, CreateContest) else CreateContest.from_dict(body)
    validate_string(request.title, "Title", 1, 255)
    validate_string(request.contest_link, "Contest link", 1, 255)
    validate_url(request.contest_link, "Contest link")
    contest_date = parse_datetime(request.contest_date)
    with _database(), conn:
        cursor = conn.execute(
            "INSERT INTO contests (title, contest_link, contest_date) VALUES (?, ?, ?)",
            (request.title, request.contest_link, format_datetime(contest_date)),
        )
    contest = _fetch(conn, cursor.lastrowid)
    return int(HTTPStatus.CREATED), {
        "success": True,
        "message": "Contest created",
        "data": contest.to_dict(),
    }


def update_contest(conn: sqlite3.Connection, claims: Claims, contest_no: int, body) -> dict:
    """Change the given fields of a contest, keeping the rest."""
    require_admin(claims)
    request = body if isinstance(body, UpdateContest) else UpdateContest.from_dict(body)
    existing = _fetch(conn, contest_no)
    title = request.title if request.title is not None else existing.title
    link = request.contest_link if request.contest_link is not None else existing.contest_link
    contest_date = (
        parse_datetime(request.contest_date)
        if request.contest_date is not None
        else existing.contest_date
    )
    with _database(), conn:
        conn.execute(
            "UPDATE contests SET title = ?, contest_link = ?, contest_date = ? "
            "WHERE contest_no = ?",
            (title, link, format_datetime(contest_date), contest_no),
        )
    return {
        "success": True,
        "message": "Contest updated",
        "data": _fetch(conn, contest_no).to_dict(),
    }


def delete_contest(conn: sqlite3.Connection, claims: Claims, contest_no: int) -> dict:
    """Delete a contest."""
    require_admin(claims)
    with _database(), conn:
        cursor = conn.execute("DELETE FROM contests WHERE contest_no = ?", (contest_no,))
    if cursor.rowcount == 0:
        raise NotFound("Contest not found")
    return {"success": True, "message": f"Contest {contest_no} deleted"}