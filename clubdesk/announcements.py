"""Club announcements: listing for members, editing for admins."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from http import HTTPStatus

from .errors import AppError, Claims, NotFound, require_admin
from .models import (
    Announcement,
    CreateAnnouncement,
    UpdateAnnouncement,
    format_datetime,
    parse_datetime,
)
from .validation import validate_string


@contextmanager
def _database() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise AppError.from_database_error(exc) from exc


def _fetch(conn: sqlite3.Connection, post_id: int) -> Announcement:
    with _database():
        row = conn.execute(
            "SELECT * FROM announcements WHERE post_id = ?", (post_id,)
        ).fetchone()
    if row is None:
        raise NotFound("Announcement not found")
    return Announcement.from_row(row)


def get_announcements(conn: sqlite3.Connection, claims: Claims) -> dict:
    """List all announcements, newest first."""
    with _database():
        rows = conn.execute(
            "SELECT * FROM announcements ORDER BY created_at DESC, post_id DESC"
        ).fetchall()
    data = [Announcement.from_row(row).to_dict() for row in rows]
    return {"success": True, "count": len(data), "data": data}


def get_announcement(conn: sqlite3.Connection, claims: Claims, post_id: int) -> dict:
    """Return one announcement."""
    return {"success": True, "data": _fetch(conn, post_id).to_dict()}


def create_announcement(conn: sqlite3.Connection, claims: Claims, body) -> tuple[int, dict]:
    """Create an announcement authored by the caller; return status 201 and the body."""
    require_admin(claims)
    request = body if isinstance(body, CreateAnnouncement) else CreateAnnouncement.from_dict(body)
    validate_string(request.title, "Title", 1, 255)
    validate_string(request.content, "Content", 1, 10000)
    event_date = parse_datetime(request.event_date)
    with _database(), conn:
        cursor = conn.execute(
            "INSERT INTO announcements (author_id, title, content, category, event_date) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                claims.user_id,
                request.title,
                request.content,
                request.category,
                format_datetime(event_date),
            ),
        )
    announcement = _fetch(conn, cursor.lastrowid)
    return int(HTTPStatus.CREATED), {
        "success": True,
        "message": "Announcement created",
        "data": announcement.to_dict(),
    }


def update_announcement(conn: sqlite3.Connection, claims: Claims, post_id: int, body) -> dict:
    """Change the given fields of an announcement, keeping the rest."""
    require_admin(claims)
    request = body if isinstance(body, UpdateAnnouncement) else UpdateAnnouncement.from_dict(body)
    existing = _fetch(conn, post_id)
    title = request.title if request.title is not None else existing.title
    content = request.content if request.content is not None else existing.content
    category = request.category if request.category is not None else existing.category
    event_date = (
        parse_datetime(request.event_date)
        if request.event_date is not None
        else existing.event_date
    )
    with _database(), conn:
        conn.execute(
            "UPDATE announcements SET title = ?, content = ?, category = ?, event_date = ? "
            "WHERE post_id = ?",
            (title, content, category, format_datetime(event_date), post_id),
        )
    return {
        "success": True,
        "message": "Announcement updated",
        "data": _fetch(conn, post_id).to_dict(),
    }


def delete_announcement(conn: sqlite3.Connection, claims: Claims, post_id: int) -> dict:
    """Delete an announcement."""
    require_admin(claims)
    with _database(), conn:
        cursor = conn.execute("DELETE FROM announcements WHERE post_id = ?", (post_id,))
    if cursor.rowcount == 0:
        raise NotFound("Announcement not found")
    return {"success": True, "message": f"Announcement {post_id} deleted"}