"""Administrator operations on user accounts."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass

from .errors import AppError, BadRequest, Claims, NotFound, require_admin
from .models import User


@dataclass
class StatusUpdateInput:
    """Optional reason given when rejecting or banning a user."""

    reason: str | None = None

    @classmethod
    def from_dict(cls, data) -> "StatusUpdateInput":
        if not isinstance(data, Mapping):
            raise BadRequest("Invalid JSON data: expected a JSON object")
        reason = data.get("reason")
        if reason is not None and not isinstance(reason, str):
            raise BadRequest("Invalid JSON data: field `reason` must be a string")
        return cls(reason=reason)


@contextmanager
def _database() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise AppError.from_database_error(exc) from exc


def _status_input(body) -> StatusUpdateInput:
    if body is None:
        return StatusUpdateInput()
    if isinstance(body, StatusUpdateInput):
        return body
    return StatusUpdateInput.from_dict(body)


def _describe_status(status: str | None) -> str:
    return "None" if status is None else f"Some({json.dumps(status, ensure_ascii=False)})"


def _fetch_user(conn: sqlite3.Connection, user_id: int) -> User:
    with _database():
        row = conn.execute("SELECT * FROM users WHERE user_id = ?", (user_id,)).fetchone()
    if row is None:
        raise NotFound("User not found")
    return User.from_row(row)


def _set_status(conn: sqlite3.Connection, user_id: int, status: str) -> User:
    with _database(), conn:
        conn.execute("UPDATE users SET status = ? WHERE user_id = ?", (status, user_id))
    return _fetch_user(conn, user_id)


def admin_list_users(conn: sqlite3.Connection, claims: Claims, status: str | None = None) -> dict:
    """List every user, newest first, optionally only those with the given status."""
    require_admin(claims)
    with _database():
        if status is None:
            rows = conn.execute("SELECT * FROM users ORDER BY user_id DESC").fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM users WHERE status = ? ORDER BY user_id DESC", (status,)
            ).fetchall()
    users = [User.from_row(row).to_dict() for row in rows]
    return {"success": True, "count": len(users), "data": users}


def admin_get_user(conn: sqlite3.Connection, claims: Claims, user_id: int) -> dict:
    """Return one user's profile."""
    require_admin(claims)
    return {"success": True, "data": _fetch_user(conn, user_id).to_dict()}


def admin_approve_user(conn: sqlite3.Connection, claims: Claims, user_id: int) -> dict:
    """Activate a pending user so they can log in."""
    require_admin(claims)
    user = _fetch_user(conn, user_id)
    if user.status != "pending":
        raise BadRequest(
            f"Cannot approve user with status '{_describe_status(user.status)}'"
        )
    updated = _set_status(conn, user_id, "active")
    return {
        "success": True,
        "message": f"User '{updated.name}' has been approved",
        "data": updated.to_dict(),
    }


def admin_reject_user(conn: sqlite3.Connection, claims: Claims, user_id: int, body=None) -> dict:
    """Reject a pending user."""
    require_admin(claims)
    request = _status_input(body)
    user = _fetch_user(conn, user_id)
    if user.status != "pending":
        raise BadRequest(
            f"Cannot reject user with status '{_describe_status(user.status)}'"
        )
    updated = _set_status(conn, user_id, "rejected")
    if request.reason is not None:
        message = f"User '{updated.name}' rejected. Reason: {request.reason}"
    else:
        message = f"User '{updated.name}' has been rejected"
    return {"success": True, "message": message, "data": updated.to_dict()}


def admin_ban_user(conn: sqlite3.Connection, claims: Claims, user_id: int, body=None) -> dict:
    """Ban a user who is not already rejected; an admin cannot ban themselves."""
    require_admin(claims)
    request = _status_input(body)
    if claims.user_id == user_id:
        raise BadRequest("You cannot ban yourself")
    user = _fetch_user(conn, user_id)
    if user.status == "rejected":
        raise BadRequest("User is already rejected/banned")
    updated = _set_status(conn, user_id, "rejected")
    if request.reason is not None:
        message = f"User '{updated.name}' banned. Reason: {request.reason}"
    else:
        message = f"User '{updated.name}' has been banned"
    return {"success": True, "message": message, "data": updated.to_dict()}