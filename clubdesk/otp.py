"""One-time codes sent by e-mail: creation, storage and verification."""

from __future__ import annotations

import secrets
import sqlite3

from .errors import AppError

_NOW = "strftime('%Y-%m-%dT%H:%M:%f', 'now')"


def generate_otp() -> str:
    """Return a random six-digit code."""
    return str(100_000 + secrets.randbelow(900_000))


def store_otp(conn: sqlite3.Connection, email: str, code: str) -> None:
    """Store a code valid for ten minutes, invalidating earlier codes for the e-mail."""
    try:
        with conn:
            conn.execute(
                "UPDATE otp_codes SET used = 1 WHERE email = ? AND used = 0", (email,)
            )
            conn.execute(
                "INSERT INTO otp_codes (email, code, expires_at) "
                "VALUES (?, ?, strftime('%Y-%m-%dT%H:%M:%f', 'now', '+10 minutes'))",
                (email, code),
            )
    except sqlite3.Error as exc:
        raise AppError.from_database_error(exc) from exc


def verify_otp(conn: sqlite3.Connection, email: str, code: str) -> bool:
    """Consume a matching unused, unexpired code; return whether one was found."""
    try:
        with conn:
            row = conn.execute(
                "SELECT id FROM otp_codes "
                "WHERE email = ? AND code = ? AND used = 0 "
                f"AND expires_at > {_NOW} ORDER BY id LIMIT 1",
                (email, code),
            ).fetchone()
            if row is None:
                return False
            conn.execute("UPDATE otp_codes SET used = 1 WHERE id = ?", (row[0],))
    except sqlite3.Error as exc:
        raise AppError.from_database_error(exc) from exc
    return True