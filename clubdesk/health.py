"""Liveness check for the server and its database."""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)


def health_check(conn: sqlite3.Connection) -> dict:
    """Report whether the database answers a trivial query."""
    try:
        conn.execute("SELECT 1").fetchone()
    except sqlite3.Error as exc:
        logger.error("db health check failed: %s", exc)
        return {"status": "error", "database": "disconnected"}
    return {"status": "ok", "database": "connected"}