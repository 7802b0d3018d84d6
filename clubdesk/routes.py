"""Maps HTTP method and path to the application's operations."""

from __future__ import annotations

import json
import re
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any
from urllib.parse import parse_qs, urlsplit

from . import admin, announcements, contests, events, users
from .errors import AppError, BadRequest, Claims, Unauthorized
from .health import health_check

_Handler = Callable[[sqlite3.Connection, "Claims | None", dict, dict, Any], Any]

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class _Route:
    method: str
    pattern: re.Pattern
    handler: _Handler
    needs_claims: bool = True


def _route(method: str, template: str, handler: _Handler, needs_claims: bool = True) -> _Route:
    regex = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", template)
    return _Route(method, re.compile(f"^{regex}$"), handler, needs_claims)


def _json(body: Any) -> Any:
    if body is None:
        raise BadRequest("Missing Content-Type: application/json header")
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise AppError.from_json_error(exc) from exc
    return body


def _int_param(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        value = None
    if value is None or not _I32_MIN <= value <= _I32_MAX:
        raise BadRequest(f"Invalid URL: Cannot parse `{raw}` to a `i32`")
    return value


_ROUTES: list[_Route] = [
    _route("GET", "/api/health", lambda c, cl, p, q, b: health_check(c), needs_claims=False),
    _route("GET", "/api/users/me", lambda c, cl, p, q, b: users.get_me(c, cl)),
    _route("PUT", "/api/users/me", lambda c, cl, p, q, b: users.update_me(c, cl, _json(b))),
    _route(
        "GET",
        "/api/admin/users",
        lambda c, cl, p, q, b: admin.admin_list_users(c, cl, q.get("status")),
    ),
    _route(
        "GET", "/api/admin/users/{id}",
        lambda c, cl, p, q, b: admin.admin_get_user(c, cl, p["id"]),
    ),
    _route(
        "PUT", "/api/admin/users/{id}/approve",
        lambda c, cl, p, q, b: admin.admin_approve_user(c, cl, p["id"]),
    ),
    _route(
        "PUT", "/api/admin/users/{id}/reject",
        lambda c, cl, p, q, b: admin.admin_reject_user(c, cl, p["id"], _json(b)),
    ),
    _route(
        "PUT", "/api/admin/users/{id}/ban",
        lambda c, cl, p, q, b: admin.admin_ban_user(c, cl, p["id"], _json(b)),
    ),
    _route(
        "GET", "/api/announcements",
        lambda c, cl, p, q, b: announcements.get_announcements(c, cl),
    ),
    _route(
        "POST", "/api/announcements",
        lambda c, cl, p, q, b: announcements.create_announcement(c, cl, _json(b)),
    ),
    _route(
        "GET", "/api/announcements/{id}",
        lambda c, cl, p, q, b: announcements.get_announcement(c, cl, p["id"]),
    ),
    _route(
        "PUT", "/api/announcements/{id}",
        lambda c, cl, p, q, b: announcements.update_announcement(c, cl, p["id"], _json(b)),
    ),
    _route(
        "DELETE", "/api/announcements/{id}",
        lambda c, cl, p, q, b: announcements.delete_announcement(c, cl, p["id"]),
    ),
    _route("GET", "/api/contests", lambda c, cl, p, q, b: contests.get_contests(c, cl)),
    _route(
        "POST", "/api/contests",
        lambda c, cl, p, q, b: contests.create_contest(c, cl, _json(b)),
    ),
    _route(
        "GET", "/api/contests/{id}",
        lambda c, cl, p, q, b: contests.get_contest(c, cl, p["id"]),
    ),
    _route(
        "PUT", "/api/contests/{id}",
        lambda c, cl, p, q, b: contests.update_contest(c, cl, p["id"], _json(b)),
    ),
    _route(
        "DELETE", "/api/contests/{id}",
        lambda c, cl, p, q, b: contests.delete_contest(c, cl, p["id"]),
    ),
    _route("GET", "/api/events", lambda c, cl, p, q, b: events.get_events(c, cl)),
    _route("POST", "/api/events", lambda c, cl, p, q, b: events.create_event(c, cl, _json(b))),
    _route("GET", "/api/events/{id}", lambda c, cl, p, q, b: events.get_event(c, cl, p["id"])),
    _route(
        "PUT", "/api/events/{id}",
        lambda c, cl, p, q, b: events.update_event(c, cl, p["id"], _json(b)),
    ),
    _route(
        "DELETE", "/api/events/{id}",
        lambda c, cl, p, q, b: events.delete_event(c, cl, p["id"]),
    ),
    _route(
        "POST", "/api/events/{event_id}/teams",
        lambda c, cl, p, q, b: events.add_team(c, cl, p["event_id"], _json(b)),
    ),
    _route(
        "PUT", "/api/events/{event_id}/teams/{team_id}",
        lambda c, cl, p, q, b: events.update_team(
            c, cl, p["event_id"], p["team_id"], _json(b)
        ),
    ),
    _route(
        "DELETE", "/api/events/{event_id}/teams/{team_id}",
        lambda c, cl, p, q, b: events.delete_team(c, cl, p["event_id"], p["team_id"]),
    ),
]


def _normalise(result: Any) -> tuple[int, dict]:
    if isinstance(result, tuple):
        status, payload = result
        return int(status), payload
    return int(HTTPStatus.OK), result


def dispatch(
    conn: sqlite3.Connection,
    claims: Claims | None,
    method: str,
    path: str,
    body: Any = None,
) -> tuple[int, dict | None]:
    """Run the operation for a request and return its status code and JSON body."""
    parts = urlsplit(path)
    query = {key: values[0] for key, values in parse_qs(parts.query).items()}
    method = method.upper()

    matches = [(route, route.pattern.match(parts.path)) for route in _ROUTES]
    matches = [(route, match) for route, match in matches if match]
    if not matches:
        return int(HTTPStatus.NOT_FOUND), None
    chosen = next(((r, m) for r, m in matches if r.method == method), None)
    if chosen is None:
        return int(HTTPStatus.METHOD_NOT_ALLOWED), None
    route, match = chosen

    try:
        if route.needs_claims and claims is None:
            raise Unauthorized("Authentication required")
        params = {name: _int_param(raw) for name, raw in match.groupdict().items()}
        return _normalise(route.handler(conn, claims, params, query, body))
    except AppError as exc:
        return exc.to_response()