"""Events with their teams and team members."""

from __future__ import annotations

import json
import sqlite3
from collections import defaultdict
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from http import HTTPStatus

from .errors import AppError, BadRequest, Claims, NotFound, require_admin_or_manager
from .models import (
    CreateEventInput,
    Event,
    EventResponse,
    TeamInput,
    TeamMemberWithProfile,
    TeamWithMembers,
    UpdateEventInput,
    format_datetime,
    parse_datetime,
)
from .validation import validate_string

_DATE_ERROR = "Invalid event_date format (expected YYYY-MM-DDTHH:MM:SS)"
_TEAM_SIZE = 3


@contextmanager
def _database() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise AppError.from_database_error(exc) from exc


def _fetch(conn: sqlite3.Connection, event_id: int) -> Event:
    with _database():
        row = conn.execute("SELECT * FROM events WHERE event_id = ?", (event_id,)).fetchone()
    if row is None:
        raise NotFound("Event not found")
    return Event.from_row(row)


def _strict_date(value: str):
    parsed = parse_datetime(value)
    if parsed is None:
        raise BadRequest(_DATE_ERROR)
    return parsed


def _check_team(request: TeamInput) -> None:
    if len(request.members) != _TEAM_SIZE:
        raise BadRequest("A team must have exactly 3 members")


def _insert_members(conn: sqlite3.Connection, team_id: int, members: Iterable[str]) -> None:
    for reg_number in members:
        validate_string(reg_number, "Registration number", 1, 50)
        conn.execute(
            "INSERT INTO team_members (team_id, reg_number) VALUES (?, ?)",
            (team_id, reg_number),
        )


def build_event_responses(
    conn: sqlite3.Connection, events: Iterable[Event]
) -> list[EventResponse]:
    """Attach teams and members to events using one query per table."""
    events = list(events)
    if not events:
        return []
    event_ids = json.dumps([event.event_id for event in events])
    with _database():
        team_rows = conn.execute(
            "SELECT team_id, event_id, coach_name FROM teams "
            "WHERE event_id IN (SELECT value FROM json_each(?)) ORDER BY team_id ASC",
            (event_ids,),
        ).fetchall()
        team_ids = json.dumps([row["team_id"] for row in team_rows])
        member_rows = conn.execute(
            "SELECT tm.member_id, tm.team_id, tm.reg_number, u.user_id, u.name "
            "FROM team_members tm "
            "LEFT JOIN users u ON tm.reg_number = u.reg_number "
            "WHERE tm.team_id IN (SELECT value FROM json_each(?)) "
            "ORDER BY tm.member_id ASC",
            (team_ids,),
        ).fetchall()

    members_by_team: dict[int, list[TeamMemberWithProfile]] = defaultdict(list)
    for row in member_rows:
        members_by_team[row["team_id"] or 0].append(
            TeamMemberWithProfile(
                member_id=row["member_id"],
                reg_number=row["reg_number"],
                user_id=row["user_id"],
                name=row["name"],
            )
        )

    teams_by_event: dict[int, list[TeamWithMembers]] = defaultdict(list)
    for row in team_rows:
        teams_by_event[row["event_id"] or 0].append(
            TeamWithMembers(
                team_id=row["team_id"],
                coach_name=row["coach_name"],
                members=members_by_team.pop(row["team_id"], []),
            )
        )

    return [
        EventResponse(
            event_id=event.event_id,
            description=event.description,
            event_date=event.event_date,
            teams=teams_by_event.pop(event.event_id, []),
        )
        for event in events
    ]


def get_events(conn: sqlite3.Connection, claims: Claims) -> dict:
    """List all events, earliest first, with their teams and members."""
    with _database():
        rows = conn.execute(
            "SELECT * FROM events ORDER BY event_date ASC, event_id ASC"
        ).fetchall()
    responses = build_event_responses(conn, (Event.from_row(row) for row in rows))
    data = [response.to_dict() for response in responses]
    return {"success": True, "count": len(data), "data": data}


def get_event(conn: sqlite3.Connection, claims: Claims, event_id: int) -> dict:
    """Return one event with its teams and members."""
    event = _fetch(conn, event_id)
    [response] = build_event_responses(conn, [event])
    return {"success": True, "data": response.to_dict()}


def create_event(conn: sqlite3.Connection, claims: Claims, body) -> tuple[int, dict]:
    """Create an event; return status 201 and the body."""
    require_admin_or_manager(claims)
    request = body if isinstance(body, CreateEventInput) else CreateEventInput.from_dict(body)
    validate_string(request.description, "Description", 1, 10000)
    event_date = _strict_date(request.event_date)
    with _database(), conn:
        cursor = conn.execute(
            "INSERT INTO events (description, event_date) VALUES (?, ?)",
            (request.description, format_datetime(event_date)),
        )
    event = _fetch(conn, cursor.lastrowid)
    return int(HTTPStatus.CREATED), {
        "success": True,
        "message": "Event created",
        "data": event.to_dict(),
    }


def update_event(conn: sqlite3.Connection, claims: Claims, event_id: int, body) -> dict:
    """Change the given fields of an event, keeping the rest."""
    require_admin_or_manager(claims)
    request = body if isinstance(body, UpdateEventInput) else UpdateEventInput.from_dict(body)
    existing = _fetch(conn, event_id)
    description = (
        request.description if request.description is not None else existing.description
    )
    event_date = (
        _strict_date(request.event_date)
        if request.event_date is not None
        else existing.event_date
    )
    validate_string(description, "Description", 1, 10000)
    with _database(), conn:
        conn.execute(
            "UPDATE events SET description = ?, event_date = ? WHERE event_id = ?",
            (description, format_datetime(event_date), event_id),
        )
    return {
        "success": True,
        "message": "Event updated",
        "data": _fetch(conn, event_id).to_dict(),
    }


def delete_event(conn: sqlite3.Connection, claims: Claims, event_id: int) -> dict:
    """Delete an event."""
    require_admin_or_manager(claims)
    with _database(), conn:
        cursor = conn.execute("DELETE FROM events WHERE event_id = ?", (event_id,))
    if cursor.rowcount == 0:
        raise NotFound("Event not found")
    return {"success": True, "message": f"Event {event_id} deleted"}


def add_team(conn: sqlite3.Connection, claims: Claims, event_id: int, body) -> tuple[int, dict]:
    """Add a team of exactly three members to an event; return status 201 and the body."""
    require_admin_or_manager(claims)
    request = body if isinstance(body, TeamInput) else TeamInput.from_dict(body)
    _check_team(request)
    with _database(), conn:
        cursor = conn.execute(
            "INSERT INTO teams (event_id, coach_name) VALUES (?, ?)",
            (event_id, request.coach_name),
        )
        _insert_members(conn, cursor.lastrowid, request.members)
    return int(HTTPStatus.CREATED), {"success": True, "message": "Team added successfully"}


def update_team(
    conn: sqlite3.Connection, claims: Claims, event_id: int, team_id: int, body
) -> dict:
    """Set a team's coach and replace all of its members."""
    require_admin_or_manager(claims)
    request = body if isinstance(body, TeamInput) else TeamInput.from_dict(body)
    _check_team(request)
    with _database(), conn:
        cursor = conn.execute(
            "UPDATE teams SET coach_name = ? WHERE team_id = ?",
            (request.coach_name, team_id),
        )
        if cursor.rowcount == 0:
            raise NotFound("Team not found")
        conn.execute("DELETE FROM team_members WHERE team_id = ?", (team_id,))
        _insert_members(conn, team_id, request.members)
    return {"success": True, "message": "Team updated successfully"}


def delete_team(conn: sqlite3.Connection, claims: Claims, event_id: int, team_id: int) -> dict:
    """Delete a team."""
    require_admin_or_manager(claims)
    with _database(), conn:
        cursor = conn.execute("DELETE FROM teams WHERE team_id = ?", (team_id,))
    if cursor.rowcount == 0:
        raise NotFound("Team not found")
    return {"success": True, "message": f"Team {team_id} deleted"}