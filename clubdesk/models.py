"""Records stored in the database and the request bodies that create them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .errors import BadRequest

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def parse_datetime(value: str | None) -> datetime | None:
    """Parse YYYY-MM-DDTHH:MM:SS; return None when absent or malformed."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, DATETIME_FORMAT)
    except (TypeError, ValueError):
        return None


def format_datetime(value: datetime | None) -> str | None:
    """Render a datetime the way it appears in JSON responses."""
    return None if value is None else value.isoformat()


def _row_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _row_bool(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _object(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise BadRequest("Invalid JSON data: expected a JSON object")
    return data


def _required_str(data: Mapping, name: str) -> str:
    if name not in data:
        raise BadRequest(f"Invalid JSON data: missing field `{name}`")
    value = data[name]
    if not isinstance(value, str):
        raise BadRequest(f"Invalid JSON data: field `{name}` must be a string")
    return value


def _optional_str(data: Mapping, name: str) -> str | None:
    value = data.get(name)
    if value is None or isinstance(value, str):
        return value
    raise BadRequest(f"Invalid JSON data: field `{name}` must be a string")


@dataclass
class User:
    user_id: int
    reg_number: str
    name: str
    email: str
    password: str = field(repr=False)
    vjudge_handle: str | None = None
    codeforces_handle: str | None = None
    is_admin: bool | None = None
    is_manager: bool | None = None
    status: str | None = None
    id_card_path: str | None = None

    @classmethod
    def from_row(cls, row) -> "User":
        return cls(
            user_id=row["user_id"],
            reg_number=row["reg_number"],
            name=row["name"],
            email=row["email"],
            password=row["password"],
            vjudge_handle=row["vjudge_handle"],
            codeforces_handle=row["codeforces_handle"],
            is_admin=_row_bool(row["is_admin"]),
            is_manager=_row_bool(row["is_manager"]),
            status=row["status"],
            id_card_path=row["id_card_path"],
        )

    def to_dict(self) -> dict:
        """JSON form; the password hash is never included."""
        return {
            "user_id": self.user_id,
            "reg_number": self.reg_number,
            "name": self.name,
            "email": self.email,
            "vjudge_handle": self.vjudge_handle,
            "codeforces_handle": self.codeforces_handle,
            "is_admin": self.is_admin,
            "is_manager": self.is_manager,
            "status": self.status,
            "id_card_path": self.id_card_path,
        }


@dataclass
class RegisterInput:
    reg_number: str
    name: str
    email: str
    password: str = field(repr=False)

    @classmethod
    def from_dict(cls, data) -> "RegisterInput":
        data = _object(data)
        return cls(
            reg_number=_required_str(data, "reg_number"),
            name=_required_str(data, "name"),
            email=_required_str(data, "email"),
            password=_required_str(data, "password"),
        )


@dataclass
class LoginInput:
    email: str
    password: str = field(repr=False)

    @classmethod
    def from_dict(cls, data) -> "LoginInput":
        data = _object(data)
        return cls(
            email=_required_str(data, "email"),
            password=_required_str(data, "password"),
        )


@dataclass
class UpdateProfile:
    name: str | None = None
    vjudge_handle: str | None = None
    codeforces_handle: str | None = None

    @classmethod
    def from_dict(cls, data) -> "UpdateProfile":
        data = _object(data)
        return cls(
            name=_optional_str(data, "name"),
            vjudge_handle=_optional_str(data, "vjudge_handle"),
            codeforces_handle=_optional_str(data, "codeforces_handle"),
        )


@dataclass
class Announcement:
    post_id: int
    author_id: int | None
    title: str
    content: str
    category: str | None = None
    event_date: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row) -> "Announcement":
        return cls(
            post_id=row["post_id"],
            author_id=row["author_id"],
            title=row["title"],
            content=row["content"],
            category=row["category"],
            event_date=_row_datetime(row["event_date"]),
            created_at=_row_datetime(row["created_at"]),
        )

    def to_dict(self) -> dict:
        return {
            "post_id": self.post_id,
            "author_id": self.author_id,
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "event_date": format_datetime(self.event_date),
            "created_at": format_datetime(self.created_at),
        }


@dataclass
class CreateAnnouncement:
    title: str
    content: str
    category: str | None = None
    event_date: str | None = None

    @classmethod
    def from_dict(cls, data) -> "CreateAnnouncement":
        data = _object(data)
        return cls(
            title=_required_str(data, "title"),
            content=_required_str(data, "content"),
            category=_optional_str(data, "category"),
            event_date=_optional_str(data, "event_date"),
        )


@dataclass
class UpdateAnnouncement:
    title: str | None = None
    content: str | None = None
    category: str | None = None
    event_date: str | None = None

    @classmethod
    def from_dict(cls, data) -> "UpdateAnnouncement":
        data = _object(data)
        return cls(
            title=_optional_str(data, "title"),
            content=_optional_str(data, "content"),
            category=_optional_str(data, "category"),
            event_date=_optional_str(data, "event_date"),
        )


@dataclass
class Contest:
    contest_no: int
    title: str
    contest_link: str
    contest_date: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row) -> "Contest":
        return cls(
            contest_no=row["contest_no"],
            title=row["title"],
            contest_link=row["contest_link"],
            contest_date=_row_datetime(row["contest_date"]),
            created_at=_row_datetime(row["created_at"]),
        )

    def to_dict(self) -> dict:
        return {
            "contest_no": self.contest_no,
            "title": self.title,
            "contest_link": self.contest_link,
            "contest_date": format_datetime(self.contest_date),
            "created_at": format_datetime(self.created_at),
        }


@dataclass
class CreateContest:
    title: str
    contest_link: str
    contest_date: str | None = None

    @classmethod
    def from_dict(cls, data) -> "CreateContest":
        data = _object(data)
        return cls(
            title=_required_str(data, "title"),
            contest_link=_required_str(data, "contest_link"),
            contest_date=_optional_str(data, "contest_date"),
        )


@dataclass
class UpdateContest:
    title: str | None = None
    contest_link: str | None = None
    contest_date: str | None = None

    @classmethod
    def from_dict(cls, data) -> "UpdateContest":
        data = _object(data)
        return cls(
            title=_optional_str(data, "title"),
            contest_link=_optional_str(data, "contest_link"),
            contest_date=_optional_str(data, "contest_date"),
        )


@dataclass
class Event:
    event_id: int
    description: str
    event_date: datetime
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row) -> "Event":
        return cls(
            event_id=row["event_id"],
            description=row["description"],
            event_date=_row_datetime(row["event_date"]),
            created_at=_row_datetime(row["created_at"]),
        )

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "description": self.description,
            "event_date": format_datetime(self.event_date),
            "created_at": format_datetime(self.created_at),
        }


@dataclass
class Team:
    team_id: int
    event_id: int | None = None
    coach_name: str | None = None

    @classmethod
    def from_row(cls, row) -> "Team":
        return cls(
            team_id=row["team_id"],
            event_id=row["event_id"],
            coach_name=row["coach_name"],
        )

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "event_id": self.event_id,
            "coach_name": self.coach_name,
        }


@dataclass
class TeamMember:
    member_id: int
    team_id: int | None
    reg_number: str

    @classmethod
    def from_row(cls, row) -> "TeamMember":
        return cls(
            member_id=row["member_id"],
            team_id=row["team_id"],
            reg_number=row["reg_number"],
        )

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "team_id": self.team_id,
            "reg_number": self.reg_number,
        }


@dataclass
class CreateEventInput:
    description: str
    event_date: str

    @classmethod
    def from_dict(cls, data) -> "CreateEventInput":
        data = _object(data)
        return cls(
            description=_required_str(data, "description"),
            event_date=_required_str(data, "event_date"),
        )


@dataclass
class UpdateEventInput:
    description: str | None = None
    event_date: str | None = None

    @classmethod
    def from_dict(cls, data) -> "UpdateEventInput":
        data = _object(data)
        return cls(
            description=_optional_str(data, "description"),
            event_date=_optional_str(data, "event_date"),
        )


@dataclass
class TeamInput:
    """A team's coach and the registration numbers of its members."""

    coach_name: str | None
    members: list[str]

    @classmethod
    def from_dict(cls, data) -> "TeamInput":
        data = _object(data)
        if "members" not in data:
            raise BadRequest("Invalid JSON data: missing field `members`")
        members = data["members"]
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise BadRequest("Invalid JSON data: field `members` must be a list of strings")
        return cls(coach_name=_optional_str(data, "coach_name"), members=list(members))


@dataclass
class TeamMemberWithProfile:
    member_id: int
    reg_number: str
    user_id: int | None = None
    name: str | None = None

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "reg_number": self.reg_number,
            "user_id": self.user_id,
            "name": self.name,
        }


@dataclass
class TeamWithMembers:
    team_id: int
    coach_name: str | None = None
    members: list[TeamMemberWithProfile] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "coach_name": self.coach_name,
            "members": [member.to_dict() for member in self.members],
        }


@dataclass
class EventResponse:
    event_id: int
    description: str
    event_date: datetime
    teams: list[TeamWithMembers] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "description": self.description,
            "event_date": format_datetime(self.event_date),
            "teams": [team.to_dict() for team in self.teams],
        }