from datetime import datetime

import pytest

from clubdesk.errors import BadRequest
from clubdesk.models import (
    Announcement,
    Contest,
    CreateAnnouncement,
    CreateContest,
    CreateEventInput,
    Event,
    EventResponse,
    LoginInput,
    RegisterInput,
    Team,
    TeamInput,
    TeamMember,
    TeamMemberWithProfile,
    TeamWithMembers,
    UpdateAnnouncement,
    UpdateProfile,
    format_datetime,
    parse_datetime,
)


def _user_row():
    return {
        "user_id": 7,
        "reg_number": "REG-001",
        "name": "Ada",
        "email": "ada@example.com",
        "password": "password",
        "vjudge_handle": None,
        "codeforces_handle": "ada_cf",
        "is_admin": 1,
        "is_manager": 0,
        "status": "pending",
        "id_card_path": None,
    }


def test_parse_datetime_valid():
    assert parse_datetime("2024-05-01T10:30:00") == datetime(2024, 5, 1, 10, 30, 0)


@pytest.mark.parametrize("value", [None, "", "2024-05-01", "2024-05-01 10:30:00", "garbage"])
def test_parse_datetime_invalid_gives_none(value):
    assert parse_datetime(value) is None


def test_format_parse_round_trip():
    moment = datetime(2023, 12, 31, 23, 59, 58)
    assert parse_datetime(format_datetime(moment)) == moment
    assert format_datetime(None) is None


def test_user_from_row_and_to_dict_hides_password():
    user = User_from_row = None  # noqa: F841
    from clubdesk.models import User

    user = User.from_row(_user_row())
    assert user.is_admin is True
    assert user.is_manager is False
    data = user.to_dict()
    assert "password" not in data
    assert data["email"] == "ada@example.com"
    assert data["codeforces_handle"] == "ada_cf"
    assert "password" not in repr(user)


def test_announcement_row_round_trip():
    row = {
        "post_id": 3,
        "author_id": 7,
        "title": "Meetup",
        "content": "Bring laptops",
        "category": None,
        "event_date": "2024-05-01T10:30:00",
        "created_at": "2024-04-01 08:00:00",
    }
    ann = Announcement.from_row(row)
    assert ann.event_date == datetime(2024, 5, 1, 10, 30)
    data = ann.to_dict()
    assert data["event_date"] == "2024-05-01T10:30:00"
    assert data["title"] == "Meetup"
    assert parse_datetime(data["created_at"]) == ann.created_at


def test_contest_and_event_to_dict_with_missing_dates():
    contest = Contest.from_row(
        {"contest_no": 1, "title": "Weekly", "contest_link": "https://example.com",
         "contest_date": None, "created_at": None}
    )
    assert contest.to_dict()["contest_date"] is None
    event = Event.from_row(
        {"event_id": 2, "description": "Regional", "event_date": "2024-06-01T09:00:00",
         "created_at": None}
    )
    assert event.to_dict()["event_date"] == "2024-06-01T09:00:00"


def test_team_and_member_from_row():
    team = Team.from_row({"team_id": 4, "event_id": 2, "coach_name": None})
    member = TeamMember.from_row({"member_id": 9, "team_id": 4, "reg_number": "REG-001"})
    assert team.to_dict() == {"team_id": 4, "event_id": 2, "coach_name": None}
    assert member.to_dict() == {"member_id": 9, "team_id": 4, "reg_number": "REG-001"}


def test_create_announcement_from_dict():
    body = CreateAnnouncement.from_dict({"title": "Hello", "content": "World"})
    assert (body.title, body.content, body.category, body.event_date) == (
        "Hello", "World", None, None,
    )


def test_missing_required_field():
    with pytest.raises(BadRequest) as info:
        CreateContest.from_dict({"title": "Weekly"})
    assert "missing field `contest_link`" in info.value.message


def test_wrong_type_is_rejected():
    with pytest.raises(BadRequest, match="`title`"):
        UpdateAnnouncement.from_dict({"title": 5})


def test_non_object_body_is_rejected():
    with pytest.raises(BadRequest, match="Invalid JSON data"):
        UpdateProfile.from_dict(["name"])


def test_optional_fields_default_to_none():
    body = UpdateProfile.from_dict({"vjudge_handle": "vj"})
    assert body.name is None
    assert body.vjudge_handle == "vj"


def test_register_and_login_inputs():
    password = "password"
    reg = RegisterInput.from_dict(
        {"reg_number": "REG-001", "name": "Ada", "email": "ada@example.com", "password": password}
    )
    login = LoginInput.from_dict({"email": "ada@example.com", "password": password})
    assert reg.email == login.email == "ada@example.com"
    assert password not in repr(login)


def test_create_event_input_requires_date():
    with pytest.raises(BadRequest, match="missing field `event_date`"):
        CreateEventInput.from_dict({"description": "Regional"})


def test_team_input():
    team = TeamInput.from_dict({"members": ["A1", "A2", "A3"]})
    assert team.members == ["A1", "A2", "A3"]
    assert team.coach_name is None
    with pytest.raises(BadRequest, match="members"):
        TeamInput.from_dict({"coach_name": "Coach"})
    with pytest.raises(BadRequest, match="members"):
        TeamInput.from_dict({"members": ["A1", 2]})


def test_event_response_nested_to_dict():
    response = EventResponse(
        event_id=1,
        description="Regional",
        event_date=datetime(2024, 6, 1, 9, 0, 0),
        teams=[
            TeamWithMembers(
                team_id=5,
                coach_name="Coach",
                members=[TeamMemberWithProfile(member_id=8, reg_number="A1", user_id=3, name="Ada")],
            )
        ],
    )
    data = response.to_dict()
    assert data["event_date"] == "2024-06-01T09:00:00"
    assert data["teams"][0]["members"][0] == {
        "member_id": 8, "reg_number": "A1", "user_id": 3, "name": "Ada",
    }
    assert data["teams"][0]["team_id"] == 5