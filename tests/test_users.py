import pytest

from clubdesk.database import connect, init_schema
from clubdesk.errors import BadRequest, Claims, NotFound
from clubdesk.models import UpdateProfile
from clubdesk.users import get_me, update_me


@pytest.fixture
def conn():
    connection = connect(":memory:")
    init_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def claims(conn):
    password = "password"
    with conn:
        cursor = conn.execute(
            "INSERT INTO users (reg_number, name, email, password, vjudge_handle, "
            "codeforces_handle) VALUES (?, ?, ?, ?, ?, ?)",
            ("r1", "Alice", "alice@example.com", password, "alice_vj", "alice_cf"),
        )
    return Claims(user_id=cursor.lastrowid)


def test_get_me(conn, claims):
    result = get_me(conn, claims)
    assert result["success"] is True
    assert result["data"]["name"] == "Alice"
    assert result["data"]["user_id"] == claims.user_id
    assert "password" not in result["data"]


def test_get_me_missing_user(conn):
    with pytest.raises(NotFound, match="User not found"):
        get_me(conn, Claims(user_id=42))


def test_update_me_keeps_unspecified_fields(conn, claims):
    result = update_me(conn, claims, {"name": "Alicia"})
    assert result["message"] == "Profile updated successfully"
    assert result["data"]["name"] == "Alicia"
    assert result["data"]["vjudge_handle"] == "alice_vj"
    assert result["data"]["codeforces_handle"] == "alice_cf"


def test_update_me_persists(conn, claims):
    update_me(conn, claims, UpdateProfile(codeforces_handle="new_cf"))
    data = get_me(conn, claims)["data"]
    assert data["codeforces_handle"] == "new_cf"
    assert data["name"] == "Alice"


def test_update_me_missing_user(conn):
    with pytest.raises(NotFound):
        update_me(conn, Claims(user_id=42), {"name": "Nobody"})


def test_update_me_rejects_bad_body(conn, claims):
    with pytest.raises(BadRequest):
        update_me(conn, claims, {"name": 3})