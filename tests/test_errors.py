import json

import pytest

from clubdesk.errors import (
    AppError,
    BadRequest,
    Claims,
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
    require_admin,
    require_admin_or_manager,
)


@pytest.mark.parametrize(
    "error_cls, status",
    [
        (BadRequest, 400),
        (Unauthorized, 401),
        (Forbidden, 403),
        (NotFound, 404),
        (Conflict, 409),
        (InternalError, 500),
    ],
)
def test_to_response_status_and_body(error_cls, status):
    code, body = error_cls("User not found").to_response()
    assert code == status
    assert body == {"success": False, "error": "User not found"}


def test_errors_are_exceptions_with_message():
    err = NotFound("Contest not found")
    assert isinstance(err, AppError)
    assert str(err) == "Contest not found"
    assert err.message == "Contest not found"


def test_from_database_error():
    err = AppError.from_database_error(RuntimeError("boom"))
    assert isinstance(err, InternalError)
    assert err.message == "Database error: boom"


def test_from_json_error_syntax():
    try:
        json.loads("{not json")
    except json.JSONDecodeError as exc:
        err = AppError.from_json_error(exc)
    assert isinstance(err, BadRequest)
    assert err.message.startswith("Malformed JSON: ")


def test_from_json_error_data():
    err = AppError.from_json_error(KeyError("title"))
    assert isinstance(err, BadRequest)
    assert err.message.startswith("Invalid JSON data: ")


def test_from_json_error_other():
    err = AppError.from_json_error(RuntimeError("x"))
    assert isinstance(err, BadRequest)
    assert err.message == "Invalid request body"


def test_require_admin():
    assert require_admin(Claims(user_id=1, is_admin=True)) is None
    with pytest.raises(Forbidden, match="Admin access required"):
        require_admin(Claims(user_id=2, is_admin=False, is_manager=True))


def test_require_admin_or_manager_accepts_manager_and_admin():
    assert require_admin_or_manager(Claims(user_id=1, is_admin=False, is_manager=True)) is None
    assert require_admin_or_manager(Claims(user_id=1, is_admin=True)) is None


@pytest.mark.parametrize("is_manager", [None, False])
def test_require_admin_or_manager_rejects(is_manager):
    with pytest.raises(Forbidden) as info:
        require_admin_or_manager(Claims(user_id=3, is_admin=False, is_manager=is_manager))
    assert info.value.message == "Admin or Manager access required"