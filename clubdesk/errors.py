"""Application errors, their HTTP responses and access checks."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from http import HTTPStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Claims:
    """Identity of the authenticated caller."""

    user_id: int
    is_admin: bool = False
    is_manager: bool | None = None


class AppError(Exception):
    """Base class for every error the application reports to a client."""

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> tuple[int, dict]:
        """Return the HTTP status code and JSON body for this error."""
        return int(self.status), {"success": False, "error": self.message}

    @classmethod
    def from_database_error(cls, exc: BaseException) -> "AppError":
        """Wrap a database failure as an internal error."""
        logger.error("database error: %s", exc)
        return InternalError(f"Database error: {exc}")

    @classmethod
    def from_json_error(cls, exc: BaseException) -> "AppError":
        """Wrap a problem with a request body as a bad request."""
        if isinstance(exc, json.JSONDecodeError):
            message = f"Malformed JSON: {exc}"
        elif isinstance(exc, (KeyError, TypeError, ValueError)):
            message = f"Invalid JSON data: {exc}"
        else:
            message = "Invalid request body"
        return BadRequest(message)


class BadRequest(AppError):
    """The client sent bad data."""

    status = HTTPStatus.BAD_REQUEST


class Unauthorized(AppError):
    """The caller is not logged in or has a bad token."""

    status = HTTPStatus.UNAUTHORIZED


class Forbidden(AppError):
    """The caller is logged in but not allowed."""

    status = HTTPStatus.FORBIDDEN


class NotFound(AppError):
    """The resource does not exist."""

    status = HTTPStatus.NOT_FOUND


class Conflict(AppError):
    """The resource already exists."""

    status = HTTPStatus.CONFLICT


class InternalError(AppError):
    """Something went wrong on the server side."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR


def require_admin(claims: Claims) -> None:
    """Raise Forbidden unless the caller is an admin."""
    if not claims.is_admin:
        raise Forbidden("Admin access required")


def require_admin_or_manager(claims: Claims) -> None:
    """Raise Forbidden unless the caller is an admin or a manager."""
    if not claims.is_admin and not (claims.is_manager or False):
        raise Forbidden("Admin or Manager access required")