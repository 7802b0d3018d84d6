"""Input validation for request fields."""

from __future__ import annotations

from .errors import BadRequest


def validate_string(value: str, field_name: str, min_len: int, max_len: int) -> None:
    """Check the trimmed value's length in bytes is within the given bounds."""
    length = len(value.strip().encode("utf-8"))
    if length < min_len:
        raise BadRequest(f"{field_name} must be at least {min_len} characters")
    if length > max_len:
        raise BadRequest(f"{field_name} must be at most {max_len} characters")


def validate_email(email: str) -> None:
    """Check that an e-mail address has a basic structure."""
    if "@" not in email or "." not in email:
        raise BadRequest("Invalid email format")


def validate_url(url: str, field_name: str) -> None:
    """Check that a URL starts with http:// or https://."""
    if not url.startswith(("http://", "https://")):
        raise BadRequest(
            f"{field_name} must be a valid URL starting with http:// or https://"
        )