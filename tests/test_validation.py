import pytest

from clubdesk.errors import BadRequest
from clubdesk.validation import validate_email, validate_string, validate_url


def test_validate_string_accepts_within_bounds():
    assert validate_string("Spring contest", "Title", 1, 255) is None


def test_validate_string_too_short():
    with pytest.raises(BadRequest) as info:
        validate_string("", "Title", 1, 255)
    assert info.value.message == "Title must be at least 1 characters"


def test_validate_string_whitespace_only_is_empty():
    with pytest.raises(BadRequest, match="at least 1 characters"):
        validate_string("   \t ", "Content", 1, 10000)


def test_validate_string_too_long():
    with pytest.raises(BadRequest) as info:
        validate_string("x" * 51, "Registration number", 1, 50)
    assert info.value.message == "Registration number must be at most 50 characters"


def test_validate_string_trims_before_measuring():
    assert validate_string("  " + "x" * 50 + "  ", "Registration number", 1, 50) is None


def test_validate_email():
    assert validate_email("someone@example.com") is None
    for bad in ("someone.example.com", "someone@example", "plain"):
        with pytest.raises(BadRequest, match="Invalid email format"):
            validate_email(bad)


@pytest.mark.parametrize("url", ["http://example.com", "https://example.com/c/1"])
def test_validate_url_accepts(url):
    assert validate_url(url, "Contest link") is None


@pytest.mark.parametrize("url", ["ftp://example.com", "example.com", "HTTP://example.com"])
def test_validate_url_rejects(url):
    with pytest.raises(BadRequest) as info:
        validate_url(url, "Contest link")
    assert info.value.message == (
        "Contest link must be a valid URL starting with http:// or https://"
    )