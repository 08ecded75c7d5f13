"""Unit tests for auth/validation.py and auth/avatar.py -- pure logic, no I/O.

Covers:
- registration reports every violation at once, in field order
- login does not enforce a minimum password length
- avatar URLs are deterministic and case-insensitive in the email
"""

import pytest

from auth.avatar import avatar_url
from auth.errors import InputValidationError
from auth.validation import (
    EMAIL_INVALID,
    NAME_REQUIRED,
    PASSWORD_REQUIRED,
    PASSWORD_TOO_SHORT,
    is_valid_email,
    validate_login,
    validate_registration,
)


class TestRegistrationValidation:
    def test_all_three_violations_reported(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_registration("", "bad", "123")
        errors = exc_info.value.errors
        assert [e.param for e in errors] == ["name", "email", "password"]
        assert [e.msg for e in errors] == [NAME_REQUIRED, EMAIL_INVALID, PASSWORD_TOO_SHORT]
        assert all(e.location == "body" for e in errors)

    def test_whitespace_name_is_empty(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_registration("   ", "ada@acme.io", "secret123")
        assert [e.param for e in exc_info.value.errors] == ["name"]

    def test_six_character_password_accepted(self):
        validate_registration("Ada", "ada@acme.io", "123456")

    def test_five_character_password_rejected(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_registration("Ada", "ada@acme.io", "12345")
        assert [e.msg for e in exc_info.value.errors] == [PASSWORD_TOO_SHORT]


class TestLoginValidation:
    def test_short_password_is_fine_at_login(self):
        validate_login("ada@acme.io", "1")

    def test_missing_password_and_bad_email(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_login("not-an-email", "")
        assert [e.msg for e in exc_info.value.errors] == [EMAIL_INVALID, PASSWORD_REQUIRED]


@pytest.mark.parametrize(
    "email, valid",
    [
        ("ada@acme.io", True),
        ("nouser@x.com", True),
        ("first.last+tag@mail.co.uk", True),
        ("user@host.test", True),
        ("user@host.local", False),
        ("bad", False),
        ("missing-domain@", False),
        ("@missing-local.com", False),
        ("", False),
    ],
)
def test_email_syntax(email, valid):
    assert is_valid_email(email) is valid


class TestAvatar:
    def test_known_gravatar_hash(self):
        # md5("myemailaddress@example.com"), the example from Gravatar's docs
        url = avatar_url("MyEmailAddress@example.com ")
        assert url == "https://www.gravatar.com/avatar/0bc83cb571cd1c50ba6f3e8a78ef1346?s=200&r=pg&d=mm"

    def test_deterministic(self):
        assert avatar_url("ada@acme.io") == avatar_url("ada@acme.io")

    def test_differs_per_email(self):
        assert avatar_url("ada@acme.io") != avatar_url("bob@acme.io")
