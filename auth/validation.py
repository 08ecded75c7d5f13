"""
auth/validation.py -- Input checks for the register and login workflows.

Each check appends a FieldError instead of raising, so a request with several
bad fields gets every violation back in one response.

Registration and login are deliberately asymmetric: registration requires a
password of at least 6 characters, login only requires one to be present.

Email syntax is checked with email-validator (syntax only, no DNS lookup).
The .test special-use domain is accepted; .local, .localhost and .invalid
are still refused.

A name made only of whitespace counts as missing.
"""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email

from auth.errors import FieldError, InputValidationError

MIN_PASSWORD_LENGTH = 6

NAME_REQUIRED = "Name is required"
EMAIL_INVALID = "Please include a valid email"
PASSWORD_TOO_SHORT = f"Please enter a password with {MIN_PASSWORD_LENGTH} or more characters"
PASSWORD_REQUIRED = "Password is required"


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False, test_environment=True)
    except EmailNotValidError:
        return False
    return True


def validate_registration(name: str, email: str, password: str) -> None:
    """Raise InputValidationError listing every violation, or return None."""
    errors: list[FieldError] = []
    if not name.strip():
        errors.append(FieldError(msg=NAME_REQUIRED, param="name"))
    if not is_valid_email(email):
        errors.append(FieldError(msg=EMAIL_INVALID, param="email"))
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(FieldError(msg=PASSWORD_TOO_SHORT, param="password"))
    if errors:
        raise InputValidationError(errors)


def validate_login(email: str, password: str) -> None:
    """Raise InputValidationError listing every violation, or return None."""
    errors: list[FieldError] = []
    if not is_valid_email(email):
        errors.append(FieldError(msg=EMAIL_INVALID, param="email"))
    if not password:
        errors.append(FieldError(msg=PASSWORD_REQUIRED, param="password"))
    if errors:
        raise InputValidationError(errors)
