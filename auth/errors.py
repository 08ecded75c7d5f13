"""
auth/errors.py -- Error taxonomy for the authentication workflows.

Every failure a workflow can report is one of these kinds. The HTTP layer
(api/main.py) maps them to status codes and response bodies; nothing else
crosses the HTTP boundary.

  InputValidationError  400  all field violations, not just the first
  DuplicateIdentity     400  email already registered
  InvalidCredentials    400  unknown email OR wrong password (same message)
  Unauthorized          401  missing or invalid bearer token
  InternalFailure       500  store / hasher / signer failure, opaque to client

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One input violation, shaped like an express-validator error entry."""

    msg: str
    param: str
    location: str = "body"


class AuthError(Exception):
    """Base class. status_code is the HTTP status the API layer responds with."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(AuthError):
    status_code = 400

    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__("; ".join(e.msg for e in errors))
        self.errors = errors


class DuplicateIdentity(AuthError):
    status_code = 400


class InvalidCredentials(AuthError):
    status_code = 400


class Unauthorized(AuthError):
    status_code = 401


class InternalFailure(AuthError):
    status_code = 500
