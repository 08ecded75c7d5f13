"""
auth/workflows.py -- Registration, login and identity query.

Each workflow is a plain synchronous function taking its collaborators
(store, settings) explicitly. Route handlers are `def` functions, so FastAPI
runs them in its worker thread pool; slow bcrypt and store calls never block
the event loop.

Error policy: collaborator failures are caught here and re-raised as one of
the kinds in auth/errors.py. The original exception is logged with its
traceback and chained, never sent to the client.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import TYPE_CHECKING

from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.avatar import avatar_url
from auth.errors import DuplicateIdentity, InternalFailure, InvalidCredentials
from auth.models import User
from auth.tokens import burn_password_check, create_access_token, hash_password, verify_password
from auth.validation import validate_login, validate_registration

if TYPE_CHECKING:
    from auth.store import UserStore
    from core.config import Settings

logger = logging.getLogger("userauth.workflows")

USER_EXISTS = "User already exists"
BAD_CREDENTIALS = "Invalid credentials"
SERVER_ERROR = "Server error"


def register_user(store: UserStore, settings: Settings, name: str, email: str, password: str) -> str:
    """Create an account and return a token for it.

    Raises InputValidationError, DuplicateIdentity or InternalFailure.
    """
    validate_registration(name, email, password)

    try:
        if store.get_by_email(email) is not None:
            raise DuplicateIdentity(USER_EXISTS)

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            avatar=avatar_url(email),
        )
        try:
            user_id = store.create_user(user)
        except IntegrityError as exc:
            # A concurrent registration won the race between lookup and insert.
            logger.info("Duplicate registration for %s rejected by store constraint", email)
            raise DuplicateIdentity(USER_EXISTS) from exc

        token = create_access_token(user_id, settings)
    except (SQLAlchemyError, JWTError, ValueError) as exc:
        logger.exception("Registration failed for %s", email)
        raise InternalFailure(SERVER_ERROR) from exc

    logger.info("Registered user %s", user_id)
    return token


def login_user(store: UserStore, settings: Settings, email: str, password: str) -> str:
    """Check credentials and return a fresh token.

    Unknown email and wrong password raise the same InvalidCredentials
    message. bcrypt runs in both cases so timing does not tell them apart.
    """
    validate_login(email, password)

    try:
        user = store.get_by_email(email)
    except SQLAlchemyError as exc:
        logger.exception("Login lookup failed")
        raise InternalFailure(SERVER_ERROR) from exc

    if user is None:
        burn_password_check(password)
        raise InvalidCredentials(BAD_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        raise InvalidCredentials(BAD_CREDENTIALS)

    try:
        token = create_access_token(user.id, settings)
    except JWTError as exc:
        logger.exception("Token signing failed for %s", user.id)
        raise InternalFailure(SERVER_ERROR) from exc

    logger.info("Login: %s", user.id)
    return token


def get_identity(store: UserStore, user_id: str) -> dict:
    """Return the profile of an already-verified user id, without password_hash.

    A token can outlive its user; an id that no longer resolves is reported
    as InternalFailure.
    """
    try:
        user = store.get_by_id(user_id)
    except SQLAlchemyError as exc:
        logger.exception("Identity lookup failed for %s", user_id)
        raise InternalFailure(SERVER_ERROR) from exc

    if user is None:
        logger.error("Verified token references missing user %s", user_id)
        raise InternalFailure(SERVER_ERROR)

    profile = asdict(user)
    del profile["password_hash"]
    return profile
