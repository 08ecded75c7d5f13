"""
auth/tokens.py -- Password hashing and JWT issue / verification.

Security design decisions:
  Passwords: bcrypt used directly (no passlib wrapper), cost factor 10, fresh
       random salt per call. The same plaintext hashes differently every time
       and checkpw() still accepts all of them. The _DUMMY_HASH constant
       enables timing equalization in the login workflow so response time does
       not reveal whether an email is registered.

  JWT: python-jose with HS256. Tokens carry {"user": {"id": ...}} plus iat and
       exp. Verification returns None on any failure -- the dependency layer
       turns that into Unauthorized.

  Secret: never read at module load. Every token function takes the Settings
       instance explicitly, so the app and tests decide which secret signs.

Layer rule: no imports from api/. Import from core/ is allowed for typing only.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

if TYPE_CHECKING:
    from core.config import Settings

logger = logging.getLogger("userauth.auth")

_ALGORITHM = "HS256"
_BCRYPT_ROUNDS = 10

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


# bcrypt only reads the first 72 bytes of a password; bcrypt 5.x raises
# ValueError instead of ignoring the rest. Long passwords are cut here, at the
# byte level, so they hash and verify the same way on every bcrypt release.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    Only the first 72 UTF-8 bytes take part, so two passwords sharing that
    prefix hash alike.
    """
    return bcrypt.hashpw(_password_bytes(plain), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


# Computed once at module load so the first login against an unknown email is
# not measurably slower than later ones.
_DUMMY_HASH: str = hash_password("userauth_timing_dummy")


def burn_password_check(plain: str) -> None:
    """Run a bcrypt comparison that always fails, for timing equalization."""
    verify_password(plain, _DUMMY_HASH)


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user_id: str, settings: Settings, issued_at: datetime | None = None) -> str:
    """Encode a signed JWT carrying the user id claim.

    Args:
        user_id:   Store-assigned user id.
        settings:  Supplies jwt_secret and token_expire_seconds.
        issued_at: Issue instant; defaults to now (UTC). The token expires
                   token_expire_seconds after this instant.

    Raises JWTError if signing fails.
    """
    now = issued_at or datetime.now(timezone.utc)
    payload = {
        "user": {"id": user_id},
        "iat": now,
        "exp": now + timedelta(seconds=settings.token_expire_seconds),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict | None:
    """Decode and verify a JWT. Returns the payload dict or None on any failure.

    Failure covers bad signature, expiry, malformed token and a payload that
    lacks the user.id claim.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[_ALGORITHM])
    except JWTError as exc:
        logger.debug("Token rejected: %s", exc)
        return None
    user = payload.get("user")
    if not isinstance(user, dict) or not user.get("id"):
        return None
    return payload
