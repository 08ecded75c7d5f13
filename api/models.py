"""
API request and response models for the user REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclass in auth/models.py, which owns the
internal domain representation. Route handlers map between the two.

Request models only enforce types. Field rules (name required, email syntax,
password length) live in auth/validation.py so every violation is reported
together, in one 400 response, whether it is a missing field or a short one.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register. Missing fields arrive as ""."""

    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: str = ""
    password: str = ""


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """Success body for /register and /login. The user object is never returned."""

    model_config = ConfigDict(frozen=True)

    token: str


class UserProfile(BaseModel):
    """Response for GET /me. Has no password field by construction."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    avatar: str
    created_at: Optional[str] = None


class ErrorItem(BaseModel):
    """One entry of a 400 error list."""

    model_config = ConfigDict(frozen=True)

    msg: str
    param: Optional[str] = None
    location: Optional[str] = None


class ErrorsResponse(BaseModel):
    """400 envelope: every violation, not just the first."""

    model_config = ConfigDict(frozen=True)

    errors: list[ErrorItem]


class MessageResponse(BaseModel):
    """Single-message envelope used for 401, 404 and 429."""

    model_config = ConfigDict(frozen=True)

    msg: str


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
