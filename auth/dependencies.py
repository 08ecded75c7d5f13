"""
auth/dependencies.py -- FastAPI Depends() helper for bearer token verification.

Two token transports are checked in priority order:
  1. x-auth-token header -- the raw token, as issued by /register and /login.
  2. Authorization: Bearer <token> header -- standard API client transport.

Per request the check runs NoToken -> TokenPresent -> {Valid, Invalid}:
  no token              -> Unauthorized("No token, authorization denied")
  token fails to verify -> Unauthorized("Token is not valid")
  token verifies        -> user id stored on request.state.user_id

Verification is stateless: the store is not consulted, so a token for a user
that has since vanished still verifies. The identity workflow deals with that.

Layer rule: auth/dependencies.py may import from fastapi (for Request)
because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.errors import Unauthorized
from auth.tokens import decode_access_token

TOKEN_HEADER = "x-auth-token"

NO_TOKEN = "No token, authorization denied"
TOKEN_INVALID = "Token is not valid"


def extract_token(request: Request) -> str | None:
    """Return the raw token from the request headers, or None if absent."""
    token = request.headers.get(TOKEN_HEADER, "").strip()
    if token:
        return token

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_user_id(request: Request) -> str:
    """Require a valid token. Raises Unauthorized otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user_id: str = Depends(get_current_user_id)): ...
    """
    token = extract_token(request)
    if token is None:
        raise Unauthorized(NO_TOKEN)

    payload = decode_access_token(token, request.app.state.settings)
    if payload is None:
        raise Unauthorized(TOKEN_INVALID)

    user_id: str = payload["user"]["id"]
    request.state.user_id = user_id
    return user_id
