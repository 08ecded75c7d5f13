"""
api/routes/auth.py -- Registration, login and identity REST endpoints.

Routes:
  POST /register  -- create account; returns {token}
  POST /login     -- password login; returns {token}
  GET  /me        -- current user's profile (requires token)

/register and /login take their fields either as a JSON object or as an
application/x-www-form-urlencoded (or multipart) form. Both shapes go through
the same pydantic model, and problems with either are reported as 400s by the
RequestValidationError handler in api/main.py.

Handlers are plain `def` so FastAPI runs them in its thread pool: bcrypt and
store calls block a worker thread, never the event loop.

Failures are raised as auth.errors kinds and turned into responses by the
AuthError handler in api/main.py.

Security:
  POST /register and POST /login are rate-limited per client IP.
  Cache-Control: no-store on every response that carries a token.
"""

import json

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from api.limiter import CREDENTIALS_RATE_LIMIT, limiter
from api.models import LoginRequest, RegisterRequest, TokenResponse, UserProfile
from auth.dependencies import get_current_user_id
from auth.workflows import get_identity, login_user, register_user

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# Auth policy:
# - POST /register: public
# - POST /login:    public
# - GET  /me:       requires token (get_current_user_id)
router = APIRouter()


def credentials_body(model: type[BaseModel]):
    """Build a dependency that reads model from a JSON or form-encoded body.

    An empty body counts as an empty object, so missing fields reach the
    workflow validation as "" and are reported with every other violation.
    """

    async def parse(request: Request) -> BaseModel:
        content_type = request.headers.get("content-type", "").lower()
        if content_type.startswith(_FORM_CONTENT_TYPES):
            data = dict(await request.form())
        else:
            raw = await request.body()
            try:
                data = json.loads(raw) if raw.strip() else {}
            except ValueError as exc:
                raise RequestValidationError(
                    [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": None}]
                ) from exc
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise RequestValidationError([{**err, "loc": ("body", *err["loc"])} for err in exc.errors()]) from exc

    return parse


@router.post("/register", response_model=TokenResponse)
@limiter.limit(CREDENTIALS_RATE_LIMIT)
def register(
    request: Request,
    response: Response,
    body: RegisterRequest = Depends(credentials_body(RegisterRequest)),
) -> TokenResponse:
    """Register a user and return a token for the new account."""
    token = register_user(
        request.app.state.user_store,
        request.app.state.settings,
        name=body.name,
        email=body.email,
        password=body.password,
    )
    response.headers["Cache-Control"] = "no-store"
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(CREDENTIALS_RATE_LIMIT)
def login(
    request: Request,
    response: Response,
    body: LoginRequest = Depends(credentials_body(LoginRequest)),
) -> TokenResponse:
    """Authenticate with email and password.

    Unknown email and wrong password produce the same 400 body.
    """
    token = login_user(
        request.app.state.user_store,
        request.app.state.settings,
        email=body.email,
        password=body.password,
    )
    response.headers["Cache-Control"] = "no-store"
    return TokenResponse(token=token)


@router.get("/me", response_model=UserProfile)
def me(request: Request, user_id: str = Depends(get_current_user_id)) -> UserProfile:
    """Return the profile of the token holder, without the password hash."""
    return UserProfile(**get_identity(request.app.state.user_store, user_id))
