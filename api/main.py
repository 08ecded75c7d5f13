"""
api/main.py -- FastAPI application for the user registration / login API.

Run with:      uvicorn asgi:app --reload
               user-auth-api            (console script, see asgi.main)

Middleware stack (outermost to innermost):
  1. CORSMiddleware    -- CORS headers for any origin, x-auth-token allowed,
                          also on 4xx responses raised by route handlers
  2. SlowAPIMiddleware -- enforces per-route rate limits from api.limiter
  3. log_requests      -- method, path, status, latency, client host

Lifespan builds the Settings singleton and the UserStore at startup, puts
both on app.state, and disposes of the store at shutdown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorItem, ErrorsResponse, HealthResponse, MessageResponse
from api.routes.auth import router as auth_router
from auth.dependencies import TOKEN_HEADER
from auth.errors import AuthError, InputValidationError, InternalFailure, Unauthorized
from auth.store import UserStore
from auth.workflows import SERVER_ERROR
from core.config import get_settings

VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("userauth.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build configuration and the store once; tear the store down on exit.

    Settings are resolved here rather than at import so that importing the
    app never requires JWT_SECRET to be set.
    """
    settings = get_settings()
    app.state.settings = settings
    app.state.user_store = UserStore(settings.database_url)
    logger.info("User API starting up (debug=%s)", settings.debug)

    yield

    app.state.user_store.close()
    logger.info("User API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="User Auth API",
    description="User registration and login with bcrypt password hashing and JWT bearer tokens.",
    version=VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
#
# Starlette wraps middleware in reverse registration order: the LAST one
# registered is the outermost. Register innermost first so the request meets
# CORS -> SlowAPI -> request logging.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", TOKEN_HEADER],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Response shapes:
#   400 {"errors": [{"msg", "param", "location"}, ...]}
#   401 / 404 / 429 {"msg": ...}
#   500 plain text "Server error" -- no internals reach the client
# ---------------------------------------------------------------------------


def _server_error() -> PlainTextResponse:
    return PlainTextResponse(SERVER_ERROR, status_code=500)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    """Map workflow error kinds onto HTTP responses."""
    if isinstance(exc, InternalFailure):
        return _server_error()
    if isinstance(exc, Unauthorized):
        return JSONResponse(status_code=exc.status_code, content=MessageResponse(msg=exc.message).model_dump())
    if isinstance(exc, InputValidationError):
        items = [ErrorItem(msg=e.msg, param=e.param, location=e.location) for e in exc.errors]
    else:
        items = [ErrorItem(msg=exc.message)]
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorsResponse(errors=items).model_dump(exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one entry per problem for malformed or mistyped bodies."""
    items = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        items.append(
            ErrorItem(
                msg=err.get("msg", "Invalid value"),
                param=loc[-1] if len(loc) > 1 else None,
                location=loc[0] if loc else None,
            )
        )
    return JSONResponse(status_code=400, content=ErrorsResponse(errors=items).model_dump(exclude_none=True))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 when a client exceeds the credential endpoint limit."""
    retry_after = int(getattr(exc, "retry_after", 60))
    response = JSONResponse(status_code=429, content=MessageResponse(msg="Too many requests").model_dump())
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """404 for unmatched routes; other framework HTTP errors keep their status."""
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content=MessageResponse(msg="Page Not Found").model_dump())
    return JSONResponse(
        status_code=exc.status_code,
        content=MessageResponse(msg=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Catch-all for unexpected server errors.

    The exception is logged server-side only; the client gets the same opaque
    text as any other internal failure.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _server_error()


# ---------------------------------------------------------------------------
# Liveness endpoints
# ---------------------------------------------------------------------------


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def home() -> str:
    return "API running"


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=VERSION)
