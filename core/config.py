"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads happen here. No module should call os.getenv()
or os.environ.get() directly -- the Settings object is built once at startup,
stored on app.state.settings and passed explicitly to the code that needs it
(token issue/verify, store construction, server bootstrap).

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  Frozen BaseSettings: the instance is immutable after construction, so no
      request can change the signing secret or connection string at runtime.
      There is no hot-reload; restart the process to pick up new values.

  Sources: environment variables, then .env, then config/index.env (the
      legacy deployment location). Field names map to env var
      names (jwt_secret -> JWT_SECRET, database_url -> DATABASE_URL).

Security notes:
  JWT_SECRET shorter than 32 chars is rejected outright. HS256 signing relies
  on key entropy.

  In production mode (DEBUG not set or false), a missing JWT_SECRET is a hard
  startup failure. In debug mode a random secret is generated with a warning;
  tokens then do not survive a restart.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("userauth.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'userauth.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and env files.

    All fields have defaults so Settings(debug=True) can be instantiated in
    test environments without a real env file.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "config/index.env"),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    # Must stay declared before jwt_secret: the secret validator reads it.
    debug: bool = False
    # Empty string is the sentinel for "not configured".
    jwt_secret: str = Field(default="", validate_default=True)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    # 100 hours. Development value; production deployments should shrink it.
    token_expire_seconds: int = Field(default=360000, gt=0)

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 5000

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, value: str, info: ValidationInfo) -> str:
        """Enforce the signing secret policy.

        Debug mode: auto-generate a random secret with a warning.
        Production mode: refuse to start without JWT_SECRET.
        Both modes: reject secrets shorter than 32 characters.
        """
        if not value:
            if info.data.get("debug"):
                logger.warning("Using auto-generated JWT_SECRET. Issued tokens will not survive a restart.")
                return secrets.token_hex(32)
            raise ValueError(
                "JWT_SECRET is required in production mode. "
                "Set JWT_SECRET in your environment or env file. "
                "To run in development mode, set DEBUG=true."
            )
        if len(value) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: build Settings(...) directly and hand it to the app through the
    patched lifespan, or call get_settings.cache_clear() after changing env.
    """
    return Settings()
