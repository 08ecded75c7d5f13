"""
asgi.py -- ASGI entry point for the user API.

Run with:  uvicorn asgi:app --reload
           user-auth-api             (binds HOST/PORT from settings)
"""

import uvicorn

from api.main import app
from core.config import get_settings

__all__ = ["app", "main"]


def main() -> None:
    """Start uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
