"""
api/limiter.py -- Shared slowapi rate limiter instance.

Imported by api/main.py (to mount as middleware) and api/routes/auth.py (to
apply per-route limits with @limiter.limit()). One shared instance means all
routes share the same in-memory counter store.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Brute-force ceiling for the credential endpoints, per client IP.
CREDENTIALS_RATE_LIMIT = "10/minute"

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")
