"""
auth/avatar.py -- Gravatar URL derivation.

The avatar is a pure function of the email: no network call is made. The
image service resolves the hash when a client fetches the URL, falling back
to the "mystery person" placeholder for unknown emails.
"""

from __future__ import annotations

import hashlib
from urllib.parse import urlencode

_GRAVATAR_BASE = "https://www.gravatar.com/avatar/"

# size 200px, PG rating ceiling, "mystery person" default image
_AVATAR_PARAMS = {"s": "200", "r": "pg", "d": "mm"}


def avatar_url(email: str) -> str:
    """Return the Gravatar URL for email.

    Gravatar keys on the MD5 of the trimmed, lowercased address, so differently
    cased spellings of one email share an avatar.
    """
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()  # noqa: S324 # nosec B324 -- Gravatar's key format
    return f"{_GRAVATAR_BASE}{digest}?{urlencode(_AVATAR_PARAMS)}"
