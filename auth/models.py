"""
auth/models.py -- Domain dataclass for the User entity.

Pattern: Data class (pure data container, zero logic). The store maps rows to
this shape; workflows and routes decide what leaves the process.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """One registered account.

    id and created_at are None until the store persists the record.
    password_hash is the bcrypt output and must never be returned by a read
    path -- see workflows.get_identity().
    """

    name: str
    email: str
    password_hash: str
    avatar: str
    id: str | None = None
    created_at: str | None = None
