"""
User record as held by the stores.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    # None until the first successful save.
    id: int | None = None
    username: str
    email: str
    # Opaque; stored as given.
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
