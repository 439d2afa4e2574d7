"""
In-process user store.

Rows live in a dict keyed by id with hash indexes on username and email.
Writes run under a single asyncio.Lock and re-check uniqueness inside it, which
gives the same guarantee as the table constraints in the postgres store.
Every method returns copies so callers never hold a reference to stored state.
"""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timezone

from .entity import User
from .errors import UserConflictError, UserNotFoundError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryUserStore:
    def __init__(self) -> None:
        self._rows: dict[int, User] = {}
        self._by_username: dict[str, int] = {}
        self._by_email: dict[str, int] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def _check_unique(self, user: User) -> None:
        owner = self._by_username.get(user.username)
        if owner is not None and owner != user.id:
            raise UserConflictError("username", user.username)
        owner = self._by_email.get(user.email)
        if owner is not None and owner != user.id:
            raise UserConflictError("email", user.email)

    async def save(self, user: User) -> User:
        async with self._lock:
            now = _utc_now()
            if user.id is None:
                self._check_unique(user)
                stored = user.model_copy(update={"id": next(self._ids), "created_at": now, "updated_at": now})
            else:
                current = self._rows.get(user.id)
                if current is None:
                    raise UserNotFoundError(user.id)
                self._check_unique(user)
                stored = user.model_copy(update={"created_at": current.created_at, "updated_at": now})
                del self._by_username[current.username]
                del self._by_email[current.email]

            self._rows[stored.id] = stored
            self._by_username[stored.username] = stored.id
            self._by_email[stored.email] = stored.id
            return stored.model_copy()

    async def find_by_id(self, user_id: int) -> User | None:
        row = self._rows.get(user_id)
        return row.model_copy() if row is not None else None

    async def find_by_username(self, username: str) -> User | None:
        user_id = self._by_username.get(username)
        return await self.find_by_id(user_id) if user_id is not None else None

    async def find_by_email(self, email: str) -> User | None:
        user_id = self._by_email.get(email)
        return await self.find_by_id(user_id) if user_id is not None else None

    def _scan(self, predicate) -> list[User]:
        return [row.model_copy() for _, row in sorted(self._rows.items()) if predicate(row)]

    async def find_all(self) -> list[User]:
        return self._scan(lambda row: True)

    async def find_by_active(self, active: bool) -> list[User]:
        return self._scan(lambda row: row.active == bool(active))

    async def find_by_first_name_containing(self, fragment: str | None) -> list[User]:
        needle = (fragment or "").lower()
        return self._scan(lambda row: row.first_name is not None and needle in row.first_name.lower())

    async def find_by_username_or_email(self, username: str, email: str) -> list[User]:
        return self._scan(lambda row: row.username == username or row.email == email)

    async def exists_by_username(self, username: str) -> bool:
        return username in self._by_username

    async def exists_by_email(self, email: str) -> bool:
        return email in self._by_email

    async def exists_by_id(self, user_id: int) -> bool:
        return user_id in self._rows

    async def count_by_active(self, active: bool) -> int:
        return sum(1 for row in self._rows.values() if row.active == bool(active))

    async def delete_by_id(self, user_id: int) -> bool:
        async with self._lock:
            row = self._rows.pop(user_id, None)
            if row is None:
                return False
            del self._by_username[row.username]
            del self._by_email[row.email]
            return True
