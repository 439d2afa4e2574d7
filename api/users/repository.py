"""
User persistence (raw SQL).

`UserStore` is the contract the directory service depends on.
`PostgresUserStore` implements it over the shared asyncpg pool; uniqueness of
username/email is enforced by named table constraints, so concurrent creates
cannot both succeed even though the service checks before saving.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import asyncpg

from core import db

from .entity import User
from .errors import UserConflictError, UserNotFoundError

logger = logging.getLogger(__name__)

USERNAME_CONSTRAINT = "users_username_key"
EMAIL_CONSTRAINT = "users_email_key"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS users (
  id BIGSERIAL PRIMARY KEY,
  username VARCHAR(50) NOT NULL,
  email VARCHAR(320) NOT NULL,
  password TEXT,
  first_name VARCHAR(100),
  last_name VARCHAR(100),
  active BOOLEAN NOT NULL DEFAULT true,
  created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
  updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
  CONSTRAINT {USERNAME_CONSTRAINT} UNIQUE (username),
  CONSTRAINT {EMAIL_CONSTRAINT} UNIQUE (email)
);
CREATE INDEX IF NOT EXISTS users_active_idx ON users (active);
"""

_COLUMNS = "id, username, email, password, first_name, last_name, active, created_at, updated_at"


class UserStore(Protocol):
    async def save(self, user: User) -> User: ...

    async def find_by_id(self, user_id: int) -> User | None: ...

    async def find_by_username(self, username: str) -> User | None: ...

    async def find_by_email(self, email: str) -> User | None: ...

    async def find_all(self) -> list[User]: ...

    async def find_by_active(self, active: bool) -> list[User]: ...

    async def find_by_first_name_containing(self, fragment: str | None) -> list[User]: ...

    async def find_by_username_or_email(self, username: str, email: str) -> list[User]: ...

    async def exists_by_username(self, username: str) -> bool: ...

    async def exists_by_email(self, email: str) -> bool: ...

    async def exists_by_id(self, user_id: int) -> bool: ...

    async def count_by_active(self, active: bool) -> int: ...

    async def delete_by_id(self, user_id: int) -> bool: ...


async def ensure_schema() -> None:
    """
    Create the users table if it is missing. Bootstrap only; no migrations.
    """
    await db.execute(SCHEMA_SQL)


def _row_to_user(row: dict[str, Any]) -> User:
    return User.model_validate(row)


def _conflict_from(exc: asyncpg.UniqueViolationError, user: User) -> UserConflictError:
    constraint = getattr(exc, "constraint_name", None) or ""
    if constraint == EMAIL_CONSTRAINT:
        return UserConflictError("email", user.email)
    return UserConflictError("username", user.username)


class PostgresUserStore:
    async def save(self, user: User) -> User:
        try:
            if user.id is None:
                row = await db.fetch_one(
                    f"""
                    INSERT INTO users (username, email, password, first_name, last_name, active)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING {_COLUMNS}
                    """,
                    user.username,
                    user.email,
                    user.password,
                    user.first_name,
                    user.last_name,
                    user.active,
                )
                if row is None:
                    raise RuntimeError("Failed to insert user.")
            else:
                row = await db.fetch_one(
                    f"""
                    UPDATE users
                    SET username = $2,
                        email = $3,
                        password = $4,
                        first_name = $5,
                        last_name = $6,
                        active = $7,
                        updated_at = now()
                    WHERE id = $1
                    RETURNING {_COLUMNS}
                    """,
                    user.id,
                    user.username,
                    user.email,
                    user.password,
                    user.first_name,
                    user.last_name,
                    user.active,
                )
                if row is None:
                    raise UserNotFoundError(user.id)
        except asyncpg.UniqueViolationError as exc:
            logger.info("user_unique_violation constraint=%s", getattr(exc, "constraint_name", None))
            raise _conflict_from(exc, user) from exc
        return _row_to_user(row)

    async def find_by_id(self, user_id: int) -> User | None:
        row = await db.fetch_one(f"SELECT {_COLUMNS} FROM users WHERE id = $1", user_id)
        return _row_to_user(row) if row is not None else None

    async def find_by_username(self, username: str) -> User | None:
        row = await db.fetch_one(f"SELECT {_COLUMNS} FROM users WHERE username = $1", username)
        return _row_to_user(row) if row is not None else None

    async def find_by_email(self, email: str) -> User | None:
        row = await db.fetch_one(f"SELECT {_COLUMNS} FROM users WHERE email = $1", email)
        return _row_to_user(row) if row is not None else None

    async def find_all(self) -> list[User]:
        rows = await db.fetch_all(f"SELECT {_COLUMNS} FROM users ORDER BY id ASC")
        return [_row_to_user(r) for r in rows]

    async def find_by_active(self, active: bool) -> list[User]:
        rows = await db.fetch_all(
            f"SELECT {_COLUMNS} FROM users WHERE active = $1 ORDER BY id ASC",
            active,
        )
        return [_row_to_user(r) for r in rows]

    async def find_by_first_name_containing(self, fragment: str | None) -> list[User]:
        # strpos keeps the fragment literal (no LIKE wildcards to escape);
        # strpos(x, '') = 1, so an empty fragment matches every named row.
        rows = await db.fetch_all(
            f"""
            SELECT {_COLUMNS}
            FROM users
            WHERE first_name IS NOT NULL
              AND strpos(lower(first_name), lower($1)) > 0
            ORDER BY id ASC
            """,
            fragment or "",
        )
        return [_row_to_user(r) for r in rows]

    async def find_by_username_or_email(self, username: str, email: str) -> list[User]:
        rows = await db.fetch_all(
            f"""
            SELECT {_COLUMNS}
            FROM users
            WHERE username = $1
               OR email = $2
            ORDER BY id ASC
            """,
            username,
            email,
        )
        return [_row_to_user(r) for r in rows]

    async def exists_by_username(self, username: str) -> bool:
        return bool(await db.fetch_val("SELECT EXISTS (SELECT 1 FROM users WHERE username = $1)", username))

    async def exists_by_email(self, email: str) -> bool:
        return bool(await db.fetch_val("SELECT EXISTS (SELECT 1 FROM users WHERE email = $1)", email))

    async def exists_by_id(self, user_id: int) -> bool:
        return bool(await db.fetch_val("SELECT EXISTS (SELECT 1 FROM users WHERE id = $1)", user_id))

    async def count_by_active(self, active: bool) -> int:
        return int(await db.fetch_val("SELECT count(*) FROM users WHERE active = $1", active) or 0)

    async def delete_by_id(self, user_id: int) -> bool:
        row = await db.fetch_one("DELETE FROM users WHERE id = $1 RETURNING id", user_id)
        return row is not None
