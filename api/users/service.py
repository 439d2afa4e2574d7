"""
User directory business logic.

Every mutation of a user goes through this module. Each operation re-reads from
the store before changing anything; nothing is cached between calls.

Failures:
- UserConflictError: username/email already taken
- UserNotFoundError: update/delete/activate/deactivate target is missing
Plain lookups return None on a miss instead of raising.
"""

from __future__ import annotations

import logging

from .entity import User
from .errors import UserConflictError, UserNotFoundError
from .repository import UserStore

logger = logging.getLogger(__name__)


async def create_user(store: UserStore, candidate: User) -> User:
    # Username is checked first so the reported conflict is deterministic.
    if await store.exists_by_username(candidate.username):
        logger.info("user_create_conflict field=username username=%s", candidate.username)
        raise UserConflictError("username", candidate.username)
    if await store.exists_by_email(candidate.email):
        logger.info("user_create_conflict field=email email=%s", candidate.email)
        raise UserConflictError("email", candidate.email)

    created = await store.save(candidate)
    logger.info("user_created id=%s username=%s", created.id, created.username)
    return created


async def get_user_by_id(store: UserStore, user_id: int) -> User | None:
    return await store.find_by_id(user_id)


async def get_user_by_username(store: UserStore, username: str) -> User | None:
    return await store.find_by_username(username)


async def get_user_by_email(store: UserStore, email: str) -> User | None:
    return await store.find_by_email(email)


async def get_all_users(store: UserStore) -> list[User]:
    return await store.find_all()


async def get_active_users(store: UserStore) -> list[User]:
    return await store.find_by_active(True)


async def search_users_by_first_name(store: UserStore, fragment: str | None) -> list[User]:
    """
    Case-insensitive substring match on first name.

    An empty (or None) fragment matches every user that has a first name;
    users without one never match.
    """
    return await store.find_by_first_name_containing(fragment or "")


async def _require_user(store: UserStore, user_id: int) -> User:
    user = await store.find_by_id(user_id)
    if user is None:
        logger.info("user_not_found id=%s", user_id)
        raise UserNotFoundError(user_id)
    return user


async def update_user(store: UserStore, user_id: int, replacement: User) -> User:
    """
    Overwrite username, email, names and active flag of an existing user.

    id, password and created_at are kept. Uniqueness is not pre-checked here;
    a collision with another user surfaces from the store as UserConflictError.
    """
    user = await _require_user(store, user_id)
    user = user.model_copy(
        update={
            "username": replacement.username,
            "email": replacement.email,
            "first_name": replacement.first_name,
            "last_name": replacement.last_name,
            "active": replacement.active,
        }
    )
    updated = await store.save(user)
    logger.info("user_updated id=%s", updated.id)
    return updated


async def delete_user(store: UserStore, user_id: int) -> None:
    if not await store.exists_by_id(user_id):
        logger.info("user_not_found id=%s", user_id)
        raise UserNotFoundError(user_id)
    await store.delete_by_id(user_id)
    logger.info("user_deleted id=%s", user_id)


async def _set_active(store: UserStore, user_id: int, active: bool) -> User:
    user = await _require_user(store, user_id)
    updated = await store.save(user.model_copy(update={"active": active}))
    logger.info("user_status_changed id=%s active=%s", updated.id, updated.active)
    return updated


async def activate_user(store: UserStore, user_id: int) -> User:
    return await _set_active(store, user_id, True)


async def deactivate_user(store: UserStore, user_id: int) -> User:
    return await _set_active(store, user_id, False)


async def get_user_count_by_status(store: UserStore, active: bool) -> int:
    return await store.count_by_active(active)
