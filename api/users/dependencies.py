"""
Store selection for the users feature.

USER_STORE_BACKEND:
- postgres (default): raw SQL over the shared asyncpg pool
- memory: one in-process store per worker, lost on restart
"""

from __future__ import annotations

import os

from .memory import InMemoryUserStore
from .repository import PostgresUserStore, UserStore

BACKENDS = ("postgres", "memory")

_memory_store: InMemoryUserStore | None = None


def user_store_backend() -> str:
    backend = os.environ.get("USER_STORE_BACKEND", "postgres").strip().lower() or "postgres"
    if backend not in BACKENDS:
        raise RuntimeError(f"Unsupported USER_STORE_BACKEND: {backend!r}. Use one of {BACKENDS}.")
    return backend


def reset_memory_store() -> None:
    global _memory_store
    _memory_store = None


def get_user_store() -> UserStore:
    global _memory_store
    if user_store_backend() == "memory":
        if _memory_store is None:
            _memory_store = InMemoryUserStore()
        return _memory_store
    return PostgresUserStore()
