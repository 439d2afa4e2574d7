"""Shared fixtures for the user directory tests."""

import pytest
from fastapi.testclient import TestClient

from users.dependencies import get_user_store, reset_memory_store
from users.entity import User
from users.memory import InMemoryUserStore


@pytest.fixture
def store():
    """Fresh in-memory store per test."""
    return InMemoryUserStore()


@pytest.fixture
def make_user():
    """Build an unsaved user with sensible defaults."""

    def _make(username="testuser", email="test@example.com", **overrides):
        fields = {
            "username": username,
            "email": email,
            "password": "password123",
            "first_name": "Test",
            "last_name": "User",
            "active": True,
        }
        fields.update(overrides)
        return User(**fields)

    return _make


@pytest.fixture(name="client")
def client_fixture(store, monkeypatch):
    """Test client wired to the in-memory store; no database needed."""
    monkeypatch.setenv("USER_STORE_BACKEND", "memory")
    reset_memory_store()

    from main import app

    app.dependency_overrides[get_user_store] = lambda: store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    reset_memory_store()
