"""Directory service interactions with a mocked store."""

from unittest.mock import AsyncMock, call

import pytest

from users import service
from users.entity import User
from users.errors import UserConflictError, UserNotFoundError
from users.repository import PostgresUserStore


@pytest.fixture
def store():
    return AsyncMock(spec=PostgresUserStore)


@pytest.fixture
def test_user():
    return User(
        id=1,
        username="testuser",
        email="test@example.com",
        password="password123",
        first_name="Test",
        last_name="User",
        active=True,
    )


class TestCreate:
    @pytest.mark.asyncio
    async def test_checks_username_then_email_then_saves(self, store, test_user):
        store.exists_by_username.return_value = False
        store.exists_by_email.return_value = False
        store.save.return_value = test_user
        candidate = test_user.model_copy(update={"id": None})

        result = await service.create_user(store, candidate)

        assert result == test_user
        assert store.mock_calls == [
            call.exists_by_username("testuser"),
            call.exists_by_email("test@example.com"),
            call.save(candidate),
        ]

    @pytest.mark.asyncio
    async def test_username_taken_skips_email_check_and_save(self, store, test_user):
        store.exists_by_username.return_value = True

        with pytest.raises(UserConflictError):
            await service.create_user(store, test_user)

        store.exists_by_username.assert_awaited_once_with("testuser")
        store.exists_by_email.assert_not_awaited()
        store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_email_taken_never_saves(self, store, test_user):
        store.exists_by_username.return_value = False
        store.exists_by_email.return_value = True

        with pytest.raises(UserConflictError) as exc_info:
            await service.create_user(store, test_user)

        assert exc_info.value.field == "email"
        store.exists_by_email.assert_awaited_once_with("test@example.com")
        store.save.assert_not_awaited()


class TestUpdate:
    @pytest.mark.asyncio
    async def test_saves_merged_record_without_uniqueness_checks(self, store, test_user):
        store.find_by_id.return_value = test_user
        store.save.side_effect = lambda user: user
        replacement = User(username="updated", email="updated@example.com", first_name="Up", active=False)

        result = await service.update_user(store, 1, replacement)

        store.find_by_id.assert_awaited_once_with(1)
        saved = store.save.await_args.args[0]
        assert saved.id == 1
        assert saved.username == "updated"
        assert saved.password == "password123"
        assert saved.last_name is None
        assert result == saved
        store.exists_by_username.assert_not_awaited()
        store.exists_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_user_never_saves(self, store, test_user):
        store.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            await service.update_user(store, 999, test_user)

        store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_conflict_propagates(self, store, test_user):
        store.find_by_id.return_value = test_user
        store.save.side_effect = UserConflictError("email", "taken@example.com")

        with pytest.raises(UserConflictError):
            await service.update_user(store, 1, test_user)


class TestDelete:
    @pytest.mark.asyncio
    async def test_deletes_existing(self, store):
        store.exists_by_id.return_value = True

        await service.delete_user(store, 1)

        store.exists_by_id.assert_awaited_once_with(1)
        store.delete_by_id.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_missing_never_deletes(self, store):
        store.exists_by_id.return_value = False

        with pytest.raises(UserNotFoundError):
            await service.delete_user(store, 999)

        store.delete_by_id.assert_not_awaited()


class TestReadsDelegate:
    @pytest.mark.asyncio
    async def test_get_by_id(self, store, test_user):
        store.find_by_id.return_value = test_user
        assert await service.get_user_by_id(store, 1) == test_user
        store.find_by_id.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_active_users_uses_true_flag(self, store, test_user):
        store.find_by_active.return_value = [test_user]
        assert await service.get_active_users(store) == [test_user]
        store.find_by_active.assert_awaited_once_with(True)

    @pytest.mark.asyncio
    async def test_search_passes_fragment(self, store, test_user):
        store.find_by_first_name_containing.return_value = [test_user]
        assert await service.search_users_by_first_name(store, "Test") == [test_user]
        store.find_by_first_name_containing.assert_awaited_once_with("Test")

    @pytest.mark.asyncio
    async def test_search_none_becomes_empty(self, store):
        store.find_by_first_name_containing.return_value = []
        await service.search_users_by_first_name(store, None)
        store.find_by_first_name_containing.assert_awaited_once_with("")

    @pytest.mark.asyncio
    async def test_count_by_status(self, store):
        store.count_by_active.return_value = 5
        assert await service.get_user_count_by_status(store, True) == 5
        store.count_by_active.assert_awaited_once_with(True)

    @pytest.mark.asyncio
    async def test_activate_saves_active_copy(self, store, test_user):
        store.find_by_id.return_value = test_user.model_copy(update={"active": False})
        store.save.side_effect = lambda user: user

        result = await service.activate_user(store, 1)

        assert result.active is True
        assert store.save.await_args.args[0].active is True
