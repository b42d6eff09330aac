import pytest
from sqlalchemy.exc import IntegrityError

from domain import User
from domain.errors import StorageError, UserNotFoundError, ValidationError
from stores.sqlalchemy_store import SQLAlchemyUserStore


class TestUserService:
    async def test_upsert_creates_profile(self, user_service, clock):
        user = await user_service.upsert(101, " Анна ", " Петрова ")

        assert user.full_name == "Анна Петрова"
        assert user.created_at == clock.now
        assert await user_service.exists(101)

    async def test_upsert_overwrites_names_and_keeps_created_at(self, user_service, clock):
        first = await user_service.upsert(101, "Анна", "Петрова")
        clock.advance(days=1)

        second = await user_service.upsert(101, "Аня", "")

        assert second.name == "Аня"
        assert second.surname == ""
        assert second.created_at == first.created_at
        assert second.updated_at == clock.now

    async def test_empty_name_is_rejected(self, user_service):
        with pytest.raises(ValidationError):
            await user_service.upsert(101, "  ")
        assert not await user_service.exists(101)

    async def test_unknown_user_raises_not_found(self, user_service):
        with pytest.raises(UserNotFoundError):
            await user_service.get_by_telegram_id(404)

    async def test_get_many_skips_missing(self, user_service):
        await user_service.upsert(1, "Олег")
        await user_service.upsert(2, "Ира")

        users = await user_service.get_many([1, 2, 3])

        assert sorted(users) == [1, 2]
        assert await user_service.get_many([]) == {}


async def test_save_user_retries_once_after_integrity_error(session_factory, monkeypatch):
    """A racing insert of the same telegram_id falls back to the update path."""
    store = SQLAlchemyUserStore(session_factory)
    upsert = store._upsert_user
    calls = []

    async def racing_upsert(user):
        calls.append(user.telegram_id)
        if len(calls) == 1:
            raise StorageError("Storage failure: save_user") from IntegrityError("INSERT", {}, Exception("UNIQUE"))
        return await upsert(user)

    monkeypatch.setattr(store, "_upsert_user", racing_upsert)

    saved = await store.save_user(User(telegram_id=101, name="Анна"))

    assert calls == [101, 101]
    assert saved.name == "Анна"


async def test_save_user_does_not_retry_other_storage_errors(session_factory, monkeypatch):
    store = SQLAlchemyUserStore(session_factory)

    async def broken_upsert(user):
        raise StorageError("Storage failure: save_user")

    monkeypatch.setattr(store, "_upsert_user", broken_upsert)

    with pytest.raises(StorageError):
        await store.save_user(User(telegram_id=101, name="Анна"))
