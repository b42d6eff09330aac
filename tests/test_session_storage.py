from aiogram.fsm.storage.base import StorageKey

from states.profile import ProfileStates
from utils.session_storage import ExpiringMemoryStorage


class FakeMonotonic:
    def __init__(self) -> None:
        self.value = 1000.0

    def __call__(self) -> float:
        return self.value


def make_key(user_id: int = 1) -> StorageKey:
    return StorageKey(bot_id=42, chat_id=user_id, user_id=user_id)


class TestExpiringMemoryStorage:
    async def test_state_and_data_survive_within_ttl(self):
        clock = FakeMonotonic()
        storage = ExpiringMemoryStorage(ttl=60, clock=clock)
        key = make_key()

        await storage.set_state(key, ProfileStates.waiting_for_name)
        await storage.set_data(key, {"event_id": "abc"})
        clock.value += 59

        assert await storage.get_state(key) == ProfileStates.waiting_for_name.state
        assert await storage.get_data(key) == {"event_id": "abc"}
        assert await storage.get_value(key, "event_id") == "abc"

    async def test_idle_session_expires(self):
        clock = FakeMonotonic()
        storage = ExpiringMemoryStorage(ttl=60, clock=clock)
        key = make_key()
        await storage.set_state(key, ProfileStates.waiting_for_name)
        await storage.set_data(key, {"name": "Анна"})

        clock.value += 60

        assert await storage.get_state(key) is None
        assert await storage.get_data(key) == {}
        assert len(storage) == 0

    async def test_activity_extends_the_session(self):
        clock = FakeMonotonic()
        storage = ExpiringMemoryStorage(ttl=60, clock=clock)
        key = make_key()
        await storage.set_state(key, ProfileStates.waiting_for_name)

        clock.value += 40
        await storage.set_state(key, ProfileStates.waiting_for_surname)
        clock.value += 40

        assert await storage.get_state(key) == ProfileStates.waiting_for_surname.state

    async def test_cleared_session_is_dropped(self):
        storage = ExpiringMemoryStorage(ttl=60, clock=FakeMonotonic())
        key = make_key()
        await storage.set_state(key, ProfileStates.waiting_for_name)
        await storage.set_data(key, {"name": "Анна"})

        await storage.set_state(key, None)
        await storage.set_data(key, {})

        assert len(storage) == 0
        assert await storage.get_state(key) is None

    async def test_reads_do_not_create_records(self):
        storage = ExpiringMemoryStorage(ttl=60, clock=FakeMonotonic())

        assert await storage.get_state(make_key(7)) is None
        assert await storage.get_data(make_key(7)) == {}
        assert len(storage) == 0

    async def test_purge_expired_only_drops_stale_records(self):
        clock = FakeMonotonic()
        storage = ExpiringMemoryStorage(ttl=60, clock=clock)
        await storage.set_state(make_key(1), ProfileStates.waiting_for_name)
        clock.value += 30
        await storage.set_state(make_key(2), ProfileStates.waiting_for_name)
        clock.value += 30

        assert storage.purge_expired() == 1
        assert len(storage) == 1
        assert await storage.get_state(make_key(2)) == ProfileStates.waiting_for_name.state
