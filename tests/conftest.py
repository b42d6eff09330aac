"""Pytest configuration and shared fixtures.

Every test gets its own sqlite file under ``tmp_path`` and a clock that
only moves when the test says so.
"""

from datetime import datetime, timedelta

import pytest

from database.db import init_db, make_engine, make_session_factory
from domain import CreateEventInput, CreateLocationInput, EventType
from services.events import EventService
from services.locations import LocationService
from services.locks import EventLocks
from services.moderation import ModerationService
from services.users import UserService
from stores.sqlalchemy_store import (
    SQLAlchemyEventStore,
    SQLAlchemyLocationStore,
    SQLAlchemyUserStore,
)

START = datetime(2026, 1, 10, 12, 0)


class FakeClock:
    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def session_factory(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield make_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def location_service(session_factory) -> LocationService:
    return LocationService(SQLAlchemyLocationStore(session_factory))


@pytest.fixture
def user_service(session_factory, clock) -> UserService:
    return UserService(SQLAlchemyUserStore(session_factory), clock=clock)


@pytest.fixture
def event_service(session_factory, location_service, clock) -> EventService:
    return EventService(
        SQLAlchemyEventStore(session_factory),
        location_service,
        locks=EventLocks(),
        clock=clock,
    )


@pytest.fixture
def moderation_service(event_service, user_service) -> ModerationService:
    return ModerationService(event_service, user_service)


@pytest.fixture
async def location(location_service):
    return await location_service.create(
        CreateLocationInput(name="Зал на Ленина", address="ул. Ленина, 10")
    )


@pytest.fixture
def make_event(event_service, location):
    """Factory: create an event at the shared location."""

    async def _make(capacity: int = 2, **overrides):
        data = {
            "name": "Вечерняя тренировка",
            "type": EventType.TRAINING,
            "date": START + timedelta(days=3),
            "capacity": capacity,
            "location_id": location.id,
            "trainer": "Иван",
        }
        data.update(overrides)
        return await event_service.create_event(CreateEventInput(**data))

    return _make
