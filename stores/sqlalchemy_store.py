"""SQLAlchemy (async) implementation of the stores.

Each public method opens its own session and transaction.
Driver errors are logged and re-raised as ``StorageError``.
"""

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from database.models import DBEvent, DBEventRegistration, DBLocation, DBUser
from domain import (
    Event,
    EventRegistration,
    EventType,
    Location,
    RegistrationStatus,
    User,
)
from domain.errors import StorageError
from logger import db_logger
from stores.interfaces import EventStore, LocationStore, UserStore


class _SQLAlchemyStore:
    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, action: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield session
        except SQLAlchemyError as exc:
            db_logger.exception(f"❌ Ошибка БД при операции '{action}'")
            raise StorageError(f"Storage failure: {action}") from exc


# --- locations ---


def _location_to_domain(row: DBLocation) -> Location:
    return Location(
        id=row.location_id,
        name=row.name,
        address=row.address or "",
        map_url=row.map_url or "",
        description=row.description or "",
    )


class SQLAlchemyLocationStore(_SQLAlchemyStore, LocationStore):
    """Locations table."""

    async def get_location(self, location_id: str) -> Location | None:
        async with self._transaction("get_location") as session:
            stmt = select(DBLocation).where(DBLocation.location_id == location_id)
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _location_to_domain(row) if row else None

    async def list_locations(self) -> list[Location]:
        async with self._transaction("list_locations") as session:
            stmt = select(DBLocation).order_by(DBLocation.name, DBLocation.id)
            rows = (await session.execute(stmt)).scalars().all()
            return [_location_to_domain(row) for row in rows]

    async def save_location(self, location: Location) -> None:
        async with self._transaction("save_location") as session:
            stmt = select(DBLocation).where(DBLocation.location_id == location.id)
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                row = DBLocation(location_id=location.id)
                session.add(row)
            row.name = location.name
            row.address = location.address
            row.map_url = location.map_url
            row.description = location.description

    async def delete_location(self, location_id: str) -> bool:
        async with self._transaction("delete_location") as session:
            result = await session.execute(
                delete(DBLocation).where(DBLocation.location_id == location_id)
            )
            return result.rowcount > 0


# --- users ---


def _user_to_domain(row: DBUser) -> User:
    return User(
        telegram_id=row.telegram_id,
        name=row.name,
        surname=row.surname or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SQLAlchemyUserStore(_SQLAlchemyStore, UserStore):
    """Users table; ``telegram_id`` is unique."""

    async def get_user_by_telegram_id(self, telegram_id: int) -> User | None:
        async with self._transaction("get_user") as session:
            stmt = select(DBUser).where(DBUser.telegram_id == telegram_id)
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _user_to_domain(row) if row else None

    async def get_users_by_telegram_ids(self, telegram_ids: Iterable[int]) -> dict[int, User]:
        ids = list(set(telegram_ids))
        if not ids:
            return {}
        async with self._transaction("get_users") as session:
            stmt = select(DBUser).where(DBUser.telegram_id.in_(ids))
            rows = (await session.execute(stmt)).scalars().all()
            return {row.telegram_id: _user_to_domain(row) for row in rows}

    async def save_user(self, user: User) -> User:
        try:
            return await self._upsert_user(user)
        except StorageError as exc:
            if not isinstance(exc.__cause__, IntegrityError):
                raise
            # параллельная вставка того же telegram_id: второй проход обновит запись
            db_logger.warning(f"⚠️ Повторная вставка пользователя {user.telegram_id}, обновляем")
            return await self._upsert_user(user)

    async def _upsert_user(self, user: User) -> User:
        now = user.updated_at or datetime.now()
        async with self._transaction("save_user") as session:
            stmt = select(DBUser).where(DBUser.telegram_id == user.telegram_id)
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                row = DBUser(telegram_id=user.telegram_id, created_at=user.created_at or now)
                session.add(row)
            row.name = user.name
            row.surname = user.surname
            row.updated_at = now
            await session.flush()
            return _user_to_domain(row)


# --- events ---


def _event_to_domain(row: DBEvent) -> Event:
    registrations = {
        reg.user_id: EventRegistration(
            user_id=reg.user_id,
            status=RegistrationStatus(reg.status),
            created_at=reg.created_at,
            updated_at=reg.updated_at,
        )
        for reg in row.registrations
    }
    # Event.__post_init__ пересчитывает remaining, сохранённое значение не используется
    return Event(
        id=row.event_id,
        name=row.name,
        type=EventType(row.type),
        date=row.date,
        capacity=row.max_players,
        location_id=row.location_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        trainer=row.trainer or "",
        description=row.description or "",
        payment_phone=row.payment_phone or "",
        price=row.price,
        registrations=registrations,
    )


class SQLAlchemyEventStore(_SQLAlchemyStore, EventStore):
    """Events plus the event_registrations table."""

    def _select_events(self):
        return (
            select(DBEvent)
            .where(DBEvent.deleted_at.is_(None))
            .options(selectinload(DBEvent.registrations))
            .order_by(DBEvent.date, DBEvent.id)
        )

    async def get_event(self, event_id: str) -> Event | None:
        async with self._transaction("get_event") as session:
            stmt = self._select_events().where(DBEvent.event_id == event_id)
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _event_to_domain(row) if row else None

    async def list_events(self, event_type: EventType | None = None) -> list[Event]:
        async with self._transaction("list_events") as session:
            stmt = self._select_events()
            if event_type is not None:
                stmt = stmt.where(DBEvent.type == event_type.value)
            rows = (await session.execute(stmt)).scalars().all()
            return [_event_to_domain(row) for row in rows]

    async def list_events_by_location(self, location_id: str) -> list[Event]:
        async with self._transaction("list_events_by_location") as session:
            stmt = self._select_events().where(DBEvent.location_id == location_id)
            rows = (await session.execute(stmt)).scalars().all()
            return [_event_to_domain(row) for row in rows]

    async def list_events_by_user(self, user_id: int) -> list[Event]:
        async with self._transaction("list_events_by_user") as session:
            user_events = select(DBEventRegistration.event_id).where(
                DBEventRegistration.user_id == user_id
            )
            stmt = self._select_events().where(DBEvent.event_id.in_(user_events))
            rows = (await session.execute(stmt)).scalars().all()
            return [_event_to_domain(row) for row in rows]

    async def save_event(self, event: Event) -> None:
        async with self._transaction("save_event") as session:
            stmt = (
                select(DBEvent)
                .where(DBEvent.event_id == event.id)
                .options(selectinload(DBEvent.registrations))
            )
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                row = DBEvent(event_id=event.id, created_at=event.created_at, registrations=[])
                session.add(row)

            row.name = event.name
            row.type = event.type.value
            row.date = event.date
            row.max_players = event.capacity
            row.remaining = event.remaining
            row.location_id = event.location_id
            row.trainer = event.trainer
            row.description = event.description
            row.payment_phone = event.payment_phone
            row.price = event.price
            row.updated_at = event.updated_at

            self._sync_registrations(row, event)

    @staticmethod
    def _sync_registrations(row: DBEvent, event: Event) -> None:
        existing = {reg.user_id: reg for reg in row.registrations}

        for user_id, reg_row in existing.items():
            if user_id not in event.registrations:
                row.registrations.remove(reg_row)  # delete-orphan

        for user_id, reg in event.registrations.items():
            reg_row = existing.get(user_id)
            if reg_row is None:
                reg_row = DBEventRegistration(user_id=user_id)
                row.registrations.append(reg_row)
            reg_row.status = reg.status.value
            reg_row.created_at = reg.created_at
            reg_row.updated_at = reg.updated_at

    async def delete_event(self, event_id: str) -> bool:
        async with self._transaction("delete_event") as session:
            stmt = select(DBEvent).where(
                DBEvent.event_id == event_id, DBEvent.deleted_at.is_(None)
            )
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                return False

            await session.execute(
                delete(DBEventRegistration).where(DBEventRegistration.event_id == event_id)
            )
            row.deleted_at = datetime.now()
            return True
