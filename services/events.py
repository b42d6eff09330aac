"""Event registration engine.

Owns events, their capacity accounting and the registration state machine:

    (none) -> pending -> approved | rejected
    approved/pending/rejected -> (none) on unregister
    rejected -> pending on a new request

Every mutating operation loads a fresh aggregate and saves it while holding
the lock for that event id, so two approvals racing for the last seat are
applied one after the other. If the save fails the mutated copy is dropped
and the error propagates; nothing is retried here.
"""

from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from domain import (
    CreateEventInput,
    Event,
    EventRegistration,
    EventType,
    RegistrationStatus,
    UpdateEventInput,
)
from domain.errors import EventFullError, EventNotFoundError, ValidationError
from logger import engine_logger
from services.locations import LocationService
from services.locks import EventLocks
from stores.interfaces import EventStore


class EventService:
    def __init__(
        self,
        store: EventStore,
        locations: LocationService,
        *,
        locks: EventLocks | None = None,
        reject_requests_when_full: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._locations = locations
        self._locks = locks or EventLocks()
        self._reject_requests_when_full = reject_requests_when_full
        self._clock = clock

    # --- reads ---

    async def get_event(self, event_id: str) -> Event:
        event = await self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def list_events(self, event_type: EventType | None = None) -> list[Event]:
        return await self._store.list_events(event_type)

    async def list_events_by_location(self, location_id: str) -> list[Event]:
        return await self._store.list_events_by_location(location_id)

    async def list_events_by_user(self, user_id: int) -> list[Event]:
        return await self._store.list_events_by_user(user_id)

    async def get_registration(self, event_id: str, user_id: int) -> EventRegistration | None:
        event = await self.get_event(event_id)
        return event.registrations.get(user_id)

    async def list_pending_registrations(self, event_id: str) -> list[EventRegistration]:
        event = await self.get_event(event_id)
        return event.registrations_with_status(RegistrationStatus.PENDING)

    # --- event lifecycle ---

    async def create_event(self, data: CreateEventInput) -> Event:
        now = self._clock()
        data.validate(now)
        # LocationNotFoundError если локации нет
        await self._locations.get(data.location_id)

        event = Event(
            id=str(uuid4()),
            name=data.name.strip(),
            type=data.type,
            date=data.date,
            capacity=data.capacity,
            location_id=data.location_id,
            created_at=now,
            updated_at=now,
            trainer=data.trainer.strip(),
            description=data.description.strip(),
            payment_phone=data.payment_phone.strip(),
            price=data.price,
        )
        await self._store.save_event(event)
        engine_logger.info(
            f"📅 Событие создано: '{event.name}' ({event.id}) | мест: {event.capacity} | локация {event.location_id}"
        )
        return event

    async def update_event(self, event_id: str, data: UpdateEventInput) -> Event:
        async with self._locks.hold(event_id):
            event = await self.get_event(event_id)

            if data.name is not None:
                if not data.name.strip():
                    raise ValidationError("Event name is required")
                event.name = data.name.strip()
            if data.type is not None:
                event.type = data.type
            if data.date is not None:
                event.date = data.date
            if data.trainer is not None:
                event.trainer = data.trainer.strip()
            if data.description is not None:
                event.description = data.description.strip()
            if data.payment_phone is not None:
                event.payment_phone = data.payment_phone.strip()
            if data.price is not None:
                if data.price < 0:
                    raise ValidationError("Price cannot be negative")
                event.price = data.price
            if data.capacity is not None:
                old_capacity = event.capacity
                event.change_capacity(data.capacity)
                engine_logger.info(
                    f"👥 Вместимость события {event_id}: {old_capacity} -> {event.capacity}, осталось {event.remaining}"
                )

            event.updated_at = self._clock()
            await self._store.save_event(event)
            return event

    async def delete_event(self, event_id: str) -> None:
        async with self._locks.hold(event_id):
            if not await self._store.delete_event(event_id):
                raise EventNotFoundError(event_id)
        engine_logger.info(f"🗑️ Событие удалено: {event_id}")

    # --- registration state machine ---

    async def request_registration(self, event_id: str, user_id: int) -> EventRegistration:
        def apply(event: Event, now: datetime) -> EventRegistration:
            if self._reject_requests_when_full and event.remaining <= 0:
                raise EventFullError(event.id)
            # pending не занимает место: вместимость проверяется только при подтверждении
            return event.request(user_id, now)

        reg = await self._mutate(event_id, apply)
        engine_logger.info(f"📝 Заявка: событие {event_id} | пользователь {user_id} -> pending")
        return reg

    async def unregister_user(self, event_id: str, user_id: int) -> EventRegistration:
        reg = await self._mutate(event_id, lambda event, now: event.unregister(user_id, now))
        engine_logger.info(
            f"↩️ Отмена регистрации: событие {event_id} | пользователь {user_id} (был {reg.status.value})"
        )
        return reg

    async def approve_registration(self, event_id: str, user_id: int) -> EventRegistration:
        reg = await self._mutate(event_id, lambda event, now: event.approve(user_id, now))
        engine_logger.info(f"✅ Подтверждено: событие {event_id} | пользователь {user_id}")
        return reg

    async def reject_registration(self, event_id: str, user_id: int) -> EventRegistration:
        reg = await self._mutate(event_id, lambda event, now: event.reject(user_id, now))
        engine_logger.info(f"🚫 Отклонено: событие {event_id} | пользователь {user_id}")
        return reg

    async def _mutate(
        self,
        event_id: str,
        apply: Callable[[Event, datetime], EventRegistration],
    ) -> EventRegistration:
        async with self._locks.hold(event_id):
            event = await self.get_event(event_id)
            reg = apply(event, self._clock())
            await self._store.save_event(event)
            return reg

