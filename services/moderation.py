"""Admin moderation on top of the registration engine.

No state of its own: everything is read from the engine and joined with
the user directory for display.
"""

from domain import (
    Event,
    EventRegistration,
    PendingSummary,
    RegistrationStatus,
    RegistrationWithUser,
)
from domain.errors import RegistrationNotFoundError
from services.events import EventService
from services.users import UserService


class ModerationService:
    def __init__(self, events: EventService, users: UserService) -> None:
        self._events = events
        self._users = users

    async def events_needing_moderation(self) -> list[PendingSummary]:
        summaries = []
        for event in await self._events.list_events():
            pending = event.registrations_with_status(RegistrationStatus.PENDING)
            if pending:
                summaries.append(PendingSummary(event=event, pending_count=len(pending)))
        return summaries

    async def pending_with_users(self, event_id: str) -> tuple[Event, list[RegistrationWithUser]]:
        event = await self._events.get_event(event_id)
        pending = event.registrations_with_status(RegistrationStatus.PENDING)
        return event, await self._join_users(pending)

    async def participants(self, event_id: str) -> tuple[Event, list[RegistrationWithUser]]:
        """All registrations of the event: approved first, then pending, then rejected."""
        event = await self._events.get_event(event_id)
        regs = [
            reg
            for status in (
                RegistrationStatus.APPROVED,
                RegistrationStatus.PENDING,
                RegistrationStatus.REJECTED,
            )
            for reg in event.registrations_with_status(status)
        ]
        return event, await self._join_users(regs)

    async def registration_detail(self, event_id: str, user_id: int) -> tuple[Event, RegistrationWithUser]:
        event = await self._events.get_event(event_id)
        reg = event.registrations.get(user_id)
        if reg is None:
            raise RegistrationNotFoundError(event_id, user_id)
        (joined,) = await self._join_users([reg])
        return event, joined

    async def approve(self, event_id: str, user_id: int) -> RegistrationWithUser:
        reg = await self._events.approve_registration(event_id, user_id)
        (joined,) = await self._join_users([reg])
        return joined

    async def reject(self, event_id: str, user_id: int) -> RegistrationWithUser:
        reg = await self._events.reject_registration(event_id, user_id)
        (joined,) = await self._join_users([reg])
        return joined

    async def _join_users(self, regs: list[EventRegistration]) -> list[RegistrationWithUser]:
        users = await self._users.get_many(reg.user_id for reg in regs)
        return [RegistrationWithUser(registration=reg, user=users.get(reg.user_id)) for reg in regs]
