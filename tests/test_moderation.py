import pytest

from domain import RegistrationStatus
from domain.errors import AlreadyApprovedError, EventNotFoundError, RegistrationNotFoundError


class TestModerationService:
    async def test_events_needing_moderation_counts_pending(self, make_event, event_service, moderation_service):
        quiet = await make_event(name="Без заявок")
        busy = await make_event(name="С заявками")
        await event_service.request_registration(busy.id, 1)
        await event_service.request_registration(busy.id, 2)
        await event_service.approve_registration(busy.id, 2)

        summaries = await moderation_service.events_needing_moderation()

        assert [(s.event.id, s.pending_count) for s in summaries] == [(busy.id, 1)]
        assert quiet.id not in {s.event.id for s in summaries}

    async def test_pending_with_users_joins_profiles(
        self, make_event, event_service, user_service, moderation_service, clock
    ):
        event = await make_event()
        await user_service.upsert(1, "Анна", "Петрова")
        await event_service.request_registration(event.id, 1)
        clock.advance(minutes=1)
        await event_service.request_registration(event.id, 2)

        loaded, rows = await moderation_service.pending_with_users(event.id)

        assert loaded.id == event.id
        assert [row.user_id for row in rows] == [1, 2]
        assert rows[0].display_name == "Анна Петрова"
        assert rows[1].user is None
        assert rows[1].display_name == "id 2"

    async def test_registration_detail(self, make_event, event_service, user_service, moderation_service):
        event = await make_event()
        await user_service.upsert(1, "Анна")
        await event_service.request_registration(event.id, 1)

        _, row = await moderation_service.registration_detail(event.id, 1)

        assert row.registration.status == RegistrationStatus.PENDING
        assert row.user.name == "Анна"

        with pytest.raises(RegistrationNotFoundError):
            await moderation_service.registration_detail(event.id, 2)

    async def test_approve_and_reject_go_through_the_engine(self, make_event, event_service, moderation_service):
        event = await make_event(capacity=1)
        await event_service.request_registration(event.id, 1)
        await event_service.request_registration(event.id, 2)

        approved = await moderation_service.approve(event.id, 1)
        rejected = await moderation_service.reject(event.id, 2)

        assert approved.registration.status == RegistrationStatus.APPROVED
        assert rejected.registration.status == RegistrationStatus.REJECTED
        assert (await event_service.get_event(event.id)).remaining == 0
        with pytest.raises(AlreadyApprovedError):
            await moderation_service.approve(event.id, 1)

    async def test_participants_are_grouped_by_status(
        self, make_event, event_service, moderation_service, clock
    ):
        event = await make_event(capacity=3)
        for user_id in (1, 2, 3):
            await event_service.request_registration(event.id, user_id)
            clock.advance(minutes=1)
        await event_service.reject_registration(event.id, 1)
        await event_service.approve_registration(event.id, 3)

        _, rows = await moderation_service.participants(event.id)

        assert [(row.user_id, row.registration.status) for row in rows] == [
            (3, RegistrationStatus.APPROVED),
            (2, RegistrationStatus.PENDING),
            (1, RegistrationStatus.REJECTED),
        ]

    async def test_unknown_event(self, moderation_service):
        with pytest.raises(EventNotFoundError):
            await moderation_service.pending_with_users("missing")
