"""Handlers called directly with stand-in Telegram objects."""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from domain import Event, EventRegistration, EventType, RegistrationStatus, RegistrationWithUser
from domain.errors import EventNotFoundError
from handlers.admin.moderation import decide
from handlers.profile import process_name, process_surname
from states.profile import ProfileStates

NOW = datetime(2026, 1, 10, 12, 0)


def make_message(text: str, user_id: int = 7):
    return SimpleNamespace(text=text, from_user=SimpleNamespace(id=user_id), answer=AsyncMock())


def make_state(user_id: int = 7) -> FSMContext:
    return FSMContext(storage=MemoryStorage(), key=StorageKey(bot_id=42, chat_id=user_id, user_id=user_id))


class TestProfileWizard:
    async def test_command_is_not_taken_as_name(self):
        state = make_state()
        await state.set_state(ProfileStates.waiting_for_name)
        message = make_message("/my_events")

        await process_name(message, state)

        assert await state.get_state() == ProfileStates.waiting_for_name.state
        assert "name" not in await state.get_data()
        message.answer.assert_awaited_once()

    async def test_name_moves_to_surname_step(self):
        state = make_state()
        await state.set_state(ProfileStates.waiting_for_name)

        await process_name(make_message("  Анна "), state)

        assert await state.get_state() == ProfileStates.waiting_for_surname.state
        assert (await state.get_data())["name"] == "Анна"

    async def test_command_is_not_taken_as_surname(self, user_service, event_service):
        state = make_state()
        await state.set_state(ProfileStates.waiting_for_surname)
        await state.update_data(name="Анна")

        await process_surname(make_message("/start"), state, user_service, event_service)

        assert await state.get_state() == ProfileStates.waiting_for_surname.state
        assert not await user_service.exists(7)

    async def test_surname_saves_profile_and_files_the_request(self, make_event, user_service, event_service):
        event = await make_event()
        state = make_state()
        await state.set_state(ProfileStates.waiting_for_surname)
        await state.update_data(name="Анна", event_id=event.id)

        await process_surname(make_message("Петрова"), state, user_service, event_service)

        assert (await user_service.get_by_telegram_id(7)).full_name == "Анна Петрова"
        reg = await event_service.get_registration(event.id, 7)
        assert reg.status == RegistrationStatus.PENDING
        assert await state.get_state() is None


class TestModerationDecision:
    def make_event(self) -> Event:
        return Event(
            id="e1",
            name="Тренировка",
            type=EventType.TRAINING,
            date=datetime(2026, 1, 15, 18, 0),
            capacity=2,
            location_id="l1",
            created_at=NOW,
            updated_at=NOW,
        )

    async def test_user_is_notified_when_event_disappears_after_decision(self):
        event = self.make_event()
        row = RegistrationWithUser(EventRegistration(7, RegistrationStatus.APPROVED, NOW, NOW))
        event_service = SimpleNamespace(get_event=AsyncMock(side_effect=[event, EventNotFoundError("e1")]))
        moderation_service = SimpleNamespace(approve=AsyncMock(return_value=row), reject=AsyncMock())
        bot = SimpleNamespace(send_message=AsyncMock())
        callback = SimpleNamespace(
            data="modok:e1:7",
            from_user=SimpleNamespace(id=1),
            answer=AsyncMock(),
            message=SimpleNamespace(edit_text=AsyncMock()),
        )

        await decide(callback, bot, moderation_service, event_service)

        moderation_service.approve.assert_awaited_once_with("e1", 7)
        bot.send_message.assert_awaited_once()
        assert bot.send_message.await_args.args[0] == 7
        assert "подтверждена" in bot.send_message.await_args.args[1]
        assert callback.message.edit_text.await_args.args[0] == "❌ Событие не найдено"

    async def test_missing_event_applies_no_decision(self):
        event_service = SimpleNamespace(get_event=AsyncMock(side_effect=EventNotFoundError("e1")))
        moderation_service = SimpleNamespace(approve=AsyncMock(), reject=AsyncMock())
        bot = SimpleNamespace(send_message=AsyncMock())
        callback = SimpleNamespace(data="modno:e1:7", from_user=SimpleNamespace(id=1), answer=AsyncMock())

        await decide(callback, bot, moderation_service, event_service)

        moderation_service.reject.assert_not_awaited()
        bot.send_message.assert_not_awaited()
        callback.answer.assert_awaited_once_with("❌ Событие не найдено", show_alert=True)
