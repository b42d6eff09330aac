from aiogram import Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from domain import Event, Location
from domain.errors import DomainError, LocationNotFoundError
from logger import app_logger
from services.events import EventService
from services.locations import LocationService
from services.moderation import ModerationService
from services.users import UserService
from states.profile import ProfileStates
from utils.formatting import error_text, event_text, events_list_text, participants_text
from utils.keyboards import back_kb, event_kb, events_kb
from utils.safe_edit import safe_edit_text

router = Router()


async def location_or_none(location_service: LocationService, event: Event) -> Location | None:
    # локацию могли удалить, событие при этом остаётся
    try:
        return await location_service.get(event.location_id)
    except LocationNotFoundError:
        return None


async def render_event(
    callback: CallbackQuery,
    event_id: str,
    event_service: EventService,
    location_service: LocationService,
) -> None:
    event = await event_service.get_event(event_id)
    location = await location_or_none(location_service, event)
    registration = event.registrations.get(callback.from_user.id)
    await safe_edit_text(
        callback.message, # type: ignore
        event_text(event, location, registration),
        event_kb(event, registration, back=f"locev:{event.location_id}" if location else "events")
    )


# 📅 Все события
@router.callback_query(lambda c: c.data == "events")
async def show_all_events(callback: CallbackQuery, event_service: EventService):
    await callback.answer()
    events = await event_service.list_events()
    await safe_edit_text(callback.message, events_list_text(events, "📅 Все события"), events_kb(events)) # type: ignore


# 📝 Мои события
@router.callback_query(lambda c: c.data == "my_events")
async def show_my_events(callback: CallbackQuery, event_service: EventService):
    await callback.answer()
    events = await event_service.list_events_by_user(callback.from_user.id)
    await safe_edit_text(callback.message, events_list_text(events, "📝 Мои события"), events_kb(events)) # type: ignore


@router.message(Command("my_events"))
async def my_events_cmd(message: Message, event_service: EventService):
    events = await event_service.list_events_by_user(message.from_user.id) # type: ignore
    await message.answer(events_list_text(events, "📝 Мои события"), reply_markup=events_kb(events))


# 🗂️ Карточка события
@router.callback_query(lambda c: c.data and c.data.startswith("ev:"))
async def show_event(callback: CallbackQuery, event_service: EventService, location_service: LocationService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        await render_event(callback, event_id, event_service, location_service)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return
    await callback.answer()


# ✍️ Записаться
@router.callback_query(lambda c: c.data and c.data.startswith("evreg:"))
async def request_seat(
    callback: CallbackQuery,
    state: FSMContext,
    event_service: EventService,
    location_service: LocationService,
    user_service: UserService,
):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    user_id = callback.from_user.id

    if not await user_service.exists(user_id):
        # сначала анкета, заявку подаст handlers/profile.py
        await callback.answer()
        await state.update_data(event_id=event_id)
        await state.set_state(ProfileStates.waiting_for_name)
        await callback.message.answer("📝 Для регистрации на событие необходимо указать ваши данные.\n\nВведите ваше имя:") # type: ignore
        return

    try:
        await event_service.request_registration(event_id, user_id)
        await render_event(callback, event_id, event_service, location_service)
    except DomainError as e:
        app_logger.info(f"⚠️ Заявка не принята: событие {event_id} | пользователь {user_id} | {e}")
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer("✅ Заявка подана! Ожидайте подтверждения администратора.", show_alert=True)


# ❌ Отменить запись
@router.callback_query(lambda c: c.data and c.data.startswith("evunreg:"))
async def cancel_seat(callback: CallbackQuery, event_service: EventService, location_service: LocationService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        await event_service.unregister_user(event_id, callback.from_user.id)
        await render_event(callback, event_id, event_service, location_service)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer("✅ Регистрация отменена")


# 👥 Участники
@router.callback_query(lambda c: c.data and c.data.startswith("evusers:"))
async def show_participants(callback: CallbackQuery, moderation_service: ModerationService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        event, rows = await moderation_service.participants(event_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(callback.message, participants_text(event, rows), back_kb(f"ev:{event.id}")) # type: ignore
