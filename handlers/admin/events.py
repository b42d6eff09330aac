from datetime import datetime

from aiogram import Router
from aiogram.filters import StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from aiogram.utils.text_decorations import html_decoration as hd

from config import Settings
from domain import CreateEventInput, EventType
from domain.errors import DomainError
from handlers.events import location_or_none
from logger import app_logger
from services.events import EventService
from services.locations import LocationService
from services.moderation import ModerationService
from states.event import EventStates
from utils.filters import IsAdmin
from utils.formatting import (
    admin_event_text,
    error_text,
    event_created_text,
    event_type_title,
    events_list_text,
    format_date,
    participants_text,
)
from utils.keyboards import (
    admin_event_kb,
    admin_events_filter_kb,
    back_kb,
    confirm_kb,
    event_type_kb,
    events_kb,
    locations_kb,
)
from utils.parsing import parse_event_date, parse_positive_int, parse_price, wizard_text
from utils.safe_edit import safe_edit_text

router = Router()
router.message.filter(IsAdmin())
router.callback_query.filter(IsAdmin())

kb = back_kb("admin")

EVENT_FILTERS = {
    "all": (None, "📋 Все события"),
    "training": (EventType.TRAINING, "🏋️ Тренировки"),
    "competition": (EventType.COMPETITION, "🏆 Соревнования"),
}


# 🗓️ Создать событие: выбор локации
@router.callback_query(lambda c: c.data == "adm_ev_new")
async def create_event_start(callback: CallbackQuery, state: FSMContext, location_service: LocationService):
    await callback.answer()
    await state.clear()

    locations = await location_service.list_locations()
    if not locations:
        await safe_edit_text(callback.message, "⚠️ Сначала создайте хотя бы одну локацию.", kb) # type: ignore
        return

    await safe_edit_text(
        callback.message, # type: ignore
        "📍 Выберите локацию для события:",
        locations_kb(locations, prefix="adm_evloc", back="admin")
    )
    await state.set_state(EventStates.waiting_for_location)


@router.callback_query(StateFilter(EventStates.waiting_for_location), lambda c: c.data and c.data.startswith("adm_evloc:"))
async def process_event_location(callback: CallbackQuery, state: FSMContext, location_service: LocationService):
    location_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        location = await location_service.get(location_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await state.update_data(location_id=location.id)
    await safe_edit_text(
        callback.message, # type: ignore
        f"📍 Локация: {hd.quote(location.name)}\n\nВыберите тип события:",
        event_type_kb()
    )
    await state.set_state(EventStates.waiting_for_type)


@router.callback_query(StateFilter(EventStates.waiting_for_type), lambda c: c.data and c.data.startswith("adm_evtype:"))
async def process_event_type(callback: CallbackQuery, state: FSMContext):
    try:
        event_type = EventType(callback.data.split(":", 1)[1]) # type: ignore
    except ValueError:
        await callback.answer("❌ Неизвестный тип события", show_alert=True)
        return

    await callback.answer()
    await state.update_data(type=event_type.value)
    await safe_edit_text(
        callback.message, # type: ignore
        f"📅 Тип события: {event_type_title(event_type)}\n\nВведите количество мест:",
        kb
    )
    await state.set_state(EventStates.waiting_for_capacity)


@router.message(StateFilter(EventStates.waiting_for_capacity))
async def process_event_capacity(message: Message, state: FSMContext):
    try:
        capacity = parse_positive_int(message.text or "")
    except DomainError:
        await message.answer("❌ Введите корректное количество мест (положительное число):", reply_markup=kb)
        return

    await state.update_data(capacity=capacity)
    await message.answer(f"👥 Количество мест: {capacity}\n\nВведите название события:", reply_markup=kb)
    await state.set_state(EventStates.waiting_for_name)


@router.message(StateFilter(EventStates.waiting_for_name))
async def process_event_name(message: Message, state: FSMContext):
    name = wizard_text(message.text)
    if not name:
        await message.answer("❌ Название события не может быть пустым. Введите название:", reply_markup=kb)
        return

    await state.update_data(name=name)
    await message.answer(
        f"📝 Название: {hd.quote(name)}\n\n"
        "Введите дату и время начала события в формате:\n📅 ДД.ММ.ГГГГ ЧЧ:ММ\n\nПример: 15.01.2026 18:00",
        reply_markup=kb
    )
    await state.set_state(EventStates.waiting_for_date)


@router.message(StateFilter(EventStates.waiting_for_date))
async def process_event_date(message: Message, state: FSMContext):
    try:
        date = parse_event_date(message.text or "", datetime.now())
    except DomainError as e:
        await message.answer(error_text(e), reply_markup=kb)
        return

    await state.update_data(date=date.isoformat())
    await message.answer(f"🗓️ Дата: {format_date(date)}\n\nВведите имя тренера:", reply_markup=kb)
    await state.set_state(EventStates.waiting_for_trainer)


@router.message(StateFilter(EventStates.waiting_for_trainer))
async def process_event_trainer(message: Message, state: FSMContext, event_service: EventService, settings: Settings):
    trainer = wizard_text(message.text)
    if not trainer:
        await message.answer("❌ Имя тренера не может быть пустым. Введите имя тренера:", reply_markup=kb)
        return

    await state.update_data(trainer=trainer)

    if not settings.payment_details_enabled:
        await finish_event_creation(message, state, event_service)
        return

    await message.answer(
        f"👨‍🏫 Тренер: {hd.quote(trainer)}\n\nВведите номер телефона для оплаты (например, +79991234567):",
        reply_markup=kb
    )
    await state.set_state(EventStates.waiting_for_payment_phone)


@router.message(StateFilter(EventStates.waiting_for_payment_phone))
async def process_event_payment_phone(message: Message, state: FSMContext):
    phone = wizard_text(message.text)
    if not phone:
        await message.answer("❌ Номер телефона не может быть пустым. Введите номер телефона:", reply_markup=kb)
        return

    await state.update_data(payment_phone=phone)
    await message.answer(
        f"📱 Телефон для оплаты: {hd.quote(phone)}\n\nВведите стоимость (в рублях, только число):",
        reply_markup=kb
    )
    await state.set_state(EventStates.waiting_for_price)


@router.message(StateFilter(EventStates.waiting_for_price))
async def process_event_price(message: Message, state: FSMContext, event_service: EventService):
    try:
        price = parse_price(message.text or "")
    except DomainError:
        await message.answer("❌ Введите корректную стоимость (положительное число в рублях):", reply_markup=kb)
        return

    await state.update_data(price=price)
    await finish_event_creation(message, state, event_service)


async def finish_event_creation(message: Message, state: FSMContext, event_service: EventService):
    data = await state.get_data()
    await state.clear()

    try:
        event = await event_service.create_event(CreateEventInput(
            name=data["name"],
            type=EventType(data["type"]),
            date=datetime.fromisoformat(data["date"]),
            capacity=data["capacity"],
            location_id=data["location_id"],
            trainer=data.get("trainer", ""),
            payment_phone=data.get("payment_phone", ""),
            price=data.get("price"),
        ))
    except DomainError as e:
        app_logger.warning(f"❌ Событие не создано: {e} | админ {message.from_user.id}") # type: ignore
        await message.answer(error_text(e), reply_markup=kb)
        return

    await message.answer(event_created_text(event), reply_markup=kb)


# 📂 События
@router.callback_query(lambda c: c.data == "adm_evs")
async def events_filter(callback: CallbackQuery):
    await callback.answer()
    await safe_edit_text(callback.message, "📂 Какие события показать?", admin_events_filter_kb()) # type: ignore


@router.callback_query(lambda c: c.data and c.data.startswith("adm_evs:"))
async def list_events(callback: CallbackQuery, event_service: EventService):
    key = callback.data.split(":", 1)[1] # type: ignore
    event_type, title = EVENT_FILTERS.get(key, EVENT_FILTERS["all"])

    await callback.answer()
    events = await event_service.list_events(event_type)
    await safe_edit_text(
        callback.message, # type: ignore
        events_list_text(events, title),
        events_kb(events, prefix="adm_ev", back="adm_evs")
    )


@router.callback_query(lambda c: c.data and c.data.startswith("adm_ev:"))
async def show_event(callback: CallbackQuery, event_service: EventService, location_service: LocationService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        event = await event_service.get_event(event_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    location = await location_or_none(location_service, event)
    await safe_edit_text(callback.message, admin_event_text(event, location), admin_event_kb(event)) # type: ignore


@router.callback_query(lambda c: c.data and c.data.startswith("adm_evusers:"))
async def show_participants(callback: CallbackQuery, moderation_service: ModerationService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        event, rows = await moderation_service.participants(event_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(callback.message, participants_text(event, rows), back_kb(f"adm_ev:{event.id}")) # type: ignore


# 🗑️ Удаление события
@router.callback_query(lambda c: c.data and c.data.startswith("adm_evdel:"))
async def confirm_delete_event(callback: CallbackQuery, event_service: EventService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        event = await event_service.get_event(event_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(
        callback.message, # type: ignore
        f"❓ Удалить событие <b>{hd.quote(event.name)}</b> ({format_date(event.date)})?\n"
        f"Все заявки на него будут удалены.",
        confirm_kb(f"adm_evdel_ok:{event.id}", f"adm_ev:{event.id}")
    )


@router.callback_query(lambda c: c.data and c.data.startswith("adm_evdel_ok:"))
async def delete_event(callback: CallbackQuery, event_service: EventService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        await event_service.delete_event(event_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    app_logger.info(f"🗑️ Админ {callback.from_user.id} удалил событие {event_id}")
    await safe_edit_text(callback.message, "✅ Событие удалено.", back_kb("adm_evs")) # type: ignore
