from aiogram import Router
from aiogram.types import CallbackQuery
from aiogram.utils.text_decorations import html_decoration as hd

from domain.errors import DomainError
from services.events import EventService
from services.locations import LocationService
from utils.formatting import error_text, events_list_text, location_text
from utils.keyboards import back_kb, events_kb, location_kb, locations_kb
from utils.safe_edit import safe_edit_text

router = Router()


# 📍 Список локаций
@router.callback_query(lambda c: c.data == "locations")
async def show_locations(callback: CallbackQuery, location_service: LocationService):
    await callback.answer()
    locations = await location_service.list_locations()

    if not locations:
        await safe_edit_text(callback.message, "📍 Пока нет доступных локаций.", back_kb()) # type: ignore
        return

    await safe_edit_text(callback.message, "📍 Доступные локации:", locations_kb(locations)) # type: ignore


# 🏠 Карточка локации
@router.callback_query(lambda c: c.data and c.data.startswith("loc:"))
async def show_location(callback: CallbackQuery, location_service: LocationService):
    location_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        location = await location_service.get(location_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(callback.message, location_text(location), location_kb(location)) # type: ignore


# 📅 События локации
@router.callback_query(lambda c: c.data and c.data.startswith("locev:"))
async def show_location_events(callback: CallbackQuery, location_service: LocationService, event_service: EventService):
    location_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        location = await location_service.get(location_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    events = await event_service.list_events_by_location(location.id)
    await safe_edit_text(
        callback.message, # type: ignore
        events_list_text(events, f"📅 События: <b>{hd.quote(location.name)}</b>"),
        events_kb(events, back=f"loc:{location.id}")
    )
