from aiogram import Router
from aiogram.filters import Command, CommandObject, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from aiogram.utils.text_decorations import html_decoration as hd

from domain import CreateLocationInput
from domain.errors import DomainError
from services.locations import LocationService
from states.location import LocationStates
from utils.filters import IsAdmin
from utils.formatting import error_text, location_created_text, location_text
from utils.keyboards import admin_location_kb, admin_locations_kb, back_kb, confirm_kb
from utils.parsing import optional_text, wizard_text
from utils.safe_edit import safe_edit_text

router = Router()
router.message.filter(IsAdmin())
router.callback_query.filter(IsAdmin())

SKIP_HINT = "\n\n(отправьте «-», чтобы пропустить)"


# ➕ Создать локацию
@router.callback_query(lambda c: c.data == "adm_loc_new")
async def create_location_start(callback: CallbackQuery, state: FSMContext):
    await callback.answer()
    await state.clear()
    await callback.message.answer("📝 Создание новой локации\n\nВведите название:", reply_markup=back_kb("admin")) # type: ignore
    await state.set_state(LocationStates.waiting_for_name)


@router.message(StateFilter(LocationStates.waiting_for_name))
async def process_location_name(message: Message, state: FSMContext):
    name = wizard_text(message.text)
    if not name:
        await message.answer("❌ Название локации не может быть пустым.", reply_markup=back_kb("admin"))
        return

    await state.update_data(name=name)
    await message.answer("🏠 Введите адрес:" + SKIP_HINT)
    await state.set_state(LocationStates.waiting_for_address)


@router.message(StateFilter(LocationStates.waiting_for_address))
async def process_location_address(message: Message, state: FSMContext):
    await state.update_data(address=optional_text(message.text))
    await message.answer("🗺️ Введите ссылку на карту:" + SKIP_HINT)
    await state.set_state(LocationStates.waiting_for_map_url)


@router.message(StateFilter(LocationStates.waiting_for_map_url))
async def process_location_map_url(message: Message, state: FSMContext):
    await state.update_data(map_url=optional_text(message.text))
    await message.answer("📄 Введите описание:" + SKIP_HINT)
    await state.set_state(LocationStates.waiting_for_description)


@router.message(StateFilter(LocationStates.waiting_for_description))
async def process_location_description(message: Message, state: FSMContext, location_service: LocationService):
    data = await state.get_data()
    await state.clear()

    try:
        location = await location_service.create(CreateLocationInput(
            name=data.get("name", ""),
            address=data.get("address", ""),
            map_url=data.get("map_url", ""),
            description=optional_text(message.text),
        ))
    except DomainError as e:
        await message.answer(error_text(e), reply_markup=back_kb("admin"))
        return

    await message.answer(location_created_text(location), reply_markup=back_kb("admin"))


# 📋 Список локаций
@router.callback_query(lambda c: c.data == "adm_locs")
async def list_locations(callback: CallbackQuery, location_service: LocationService):
    await callback.answer()
    locations = await location_service.list_locations()
    text = "📋 Локации:" if locations else "📋 Список локаций пуст"
    await safe_edit_text(callback.message, text, admin_locations_kb(locations)) # type: ignore


@router.callback_query(lambda c: c.data and c.data.startswith("adm_loc:"))
async def show_location(callback: CallbackQuery, location_service: LocationService):
    location_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        location = await location_service.get(location_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    text = location_text(location) + f"\n\n🔑 ID: <code>{location.id}</code>"
    await safe_edit_text(callback.message, text, admin_location_kb(location)) # type: ignore


# 🗑️ Удаление: подтверждение, затем удаление
@router.callback_query(lambda c: c.data and c.data.startswith("adm_locdel:"))
async def confirm_delete_location(callback: CallbackQuery, location_service: LocationService):
    location_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        location = await location_service.get(location_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(
        callback.message, # type: ignore
        f"❓ Удалить локацию <b>{hd.quote(location.name)}</b>?\nСобытия этой локации останутся.",
        confirm_kb(f"adm_locdel_ok:{location.id}", f"adm_loc:{location.id}")
    )


@router.callback_query(lambda c: c.data and c.data.startswith("adm_locdel_ok:"))
async def delete_location(callback: CallbackQuery, location_service: LocationService):
    location_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        location = await location_service.get(location_id)
        await location_service.delete(location_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(
        callback.message, # type: ignore
        f"✅ Локация '{hd.quote(location.name)}' успешно удалена!",
        back_kb("adm_locs")
    )


# /delete_location <название>
@router.message(Command("delete_location"))
async def delete_location_by_name(message: Message, command: CommandObject, location_service: LocationService):
    name = (command.args or "").strip()
    if not name:
        await message.answer("📝 Использование: /delete_location &lt;название&gt;")
        return

    location = await location_service.find_by_name(name)
    if location is None:
        await message.answer(f"❌ Локация '{hd.quote(name)}' не найдена.", reply_markup=back_kb("admin"))
        return

    try:
        await location_service.delete(location.id)
    except DomainError as e:
        await message.answer(error_text(e), reply_markup=back_kb("admin"))
        return

    await message.answer(f"✅ Локация '{hd.quote(location.name)}' успешно удалена!", reply_markup=back_kb("admin"))
