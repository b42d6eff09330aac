from aiogram import Router
from aiogram.filters import StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from domain.errors import DomainError
from logger import app_logger
from services.events import EventService
from services.users import UserService
from states.profile import ProfileStates
from utils.formatting import error_text
from utils.keyboards import back_kb
from utils.parsing import wizard_text

router = Router()


# 📝 Имя
@router.message(StateFilter(ProfileStates.waiting_for_name))
async def process_name(message: Message, state: FSMContext):
    name = wizard_text(message.text)
    if not name:
        await message.answer("❌ Пожалуйста, введите имя текстом (для отмены: /cancel)")
        return

    await state.update_data(name=name)
    await message.answer("✅ Имя сохранено.\n\nВведите вашу фамилию:")
    await state.set_state(ProfileStates.waiting_for_surname)


# 📝 Фамилия -> сохраняем профиль и подаём отложенную заявку
@router.message(StateFilter(ProfileStates.waiting_for_surname))
async def process_surname(
    message: Message,
    state: FSMContext,
    user_service: UserService,
    event_service: EventService,
):
    surname = wizard_text(message.text)
    if not surname:
        await message.answer("❌ Пожалуйста, введите фамилию текстом (для отмены: /cancel)")
        return

    data = await state.get_data()
    await state.clear()
    user_id = message.from_user.id # type: ignore

    try:
        await user_service.upsert(user_id, data.get("name", ""), surname)
    except DomainError as e:
        await message.answer(error_text(e), reply_markup=back_kb())
        return

    event_id = data.get("event_id")
    if not event_id:
        await message.answer("✅ Данные сохранены!", reply_markup=back_kb())
        return

    await message.answer("✅ Данные сохранены! Регистрирую на событие...")
    try:
        await event_service.request_registration(event_id, user_id)
    except DomainError as e:
        app_logger.info(f"⚠️ Заявка не принята: событие {event_id} | пользователь {user_id} | {e}")
        await message.answer(error_text(e), reply_markup=back_kb(f"ev:{event_id}"))
        return

    await message.answer(
        "✅ Заявка подана! Ожидайте подтверждения администратора.",
        reply_markup=back_kb(f"ev:{event_id}")
    )
