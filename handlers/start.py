from aiogram import Router, types
from aiogram.exceptions import TelegramForbiddenError
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from logger import app_logger
from utils.formatting import main_menu_text
from utils.keyboards import main_menu_kb

router = Router()

@router.message(Command('start'))
async def start_cmd(message: types.Message, state: FSMContext, admin_ids: frozenset[int]):
    user = message.from_user

    if user is None:
        await message.answer("Ошибка: не удалось определить пользователя.")
        return

    await state.clear()
    is_admin = user.id in admin_ids

    try:
        await message.answer(
            f"Привет, {user.first_name}! 👋\n\n{main_menu_text(is_admin)}",
            reply_markup=main_menu_kb(is_admin)
        )
        app_logger.info(f"✅ Пользователь зашёл в бота: {user.id} | @{user.username or '-'} | is_admin={is_admin}")
    except TelegramForbiddenError:
        app_logger.warning(f"❌ Пользователь {user.id} заблокировал бота.")
