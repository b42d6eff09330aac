from aiogram import Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from logger import app_logger
from utils.formatting import main_menu_text
from utils.keyboards import main_menu_kb
from utils.safe_edit import safe_edit_text

router = Router()

@router.callback_query(lambda c: c.data == "back_to_main")
async def back_to_main(callback: CallbackQuery, state: FSMContext, admin_ids: frozenset[int]):
    await state.clear()
    await callback.answer()

    is_admin = callback.from_user.id in admin_ids
    await safe_edit_text(callback.message, main_menu_text(is_admin), main_menu_kb(is_admin)) # type: ignore


@router.message(Command("cancel"))
async def cancel_cmd(message: Message, state: FSMContext, admin_ids: frozenset[int]):
    current = await state.get_state()
    await state.clear()
    if current is not None:
        app_logger.info(f"↩️ Мастер {current} отменён пользователем {message.from_user.id}") # type: ignore

    is_admin = message.from_user is not None and message.from_user.id in admin_ids
    await message.answer(
        f"🚫 Действие отменено.\n\n{main_menu_text(is_admin)}",
        reply_markup=main_menu_kb(is_admin)
    )
