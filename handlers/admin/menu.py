from aiogram import Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from logger import app_logger
from utils.filters import IsAdmin
from utils.formatting import admin_menu_text
from utils.keyboards import admin_menu_kb
from utils.safe_edit import safe_edit_text

router = Router()
router.message.filter(IsAdmin())
router.callback_query.filter(IsAdmin())


@router.message(Command("admin"))
async def admin_cmd(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(admin_menu_text(), reply_markup=admin_menu_kb())
    app_logger.info(f"🔧 Админ открыл панель: {message.from_user.id}") # type: ignore


@router.callback_query(lambda c: c.data == "admin")
async def admin_menu(callback: CallbackQuery, state: FSMContext):
    await state.clear()
    await callback.answer()
    await safe_edit_text(callback.message, admin_menu_text(), admin_menu_kb()) # type: ignore
