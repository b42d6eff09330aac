from aiogram.exceptions import TelegramBadRequest
from aiogram.types import InlineKeyboardMarkup, Message


async def safe_edit_text(message: Message, text: str, reply_markup: InlineKeyboardMarkup | None = None) -> None:
    """Edit the message in place.

    "message is not modified" is ignored. Any other edit failure (for
    example the message is a document) falls back to a fresh message.
    """
    try:
        await message.edit_text(text, reply_markup=reply_markup)
    except TelegramBadRequest as exc:
        if "message is not modified" in str(exc):
            return
        await message.delete()
        await message.answer(text, reply_markup=reply_markup)
