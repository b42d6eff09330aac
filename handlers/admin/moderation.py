from aiogram import Bot, Router
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.types import CallbackQuery

from domain import Event, RegistrationWithUser
from domain.errors import DomainError, EventNotFoundError
from logger import app_logger
from services.events import EventService
from services.moderation import ModerationService
from utils.filters import IsAdmin
from utils.formatting import (
    decision_notice,
    error_text,
    moderation_list_text,
    pending_list_text,
    registration_text,
)
from utils.keyboards import back_kb, moderation_kb, pending_kb, registration_kb
from utils.safe_edit import safe_edit_text

router = Router()
router.message.filter(IsAdmin())
router.callback_query.filter(IsAdmin())


def parse_pair(data: str) -> tuple[str, int]:
    """``prefix:<event_id>:<user_id>`` -> (event_id, user_id)."""
    _, event_id, user_id = data.split(":")
    return event_id, int(user_id)


async def notify_user(bot: Bot, event: Event, row: RegistrationWithUser) -> None:
    try:
        await bot.send_message(row.user_id, decision_notice(event, row.registration.status))
    except (TelegramForbiddenError, TelegramBadRequest) as e:
        app_logger.warning(f"❌ Не удалось уведомить пользователя {row.user_id}: {e}")


# 📥 Заявки на модерацию
@router.callback_query(lambda c: c.data == "mod")
async def moderation_list(callback: CallbackQuery, moderation_service: ModerationService):
    await callback.answer()
    summaries = await moderation_service.events_needing_moderation()
    await safe_edit_text(callback.message, moderation_list_text(summaries), moderation_kb(summaries)) # type: ignore


@router.callback_query(lambda c: c.data and c.data.startswith("mod:"))
async def pending_list(callback: CallbackQuery, moderation_service: ModerationService):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        event, rows = await moderation_service.pending_with_users(event_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(callback.message, pending_list_text(event, rows), pending_kb(event, rows)) # type: ignore


@router.callback_query(lambda c: c.data and c.data.startswith("modreg:"))
async def registration_card(callback: CallbackQuery, moderation_service: ModerationService):
    try:
        event_id, user_id = parse_pair(callback.data) # type: ignore
        event, row = await moderation_service.registration_detail(event_id, user_id)
    except ValueError:
        await callback.answer("❌ Ошибка обработки запроса", show_alert=True)
        return
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer()
    await safe_edit_text(callback.message, registration_text(event, row), registration_kb(event.id, row)) # type: ignore


# ✅ / 🚫 Решение по заявке
@router.callback_query(lambda c: c.data and (c.data.startswith("modok:") or c.data.startswith("modno:")))
async def decide(
    callback: CallbackQuery,
    bot: Bot,
    moderation_service: ModerationService,
    event_service: EventService,
):
    approve = callback.data.startswith("modok:") # type: ignore
    try:
        event_id, user_id = parse_pair(callback.data) # type: ignore
    except ValueError:
        await callback.answer("❌ Ошибка обработки запроса", show_alert=True)
        return

    try:
        # решение не меняет название, дату и реквизиты оплаты
        event = await event_service.get_event(event_id)
        if approve:
            row = await moderation_service.approve(event_id, user_id)
        else:
            row = await moderation_service.reject(event_id, user_id)
    except DomainError as e:
        app_logger.info(f"⚠️ Решение не применено: событие {event_id} | пользователь {user_id} | {e}")
        await callback.answer(error_text(e), show_alert=True)
        return

    app_logger.info(
        f"🛡️ Админ {callback.from_user.id}: заявка {user_id} на {event_id} -> {row.registration.status.value}"
    )
    await callback.answer("✅ Подтверждено" if approve else "🚫 Отклонено")

    await notify_user(bot, event, row)

    try:
        event = await event_service.get_event(event_id)
    except EventNotFoundError as e:
        app_logger.warning(f"⚠️ Событие {event_id} удалено сразу после решения по заявке {user_id}")
        await safe_edit_text(callback.message, error_text(e), back_kb("mod")) # type: ignore
        return
    await safe_edit_text(callback.message, registration_text(event, row), registration_kb(event.id, row)) # type: ignore
