from aiogram import Router
from aiogram.types import BufferedInputFile, CallbackQuery
from aiogram.utils.text_decorations import html_decoration as hd

from domain.errors import DomainError
from handlers.events import location_or_none
from logger import app_logger
from services.export import build_roster_workbook
from services.locations import LocationService
from services.moderation import ModerationService
from utils.filters import IsAdmin
from utils.formatting import error_text

router = Router()
router.message.filter(IsAdmin())
router.callback_query.filter(IsAdmin())


# 📊 Экспорт списка участников в Excel
@router.callback_query(lambda c: c.data and c.data.startswith("adm_evxls:"))
async def export_roster(
    callback: CallbackQuery,
    moderation_service: ModerationService,
    location_service: LocationService,
):
    event_id = callback.data.split(":", 1)[1] # type: ignore
    try:
        event, rows = await moderation_service.participants(event_id)
    except DomainError as e:
        await callback.answer(error_text(e), show_alert=True)
        return

    await callback.answer("⏳ Готовлю файл...")
    location = await location_or_none(location_service, event)
    content = build_roster_workbook(event, rows, location.name if location else "")

    filename = f"roster_{event.date.strftime('%Y%m%d_%H%M')}.xlsx"
    await callback.message.answer_document( # type: ignore
        BufferedInputFile(content, filename=filename),
        caption=f"📊 Участники: {hd.quote(event.name)}"
    )
    app_logger.info(f"📤 Экспорт участников события {event.id} ({len(rows)} строк) | админ {callback.from_user.id}")
