import asyncio

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties

from config import load_settings
from database.db import init_db, make_engine, make_session_factory
from handlers import common, events, locations, profile, start
from handlers.admin import routers as admin_routers
from logger import app_logger, setup_logging
from services.events import EventService
from services.locations import LocationService
from services.locks import EventLocks
from services.moderation import ModerationService
from services.users import UserService
from stores.sqlalchemy_store import (
    SQLAlchemyEventStore,
    SQLAlchemyLocationStore,
    SQLAlchemyUserStore,
)
from utils.session_storage import ExpiringMemoryStorage

settings = load_settings()
setup_logging(settings.log_dir)
app_logger.info("Бот запускается...")

engine = make_engine(settings.database_url)
session_factory = make_session_factory(engine)

location_service = LocationService(
    SQLAlchemyLocationStore(session_factory),
    address_required=settings.location_address_required,
)
user_service = UserService(SQLAlchemyUserStore(session_factory))
event_service = EventService(
    SQLAlchemyEventStore(session_factory),
    location_service,
    locks=EventLocks(),
    reject_requests_when_full=settings.reject_requests_when_full,
)
moderation_service = ModerationService(event_service, user_service)

bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode="HTML"))
dp = Dispatcher(
    storage=ExpiringMemoryStorage(ttl=settings.wizard_ttl_seconds),
    settings=settings,
    admin_ids=settings.admin_ids,
    location_service=location_service,
    user_service=user_service,
    event_service=event_service,
    moderation_service=moderation_service,
)

dp.include_router(start.router)
dp.include_router(common.router)
for router in admin_routers:
    dp.include_router(router)
dp.include_router(profile.router)
dp.include_router(locations.router)
dp.include_router(events.router)


async def main():
    await init_db(engine)
    app_logger.info("Бот запущен ✅")
    try:
        await dp.start_polling(bot)
    finally:
        await engine.dispose()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        app_logger.info("⛔ Бот остановлен вручную.")
