import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///database/bot.db"


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def parse_admin_ids(raw: str | None) -> frozenset[int]:
    """Разбираем ADMIN_IDS вида "123, 456" в множество id."""
    if not raw:
        return frozenset()
    return frozenset(int(i.strip()) for i in raw.split(",") if i.strip().isdigit())


@dataclass(frozen=True)
class Settings:
    bot_token: str
    admin_ids: frozenset[int]
    database_url: str = DEFAULT_DATABASE_URL
    location_address_required: bool = False
    payment_details_enabled: bool = True
    reject_requests_when_full: bool = False
    wizard_ttl_seconds: int = 1800
    log_dir: str = "logs"


def load_settings() -> Settings:
    return Settings(
        bot_token=os.getenv("BOT_TOKEN") or "",
        admin_ids=parse_admin_ids(os.getenv("ADMIN_IDS")),
        database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
        location_address_required=_flag("LOCATION_ADDRESS_REQUIRED", False),
        payment_details_enabled=_flag("PAYMENT_DETAILS_ENABLED", True),
        reject_requests_when_full=_flag("REJECT_REQUESTS_WHEN_FULL", False),
        wizard_ttl_seconds=int(os.getenv("WIZARD_TTL_SECONDS") or 1800),
        log_dir=os.getenv("LOG_DIR") or "logs",
    )
