"""User directory: Telegram id -> stored profile."""

from collections.abc import Callable, Iterable
from datetime import datetime

from domain import User
from domain.errors import UserNotFoundError, ValidationError
from logger import app_logger
from stores.interfaces import UserStore


class UserService:
    def __init__(self, store: UserStore, clock: Callable[[], datetime] = datetime.now) -> None:
        self._store = store
        self._clock = clock

    async def get_by_telegram_id(self, telegram_id: int) -> User:
        user = await self._store.get_user_by_telegram_id(telegram_id)
        if user is None:
            raise UserNotFoundError(telegram_id)
        return user

    async def exists(self, telegram_id: int) -> bool:
        return await self._store.get_user_by_telegram_id(telegram_id) is not None

    async def get_many(self, telegram_ids: Iterable[int]) -> dict[int, User]:
        return await self._store.get_users_by_telegram_ids(telegram_ids)

    async def upsert(self, telegram_id: int, name: str, surname: str = "") -> User:
        """Create the profile, or overwrite name and surname if it exists."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("User name is required")

        now = self._clock()
        user = await self._store.save_user(
            User(
                telegram_id=telegram_id,
                name=name,
                surname=(surname or "").strip(),
                created_at=now,
                updated_at=now,
            )
        )
        app_logger.info(f"👤 Профиль сохранён: {telegram_id} | {user.full_name}")
        return user
