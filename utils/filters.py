from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery, Message


class IsAdmin(BaseFilter):
    """Passes only for Telegram ids listed in ADMIN_IDS.

    ``admin_ids`` comes from the dispatcher workflow data.
    """

    async def __call__(self, event: Message | CallbackQuery, admin_ids: frozenset[int]) -> bool:
        user = event.from_user
        return user is not None and user.id in admin_ids
