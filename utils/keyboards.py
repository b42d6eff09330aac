from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from domain import Event, EventRegistration, Location, PendingSummary, RegistrationStatus, RegistrationWithUser
from utils.formatting import event_button_text


def main_menu_kb(is_admin: bool = False) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text="📍 Локации", callback_data="locations")],
        [InlineKeyboardButton(text="📅 Все события", callback_data="events")],
        [InlineKeyboardButton(text="📝 Мои события", callback_data="my_events")],
    ]
    if is_admin:
        rows.append([InlineKeyboardButton(text="👨‍💼 Администратор", callback_data="admin")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def admin_menu_kb() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
            [InlineKeyboardButton(text="➕ Создать локацию", callback_data="adm_loc_new")],
            [InlineKeyboardButton(text="📋 Список локаций", callback_data="adm_locs")],
            [InlineKeyboardButton(text="🗓️ Создать событие", callback_data="adm_ev_new")],
            [InlineKeyboardButton(text="📂 События", callback_data="adm_evs")],
            [InlineKeyboardButton(text="📥 Заявки на модерацию", callback_data="mod")],
            *back_menu_button()
        ])


def back_menu_button() -> list[list[InlineKeyboardButton]]:
    return [[InlineKeyboardButton(text="🏠 Главное меню", callback_data="back_to_main")]]


def back_button(callback_to_return: str = "back_to_main") -> list[list[InlineKeyboardButton]]:
    return [[InlineKeyboardButton(text="🔙 Назад", callback_data=callback_to_return)]]


def back_kb(callback_to_return: str = "back_to_main") -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[*back_button(callback_to_return)])


# --- пользователь ---

def locations_kb(locations: list[Location], prefix: str = "loc", back: str = "back_to_main") -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        *[[InlineKeyboardButton(text=loc.name, callback_data=f"{prefix}:{loc.id}")]
          for loc in locations],
        *back_button(back)
    ])


def location_kb(location: Location) -> InlineKeyboardMarkup:
    rows = [[InlineKeyboardButton(text="📅 События", callback_data=f"locev:{location.id}")]]
    if location.map_url:
        rows.append([InlineKeyboardButton(text="🗺️ Открыть карту", url=location.map_url)])
    return InlineKeyboardMarkup(inline_keyboard=[*rows, *back_button("locations")])


def events_kb(events: list[Event], prefix: str = "ev", back: str = "back_to_main") -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        *[[InlineKeyboardButton(text=event_button_text(event), callback_data=f"{prefix}:{event.id}")]
          for event in events],
        *back_button(back)
    ])


def event_kb(event: Event, registration: EventRegistration | None, back: str = "events") -> InlineKeyboardMarkup:
    if registration is None or registration.status == RegistrationStatus.REJECTED:
        action = InlineKeyboardButton(text="✍️ Записаться", callback_data=f"evreg:{event.id}")
    else:
        action = InlineKeyboardButton(text="❌ Отменить запись", callback_data=f"evunreg:{event.id}")
    return InlineKeyboardMarkup(inline_keyboard=[
        [action],
        [InlineKeyboardButton(text="👥 Участники", callback_data=f"evusers:{event.id}")],
        *back_button(back)
    ])


# --- администратор ---

def admin_location_kb(location: Location) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🗑️ Удалить", callback_data=f"adm_locdel:{location.id}")],
        *back_button("adm_locs")
    ])


def admin_locations_kb(locations: list[Location]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        *[[InlineKeyboardButton(text=loc.name, callback_data=f"adm_loc:{loc.id}")]
          for loc in locations],
        [InlineKeyboardButton(text="➕ Создать локацию", callback_data="adm_loc_new")],
        *back_button("admin")
    ])


def event_type_kb() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="🏋️ Тренировка", callback_data="adm_evtype:training")],
        [InlineKeyboardButton(text="🏆 Соревнование", callback_data="adm_evtype:competition")],
        *back_button("admin")
    ])


def admin_events_filter_kb() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="📋 Все", callback_data="adm_evs:all")],
        [InlineKeyboardButton(text="🏋️ Тренировки", callback_data="adm_evs:training")],
        [InlineKeyboardButton(text="🏆 Соревнования", callback_data="adm_evs:competition")],
        *back_button("admin")
    ])


def admin_event_kb(event: Event) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="⏳ Заявки", callback_data=f"mod:{event.id}")],
        [InlineKeyboardButton(text="👥 Участники", callback_data=f"adm_evusers:{event.id}")],
        [InlineKeyboardButton(text="📊 Экспорт в Excel", callback_data=f"adm_evxls:{event.id}")],
        [InlineKeyboardButton(text="🗑️ Удалить", callback_data=f"adm_evdel:{event.id}")],
        *back_button("adm_evs")
    ])


def confirm_kb(yes_callback: str, no_callback: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[
        InlineKeyboardButton(text="✅ Да", callback_data=yes_callback),
        InlineKeyboardButton(text="❌ Нет", callback_data=no_callback),
    ]])


def moderation_kb(summaries: list[PendingSummary]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        *[[InlineKeyboardButton(
            text=f"{event_button_text(summary.event)} · ⏳ {summary.pending_count}",
            callback_data=f"mod:{summary.event.id}",
        )] for summary in summaries],
        *back_button("admin")
    ])


def pending_kb(event: Event, rows: list[RegistrationWithUser]) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        *[[InlineKeyboardButton(
            text=f"👤 {row.display_name}",
            callback_data=f"modreg:{event.id}:{row.user_id}",
        )] for row in rows],
        *back_button("mod")
    ])


def registration_kb(event_id: str, row: RegistrationWithUser) -> InlineKeyboardMarkup:
    status = row.registration.status
    actions = []
    if status == RegistrationStatus.PENDING:
        actions.append(InlineKeyboardButton(text="✅ Подтвердить", callback_data=f"modok:{event_id}:{row.user_id}"))
    if status != RegistrationStatus.REJECTED:
        actions.append(InlineKeyboardButton(text="🚫 Отклонить", callback_data=f"modno:{event_id}:{row.user_id}"))
    return InlineKeyboardMarkup(inline_keyboard=[
        *([actions] if actions else []),
        *back_button(f"mod:{event_id}")
    ])
