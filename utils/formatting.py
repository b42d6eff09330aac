"""Message texts (HTML parse mode).

Only strings are built here; keyboards live in utils/keyboards.py.
"""

from datetime import datetime

from aiogram.utils.text_decorations import html_decoration as hd

from domain import (
    Event,
    EventRegistration,
    EventType,
    Location,
    PendingSummary,
    RegistrationStatus,
    RegistrationWithUser,
)
from domain.errors import DomainError, ErrorCode

DATE_FORMAT = "%d.%m.%Y %H:%M"

EVENT_TYPE_TITLES = {
    EventType.TRAINING: "Тренировка",
    EventType.COMPETITION: "Соревнование",
}

STATUS_LABELS = {
    RegistrationStatus.PENDING: "⏳ ожидает подтверждения",
    RegistrationStatus.APPROVED: "✅ подтверждена",
    RegistrationStatus.REJECTED: "🚫 отклонена",
}

ERROR_TEXTS = {
    ErrorCode.LOCATION_NOT_FOUND: "Локация не найдена",
    ErrorCode.EVENT_NOT_FOUND: "Событие не найдено",
    ErrorCode.USER_NOT_FOUND: "Профиль не найден",
    ErrorCode.REGISTRATION_NOT_FOUND: "Заявка не найдена",
    ErrorCode.EVENT_FULL: "Свободных мест нет",
    ErrorCode.ALREADY_REGISTERED: "Вы уже подали заявку на это событие",
    ErrorCode.ALREADY_APPROVED: "Заявка уже подтверждена",
    ErrorCode.ALREADY_REJECTED: "Заявка уже отклонена",
    ErrorCode.INVALID_TRANSITION: "Отклонённую заявку нельзя подтвердить",
    ErrorCode.STORAGE_ERROR: "Ошибка сервера, попробуйте позже",
}

# тексты ValidationError, которые показываем пользователю по-русски
VALIDATION_TEXTS = {
    "Event date cannot be in the past": "Дата события не может быть в прошлом",
    "Invalid date format, expected DD.MM.YYYY HH:MM": (
        "Неверный формат даты. Используйте формат:\n📅 ДД.ММ.ГГГГ ЧЧ:ММ\n\nПример: 15.01.2026 18:00"
    ),
    "Value must be greater than 0": "Введите положительное число",
    "Price cannot be negative": "Стоимость не может быть отрицательной",
    "Capacity must be greater than 0": "Количество мест должно быть больше нуля",
    "Event name is required": "Название события не может быть пустым",
    "Location name is required": "Название локации не может быть пустым",
    "Location address is required": "Адрес локации обязателен",
    "User name is required": "Имя не может быть пустым",
}


def error_text(error: DomainError) -> str:
    """User-facing text for a domain error: ⚠️ for warnings, ❌ for failures."""
    icon = "⚠️" if error.is_warning else "❌"
    if error.code == ErrorCode.VALIDATION_ERROR:
        message = VALIDATION_TEXTS.get(error.message)
        if message is None and error.message.startswith("Not a number"):
            message = "Введите число"
        if message is None and error.message.startswith("Capacity cannot be lower"):
            message = "Мест не может быть меньше, чем уже подтверждённых участников"
        return f"{icon} {message or error.message}"
    return f"{icon} {ERROR_TEXTS.get(error.code, error.message)}"


def format_date(date: datetime) -> str:
    return date.strftime(DATE_FORMAT)


def event_type_title(event_type: EventType) -> str:
    return EVENT_TYPE_TITLES[event_type]


def main_menu_text(is_admin: bool = False) -> str:
    text = "🏋️ Выберите действие:"
    if is_admin:
        text += "\n\n🔧 Для управления используйте /admin"
    return text


def admin_menu_text() -> str:
    return "🔧 <b>Панель администратора</b>\n\nВыберите действие:"


def location_text(location: Location) -> str:
    lines = [f"📍 <b>{hd.quote(location.name)}</b>"]
    if location.address:
        lines.append(f"🏠 Адрес: {hd.quote(location.address)}")
    if location.description:
        lines.append(f"\n{hd.quote(location.description)}")
    return "\n".join(lines)


def location_created_text(location: Location) -> str:
    text = "✅ Локация успешно создана!\n\n" + location_text(location)
    if location.map_url:
        text += f"\n🗺️ Карта: {hd.quote(location.map_url)}"
    return text + f"\n🔑 ID: <code>{location.id}</code>"


def event_button_text(event: Event) -> str:
    return f"{event.date.strftime('%d.%m %H:%M')} · {event.name} ({event.remaining}/{event.capacity})"


def event_text(
    event: Event,
    location: Location | None = None,
    registration: EventRegistration | None = None,
) -> str:
    """Event card. ``registration`` is the viewer's own, shown as a status line."""
    lines = [
        f"📅 <b>{hd.quote(event.name)}</b>",
        f"🏷️ {event_type_title(event.type)}",
        f"🗓️ Дата: {format_date(event.date)}",
    ]
    if location is not None:
        lines.append(f"📍 Локация: {hd.quote(location.name)}")
    if event.trainer:
        lines.append(f"👨‍🏫 Тренер: {hd.quote(event.trainer)}")
    lines.append(f"👥 Свободно мест: {event.remaining} из {event.capacity}")
    if event.price is not None:
        lines.append(f"💰 Стоимость: {event.price} ₽")
    if event.payment_phone:
        lines.append(f"📱 Оплата по номеру: {hd.quote(event.payment_phone)}")
    if event.description:
        lines.append(f"\n{hd.quote(event.description)}")
    if registration is not None:
        lines.append(f"\n📝 Ваша заявка: {STATUS_LABELS[registration.status]}")
    return "\n".join(lines)


def admin_event_text(event: Event, location: Location | None = None) -> str:
    pending = len(event.registrations_with_status(RegistrationStatus.PENDING))
    return (
        event_text(event, location)
        + f"\n\n✅ Подтверждено: {event.approved_count}"
        + f"\n⏳ Ожидают: {pending}"
        + f"\n🔑 ID: <code>{event.id}</code>"
    )


def event_created_text(event: Event) -> str:
    return (
        f"✅ {event_type_title(event.type)} успешно создано!\n\n"
        f"📅 Название: {hd.quote(event.name)}\n"
        f"🗓️ Дата: {format_date(event.date)}\n"
        f"👥 Мест: {event.capacity}\n"
        f"👨‍🏫 Тренер: {hd.quote(event.trainer) or '-'}\n"
        f"🔑 ID: <code>{event.id}</code>"
    )


def events_list_text(events: list[Event], title: str = "📅 События") -> str:
    if not events:
        return f"{title}\n\nПока нет запланированных событий."
    return f"{title}\n\nВыберите событие:"


def participants_text(event: Event, rows: list[RegistrationWithUser]) -> str:
    header = (
        f"👥 <b>{hd.quote(event.name)}</b> · {format_date(event.date)}\n"
        f"Подтверждено {event.approved_count} из {event.capacity}"
    )
    if not rows:
        return header + "\n\nПока никто не записался."

    lines = [header, ""]
    for num, row in enumerate(rows, 1):
        icon = STATUS_LABELS[row.registration.status].split(" ", 1)[0]
        lines.append(f"{num}. {icon} {hd.quote(row.display_name)}")
    return "\n".join(lines)


def moderation_list_text(summaries: list[PendingSummary]) -> str:
    if not summaries:
        return "✅ Нет заявок, ожидающих подтверждения."
    total = sum(summary.pending_count for summary in summaries)
    return f"📋 <b>Заявки на модерацию</b>\n\nВсего ожидают: {total}"


def pending_list_text(event: Event, rows: list[RegistrationWithUser]) -> str:
    header = (
        f"⏳ <b>{hd.quote(event.name)}</b> · {format_date(event.date)}\n"
        f"Свободно мест: {event.remaining} из {event.capacity}"
    )
    if not rows:
        return header + "\n\nНет заявок, ожидающих подтверждения."
    return header + f"\n\nОжидают: {len(rows)}. Выберите заявку:"


def registration_text(event: Event, row: RegistrationWithUser) -> str:
    reg = row.registration
    lines = [
        f"📝 Заявка на <b>{hd.quote(event.name)}</b>",
        f"🗓️ {format_date(event.date)}",
        "",
        f"👤 {hd.quote(row.display_name)}",
        f"🆔 <code>{reg.user_id}</code>",
        f"📌 Статус: {STATUS_LABELS[reg.status]}",
        f"🕒 Подана: {format_date(reg.created_at)}",
        "",
        f"👥 Свободно мест: {event.remaining} из {event.capacity}",
    ]
    return "\n".join(lines)


def decision_notice(event: Event, status: RegistrationStatus) -> str:
    """Message sent to the user after a moderator decision."""
    if status == RegistrationStatus.APPROVED:
        text = f"✅ Ваша заявка на <b>{hd.quote(event.name)}</b> ({format_date(event.date)}) подтверждена!"
        if event.payment_phone:
            text += f"\n\n📱 Оплата по номеру: {hd.quote(event.payment_phone)}"
            if event.price is not None:
                text += f"\n💰 Стоимость: {event.price} ₽"
        return text
    return f"🚫 Ваша заявка на <b>{hd.quote(event.name)}</b> ({format_date(event.date)}) отклонена."
