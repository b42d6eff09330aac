"""Excel roster for an event (openpyxl)."""

from io import BytesIO

from openpyxl import Workbook

from domain import Event, RegistrationStatus, RegistrationWithUser

STATUS_TITLES = {
    RegistrationStatus.APPROVED: "Подтверждён",
    RegistrationStatus.PENDING: "Ожидает",
    RegistrationStatus.REJECTED: "Отклонён",
}


def build_roster_workbook(
    event: Event,
    rows: list[RegistrationWithUser],
    location_name: str = "",
) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Участники"

    # 🔠 Заголовки
    ws.append(["Фамилия", "Имя", "Telegram ID", "Статус", "Заявка подана"])

    ws.column_dimensions["A"].width = 24
    ws.column_dimensions["B"].width = 20
    ws.column_dimensions["C"].width = 16
    ws.column_dimensions["D"].width = 14
    ws.column_dimensions["E"].width = 20

    for row in rows:
        user = row.user
        ws.append([
            user.surname if user else "",
            user.name if user else "",
            row.user_id,
            STATUS_TITLES[row.registration.status],
            row.registration.created_at.strftime("%d.%m.%Y %H:%M"),
        ])

    pending = len(event.registrations_with_status(RegistrationStatus.PENDING))

    # 🧮 Итоги по событию
    ws.append([])
    ws.append(["Событие", event.name])
    ws.append(["Дата", event.date.strftime("%d.%m.%Y %H:%M")])
    if location_name:
        ws.append(["Локация", location_name])
    ws.append(["Мест всего", event.capacity])
    ws.append(["Подтверждено", event.approved_count])
    ws.append(["Свободно", event.remaining])
    ws.append(["Ожидают", pending])

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
