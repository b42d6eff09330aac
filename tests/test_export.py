from datetime import datetime
from io import BytesIO

from openpyxl import load_workbook

from domain import Event, EventRegistration, EventType, RegistrationStatus, RegistrationWithUser, User
from services.export import build_roster_workbook

NOW = datetime(2026, 1, 10, 12, 0)


def test_roster_workbook_has_a_row_per_registration_and_a_summary():
    regs = {
        1: EventRegistration(1, RegistrationStatus.APPROVED, NOW, NOW),
        2: EventRegistration(2, RegistrationStatus.PENDING, NOW, NOW),
    }
    event = Event(
        id="e1",
        name="Кубок клуба",
        type=EventType.COMPETITION,
        date=datetime(2026, 2, 1, 10, 0),
        capacity=3,
        location_id="l1",
        created_at=NOW,
        updated_at=NOW,
        registrations=regs,
    )
    rows = [
        RegistrationWithUser(regs[1], User(telegram_id=1, name="Анна", surname="Петрова")),
        RegistrationWithUser(regs[2]),
    ]

    content = build_roster_workbook(event, rows, location_name="Арена")
    ws = load_workbook(BytesIO(content)).active

    values = list(ws.iter_rows(values_only=True))
    assert ws.title == "Участники"
    assert values[0][:4] == ("Фамилия", "Имя", "Telegram ID", "Статус")
    assert values[1][:4] == ("Петрова", "Анна", 1, "Подтверждён")
    assert values[2][2:4] == (2, "Ожидает")

    flat = [cell for row in values for cell in row if cell is not None]
    assert "Кубок клуба" in flat
    assert "Арена" in flat
