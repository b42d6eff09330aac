"""Domain models for locations, users and events.

These are plain dataclasses with no persistence concerns.
SQLAlchemy ORM models are in database/models.py.

``Event`` is the aggregate: it owns its registrations (keyed by Telegram
user id) and is the only place where registration status changes.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from domain.errors import (
    AlreadyApprovedError,
    AlreadyRegisteredError,
    AlreadyRejectedError,
    EventFullError,
    InvalidTransitionError,
    RegistrationNotFoundError,
    ValidationError,
)


class EventType(str, Enum):
    TRAINING = "training"
    COMPETITION = "competition"


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Location:
    """Domain representation of a venue."""

    id: str
    name: str
    address: str = ""
    map_url: str = ""
    description: str = ""


@dataclass(frozen=True)
class User:
    """Club member profile, keyed by Telegram user id."""

    telegram_id: int
    name: str
    surname: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}".strip()


@dataclass(frozen=True)
class EventRegistration:
    user_id: int
    status: RegistrationStatus
    created_at: datetime
    updated_at: datetime


@dataclass
class Event:
    """Event aggregate with its registrations.

    ``remaining`` is derived state: it is recomputed from ``registrations``
    every time the aggregate is loaded or changed, never taken from storage.
    """

    id: str
    name: str
    type: EventType
    date: datetime
    capacity: int
    location_id: str
    created_at: datetime
    updated_at: datetime
    trainer: str = ""
    description: str = ""
    payment_phone: str = ""
    price: int | None = None
    registrations: dict[int, EventRegistration] = field(default_factory=dict)
    remaining: int = 0

    def __post_init__(self) -> None:
        self.recalculate()

    @property
    def players(self) -> list[int]:
        """Approved user ids in approval order."""
        approved = [
            reg for reg in self.registrations.values()
            if reg.status == RegistrationStatus.APPROVED
        ]
        approved.sort(key=lambda reg: (reg.updated_at, reg.user_id))
        return [reg.user_id for reg in approved]

    @property
    def approved_count(self) -> int:
        return sum(
            1 for reg in self.registrations.values()
            if reg.status == RegistrationStatus.APPROVED
        )

    def recalculate(self) -> None:
        self.remaining = max(self.capacity - self.approved_count, 0)

    def registrations_with_status(self, status: RegistrationStatus) -> list[EventRegistration]:
        regs = [reg for reg in self.registrations.values() if reg.status == status]
        regs.sort(key=lambda reg: (reg.created_at, reg.user_id))
        return regs

    # --- state machine ---

    def request(self, user_id: int, now: datetime) -> EventRegistration:
        existing = self.registrations.get(user_id)
        if existing is not None and existing.status != RegistrationStatus.REJECTED:
            raise AlreadyRegisteredError(self.id, user_id)

        # rejected -> fresh pending row, timestamps reset
        reg = EventRegistration(
            user_id=user_id,
            status=RegistrationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self.registrations[user_id] = reg
        self.updated_at = now
        return reg

    def unregister(self, user_id: int, now: datetime) -> EventRegistration:
        reg = self.registrations.pop(user_id, None)
        if reg is None:
            raise RegistrationNotFoundError(self.id, user_id)
        self.updated_at = now
        self.recalculate()
        return reg

    def approve(self, user_id: int, now: datetime) -> EventRegistration:
        reg = self._require_registration(user_id)
        if reg.status == RegistrationStatus.APPROVED:
            raise AlreadyApprovedError(self.id, user_id)
        if reg.status == RegistrationStatus.REJECTED:
            raise InvalidTransitionError(self.id, user_id)
        self.recalculate()
        if self.remaining <= 0:
            raise EventFullError(self.id)

        reg = replace(reg, status=RegistrationStatus.APPROVED, updated_at=now)
        self.registrations[user_id] = reg
        self.updated_at = now
        self.recalculate()
        return reg

    def reject(self, user_id: int, now: datetime) -> EventRegistration:
        reg = self._require_registration(user_id)
        if reg.status == RegistrationStatus.REJECTED:
            raise AlreadyRejectedError(self.id, user_id)

        # approved -> rejected releases the seat through recalculate()
        reg = replace(reg, status=RegistrationStatus.REJECTED, updated_at=now)
        self.registrations[user_id] = reg
        self.updated_at = now
        self.recalculate()
        return reg

    def change_capacity(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValidationError("Capacity must be greater than 0")
        if capacity < self.approved_count:
            raise ValidationError(
                f"Capacity cannot be lower than approved registrations ({self.approved_count})"
            )
        self.capacity = capacity
        self.recalculate()

    def _require_registration(self, user_id: int) -> EventRegistration:
        reg = self.registrations.get(user_id)
        if reg is None:
            raise RegistrationNotFoundError(self.id, user_id)
        return reg


@dataclass(frozen=True)
class CreateLocationInput:
    name: str
    address: str = ""
    map_url: str = ""
    description: str = ""


@dataclass(frozen=True)
class UpdateLocationInput:
    name: str | None = None
    address: str | None = None
    map_url: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class CreateEventInput:
    name: str
    type: EventType
    date: datetime | None
    capacity: int
    location_id: str
    trainer: str = ""
    description: str = ""
    payment_phone: str = ""
    price: int | None = None

    def validate(self, now: datetime) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Event name is required")
        if not self.location_id:
            raise ValidationError("Location ID is required")
        if self.date is None:
            raise ValidationError("Event date is required")
        if self.date < now:
            raise ValidationError("Event date cannot be in the past")
        if self.capacity <= 0:
            raise ValidationError("Capacity must be greater than 0")
        if self.price is not None and self.price < 0:
            raise ValidationError("Price cannot be negative")


@dataclass(frozen=True)
class UpdateEventInput:
    name: str | None = None
    type: EventType | None = None
    date: datetime | None = None
    capacity: int | None = None
    trainer: str | None = None
    description: str | None = None
    payment_phone: str | None = None
    price: int | None = None


@dataclass(frozen=True)
class RegistrationWithUser:
    """Registration joined with the user directory for display."""

    registration: EventRegistration
    user: User | None = None

    @property
    def user_id(self) -> int:
        return self.registration.user_id

    @property
    def display_name(self) -> str:
        if self.user is None or not self.user.full_name:
            return f"id {self.registration.user_id}"
        return self.user.full_name


@dataclass(frozen=True)
class PendingSummary:
    event: Event
    pending_count: int
