from domain.models import (
    CreateEventInput,
    CreateLocationInput,
    Event,
    EventRegistration,
    EventType,
    Location,
    PendingSummary,
    RegistrationStatus,
    RegistrationWithUser,
    UpdateEventInput,
    UpdateLocationInput,
    User,
)

__all__ = [
    "Event",
    "EventRegistration",
    "EventType",
    "RegistrationStatus",
    "Location",
    "User",
    "CreateEventInput",
    "UpdateEventInput",
    "CreateLocationInput",
    "UpdateLocationInput",
    "RegistrationWithUser",
    "PendingSummary",
]
