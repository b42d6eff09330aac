"""Domain error codes for the registration engine and its registries.

Services raise these; handlers catch ``DomainError`` and render it.
``is_warning`` marks state-machine guards where nothing changed and the
caller's intent is already satisfied (or cannot apply).
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    EVENT_FULL = "EVENT_FULL"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    ALREADY_APPROVED = "ALREADY_APPROVED"
    ALREADY_REJECTED = "ALREADY_REJECTED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    STORAGE_ERROR = "STORAGE_ERROR"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    is_warning: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input does not satisfy creation or update rules."""

    code = ErrorCode.VALIDATION_ERROR


class NotFoundError(DomainError):
    """Base for missing entities."""


class LocationNotFoundError(NotFoundError):
    code = ErrorCode.LOCATION_NOT_FOUND

    def __init__(self, location_id: str) -> None:
        super().__init__("Location not found")
        self.location_id = location_id


class EventNotFoundError(NotFoundError):
    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class UserNotFoundError(NotFoundError):
    code = ErrorCode.USER_NOT_FOUND

    def __init__(self, telegram_id: int) -> None:
        super().__init__("User not found")
        self.telegram_id = telegram_id


class RegistrationNotFoundError(NotFoundError):
    code = ErrorCode.REGISTRATION_NOT_FOUND

    def __init__(self, event_id: str, user_id: int) -> None:
        super().__init__("Registration not found")
        self.event_id = event_id
        self.user_id = user_id


class EventFullError(DomainError):
    """Raised when no seat is left for an approval."""

    code = ErrorCode.EVENT_FULL

    def __init__(self, event_id: str) -> None:
        super().__init__("Event is full")
        self.event_id = event_id


class StateConflictError(DomainError):
    """Registration is already in a state that makes the request moot."""

    is_warning = True

    def __init__(self, event_id: str, user_id: int, message: str) -> None:
        super().__init__(message)
        self.event_id = event_id
        self.user_id = user_id


class AlreadyRegisteredError(StateConflictError):
    code = ErrorCode.ALREADY_REGISTERED

    def __init__(self, event_id: str, user_id: int) -> None:
        super().__init__(event_id, user_id, "User is already registered for this event")


class AlreadyApprovedError(StateConflictError):
    code = ErrorCode.ALREADY_APPROVED

    def __init__(self, event_id: str, user_id: int) -> None:
        super().__init__(event_id, user_id, "Registration already approved")


class AlreadyRejectedError(StateConflictError):
    code = ErrorCode.ALREADY_REJECTED

    def __init__(self, event_id: str, user_id: int) -> None:
        super().__init__(event_id, user_id, "Registration already rejected")


class InvalidTransitionError(StateConflictError):
    code = ErrorCode.INVALID_TRANSITION

    def __init__(self, event_id: str, user_id: int) -> None:
        super().__init__(event_id, user_id, "Cannot approve a rejected registration")


class StorageError(DomainError):
    """Persistence failure. Not retried by the engine."""

    code = ErrorCode.STORAGE_ERROR
