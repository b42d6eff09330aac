"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
Missing rows come back as ``None``; services turn that into domain errors.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from domain import Event, EventType, Location, User


class LocationStore(ABC):
    """Interface for location persistence operations."""

    @abstractmethod
    async def get_location(self, location_id: str) -> Location | None:
        ...

    @abstractmethod
    async def list_locations(self) -> list[Location]:
        """Return all locations ordered by name."""
        ...

    @abstractmethod
    async def save_location(self, location: Location) -> None:
        """Insert or update a location by its id."""
        ...

    @abstractmethod
    async def delete_location(self, location_id: str) -> bool:
        """Delete a location. Returns False if it did not exist."""
        ...


class UserStore(ABC):
    """Interface for the user directory."""

    @abstractmethod
    async def get_user_by_telegram_id(self, telegram_id: int) -> User | None:
        ...

    @abstractmethod
    async def get_users_by_telegram_ids(self, telegram_ids: Iterable[int]) -> dict[int, User]:
        ...

    @abstractmethod
    async def save_user(self, user: User) -> User:
        """Insert or overwrite name/surname for ``user.telegram_id``."""
        ...


class EventStore(ABC):
    """Interface for event aggregate persistence.

    Every returned event carries its full registration map.
    Soft-deleted events are never returned.
    """

    @abstractmethod
    async def get_event(self, event_id: str) -> Event | None:
        ...

    @abstractmethod
    async def list_events(self, event_type: EventType | None = None) -> list[Event]:
        """Return all events ordered by date ascending."""
        ...

    @abstractmethod
    async def list_events_by_location(self, location_id: str) -> list[Event]:
        ...

    @abstractmethod
    async def list_events_by_user(self, user_id: int) -> list[Event]:
        """Events where the user holds a registration of any status."""
        ...

    @abstractmethod
    async def save_event(self, event: Event) -> None:
        """Upsert the event row and sync its registrations in one transaction."""
        ...

    @abstractmethod
    async def delete_event(self, event_id: str) -> bool:
        """Drop registrations and soft-delete the event in one transaction.

        Returns False if the event did not exist.
        """
        ...
