"""Location registry."""

from dataclasses import replace
from uuid import uuid4

from domain import CreateLocationInput, Location, UpdateLocationInput
from domain.errors import LocationNotFoundError, ValidationError
from logger import app_logger
from stores.interfaces import LocationStore


class LocationService:
    """CRUD over venues."""

    def __init__(self, store: LocationStore, *, address_required: bool = False) -> None:
        self._store = store
        self._address_required = address_required

    async def get(self, location_id: str) -> Location:
        location = await self._store.get_location(location_id)
        if location is None:
            raise LocationNotFoundError(location_id)
        return location

    async def list_locations(self) -> list[Location]:
        return await self._store.list_locations()

    async def find_by_name(self, name: str) -> Location | None:
        wanted = name.strip().casefold()
        for location in await self._store.list_locations():
            if location.name.casefold() == wanted:
                return location
        return None

    async def create(self, data: CreateLocationInput) -> Location:
        location = Location(
            id=str(uuid4()),
            name=data.name.strip(),
            address=data.address.strip(),
            map_url=data.map_url.strip(),
            description=data.description.strip(),
        )
        self._validate(location)

        await self._store.save_location(location)
        app_logger.info(f"📍 Локация создана: '{location.name}' ({location.id})")
        return location

    async def update(self, location_id: str, data: UpdateLocationInput) -> Location:
        location = await self.get(location_id)
        changes = {
            key: value.strip()
            for key, value in (
                ("name", data.name),
                ("address", data.address),
                ("map_url", data.map_url),
                ("description", data.description),
            )
            if value is not None
        }
        location = replace(location, **changes)
        self._validate(location)

        await self._store.save_location(location)
        return location

    async def delete(self, location_id: str) -> None:
        if not await self._store.delete_location(location_id):
            raise LocationNotFoundError(location_id)
        app_logger.info(f"🗑️ Локация удалена: {location_id}")

    def _validate(self, location: Location) -> None:
        if not location.name:
            raise ValidationError("Location name is required")
        if self._address_required and not location.address:
            raise ValidationError("Location address is required")
