from typing import Optional
import asyncio
import logging

from models.geo import GeoPoint
from models.location import LocationPolicy, LocationReading
from services.location.errors import (
    LocationError,
    LocationTimeoutError,
    PositionUnavailableError,
)
from services.location.geocoding import geocode_place
from services.location.tracker import LocationTracker

logger = logging.getLogger(__name__)


class LocationSource:
    """Something that can produce the user's current location."""
    name = "unknown"

    async def read(self, policy: LocationPolicy) -> LocationReading:
        raise NotImplementedError


class StaticLocationSource(LocationSource):
    """A reading the client already took from its own location sensor."""
    name = "device"

    def __init__(self, point: GeoPoint, accuracy_m: Optional[float] = None):
        self.point = point
        self.accuracy_m = accuracy_m

    async def read(self, policy: LocationPolicy) -> LocationReading:
        return LocationReading(point=self.point, accuracy_m=self.accuracy_m, source=self.name)


class GeocoderLocationSource(LocationSource):
    """Resolves a typed place name (e.g. 'Kathmandu') to coordinates via Nominatim."""
    name = "geocoder"

    def __init__(self, query: str, geolocator=None):
        self.query = query
        self.geolocator = geolocator

    async def read(self, policy: LocationPolicy) -> LocationReading:
        point = await geocode_place(self.query, geolocator=self.geolocator)
        if point is None:
            raise PositionUnavailableError(f"No location found for '{self.query}'")
        return LocationReading(point=point, source=self.name)


class LocationService:
    """
    Acquires the user's location under a timeout and max-age policy.

    Lookups are sequenced through a tracker (the in-process LocationTracker, or
    a RedisLocationStore's UserLocationTracker in the API), so when two lookups
    overlap only the most recently started one is committed. Failures are
    raised once; nothing is retried automatically.
    """

    def __init__(self, tracker=None, policy: Optional[LocationPolicy] = None):
        self.tracker = tracker or LocationTracker()
        self.policy = policy or LocationPolicy()

    async def current(self) -> Optional[LocationReading]:
        return await self.tracker.current()

    async def acquire(self, source: LocationSource, force: bool = False) -> LocationReading:
        if not force and await self.tracker.is_fresh(self.policy.maximum_age_seconds):
            return await self.tracker.current()

        token = await self.tracker.begin()
        try:
            reading = await asyncio.wait_for(source.read(self.policy), timeout=self.policy.timeout_seconds)
        except asyncio.TimeoutError:
            error = LocationTimeoutError()
            await self.tracker.fail(token, error)
            logger.warning(f"Location lookup from {source.name} timed out after {self.policy.timeout_seconds}s")
            raise error
        except LocationError as e:
            await self.tracker.fail(token, e)
            logger.warning(f"Location lookup from {source.name} failed: {e.code}")
            raise

        if await self.tracker.commit(token, reading):
            return reading
        # A newer lookup was started while this one was pending
        return await self.tracker.current() or reading

    async def reset(self) -> None:
        await self.tracker.clear()
