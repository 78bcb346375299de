from typing import Optional
import itertools
import logging

from models.location import LocationReading
from services.location.errors import LocationError

logger = logging.getLogger(__name__)


class LocationTracker:
    """
    Keeps the latest committed location for one session.

    Every lookup takes a token from begin(). Only the holder of the newest token
    may commit, so a slow lookup that resolves after a newer one was started is
    dropped instead of overwriting the fresher result.

    The methods are coroutines so LocationService can drive this in-process
    tracker and the Redis-backed UserLocationTracker the same way.
    """

    def __init__(self):
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._current: Optional[LocationReading] = None
        self._last_error: Optional[LocationError] = None

    @property
    def latest_token(self) -> int:
        return self._latest_token

    @property
    def last_error(self) -> Optional[LocationError]:
        return self._last_error

    def is_latest(self, token: int) -> bool:
        return token == self._latest_token

    async def begin(self) -> int:
        self._latest_token = next(self._tokens)
        return self._latest_token

    async def commit(self, token: int, reading: LocationReading) -> bool:
        if not self.is_latest(token):
            logger.info(f"Discarding stale location result for token {token} (latest is {self._latest_token})")
            return False
        self._current = reading
        self._last_error = None
        return True

    async def fail(self, token: int, error: LocationError) -> bool:
        if not self.is_latest(token):
            return False
        self._last_error = error
        return True

    async def current(self) -> Optional[LocationReading]:
        return self._current

    async def is_fresh(self, maximum_age_seconds: float) -> bool:
        if self._current is None:
            return False
        return self._current.age_seconds() <= maximum_age_seconds

    async def clear(self) -> None:
        # Lookups still in flight must not commit after a reset
        self._latest_token = next(self._tokens)
        self._current = None
        self._last_error = None
