from typing import Optional
import logging
import redis.asyncio as aioredis
from redis.exceptions import WatchError

from models.location import LocationReading
from services.location.errors import LocationError
from core.config import LOCATION_TTL_SECONDS

logger = logging.getLogger(__name__)


def location_key(user_id: str) -> str:
    return f"location:{user_id}"


def generation_key(user_id: str) -> str:
    return f"location:{user_id}:generation"


class RedisLocationStore:
    """
    Per-user location state kept in Redis, shared by every API worker.

    begin() bumps a generation counter and hands the new value back as the
    request token. commit() writes the reading only if the counter still holds
    that token, inside a WATCH/MULTI transaction, so an older lookup finishing
    late cannot replace a newer one.
    """

    def __init__(self, redis_client: aioredis.Redis, ttl_seconds: int = LOCATION_TTL_SECONDS):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds

    async def begin(self, user_id: str) -> int:
        key = generation_key(user_id)
        token = await self.redis.incr(key)
        await self.redis.expire(key, self.ttl_seconds)
        return int(token)

    async def latest_token(self, user_id: str) -> int:
        value = await self.redis.get(generation_key(user_id))
        return int(value) if value is not None else 0

    async def commit(self, user_id: str, token: int, reading: LocationReading) -> bool:
        gen_key = generation_key(user_id)
        async with self.redis.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(gen_key)
                latest = await pipe.get(gen_key)
                if latest is None or int(latest) != token:
                    await pipe.unwatch()
                    logger.info(f"Discarding stale location for user {user_id}: token {token}, latest {latest}")
                    return False
                pipe.multi()
                pipe.setex(location_key(user_id), self.ttl_seconds, reading.model_dump_json())
                await pipe.execute()
                return True
            except WatchError:
                logger.info(f"Location for user {user_id} changed during commit of token {token}")
                return False

    async def current(self, user_id: str) -> Optional[LocationReading]:
        data = await self.redis.get(location_key(user_id))
        if not data:
            return None
        return LocationReading.model_validate_json(data)

    async def clear(self, user_id: str) -> None:
        # Bumping the generation invalidates lookups still in flight
        await self.redis.incr(generation_key(user_id))
        await self.redis.delete(location_key(user_id))

    def for_user(self, user_id: str) -> "UserLocationTracker":
        return UserLocationTracker(self, user_id)


class UserLocationTracker:
    """
    One user's slice of a RedisLocationStore, with the same interface as the
    in-process LocationTracker so LocationService can sequence lookups across
    API workers. Remembers the last token it issued and whether it committed.
    """

    def __init__(self, store: RedisLocationStore, user_id: str):
        self.store = store
        self.user_id = user_id
        self.token: Optional[int] = None
        self.committed = False

    async def begin(self) -> int:
        self.token = await self.store.begin(self.user_id)
        self.committed = False
        return self.token

    async def commit(self, token: int, reading: LocationReading) -> bool:
        self.committed = await self.store.commit(self.user_id, token, reading)
        return self.committed

    async def fail(self, token: int, error: LocationError) -> bool:
        latest = await self.store.latest_token(self.user_id)
        if token != latest:
            logger.info(f"Ignoring {error.code} for stale token {token} of user {self.user_id} (latest {latest})")
            return False
        logger.warning(f"Location lookup failed for user {self.user_id}: {error.code}")
        return True

    async def current(self) -> Optional[LocationReading]:
        return await self.store.current(self.user_id)

    async def is_fresh(self, maximum_age_seconds: float) -> bool:
        reading = await self.current()
        return reading is not None and reading.age_seconds() <= maximum_age_seconds

    async def clear(self) -> None:
        await self.store.clear(self.user_id)
