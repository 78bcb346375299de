import redis.asyncio as redis
from fastapi import Depends
from typing import Annotated, AsyncGenerator

from core.config import REDIS_URL

async def get_redis() -> AsyncGenerator[redis.Redis, None]:
    """Get a Redis client instance."""
    redis_client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    try:
        yield redis_client
    finally:
        await redis_client.close()

RedisDependency = Annotated[redis.Redis, Depends(get_redis)]
