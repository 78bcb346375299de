from fastapi import Depends
from typing import Annotated

from dependencies.redis import RedisDependency
from services.location.store import RedisLocationStore

def get_location_store(redis_client: RedisDependency) -> RedisLocationStore:
    return RedisLocationStore(redis_client)

LocationStoreDependency = Annotated[RedisLocationStore, Depends(get_location_store)]
