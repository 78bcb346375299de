from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Dict, Any, Tuple
import re
import logging

from core.config import STORE_COLLECTION
from models.store import Store
from services.base import BaseService

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "description", "address")


def search_query(search: str) -> Dict[str, Any]:
    """Mongo filter for active stores whose name, description or address contains the text."""
    query: Dict[str, Any] = {"is_active": True}
    if search and search.strip():
        pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
        query["$or"] = [{field: pattern} for field in SEARCH_FIELDS]
    return query


def maps_share_link(latitude: float, longitude: float) -> str:
    return f"https://maps.google.com/?q={latitude},{longitude}"


class StoreService(BaseService[Store]):
    """Store lookups backed by the 'stores' collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        super().__init__(db[STORE_COLLECTION], Store)

    async def list_active(self) -> List[Store]:
        return await self.find({"is_active": True})

    async def search(self, search: str = "", skip: int = 0, limit: int = 0) -> Tuple[List[Store], int]:
        query = search_query(search)
        total = await self.count(query)
        stores = await self.find(query, skip=skip, limit=limit)
        return stores, total

    async def list_by_owner(self, owner_id: str) -> List[Store]:
        return await self.find({"owner_id": owner_id})

