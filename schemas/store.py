from pydantic import BaseModel, Field, HttpUrl
from typing import Optional, List

from models.geo import GeoPoint
from models.store import Store, RankedStore, UnlocatedStore


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    address: str = Field("", description="Leave blank to look the address up from the coordinates.")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    phone: str = Field(..., min_length=5)
    description: Optional[str] = None
    website: Optional[HttpUrl] = None
    logo: Optional[HttpUrl] = None


class StoreStatusUpdate(BaseModel):
    is_active: bool


class PaginatedStores(BaseModel):
    items: List[Store]
    total: int
    page: int
    page_size: int
    total_pages: int


class NearbyStoresResponse(BaseModel):
    origin: GeoPoint
    origin_coordinates: str
    origin_map_url: str
    stores: List[RankedStore]
    unlocated: List[UnlocatedStore]
