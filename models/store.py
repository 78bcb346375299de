from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
from bson import ObjectId
import uuid

from models.geo import GeoPoint, utc_now


class Store(BaseModel):
    """
    Represents a single vendor store on Siraha Bazaar.
    Stored in the 'stores' collection in mongodb. Coordinates are kept as text,
    the way store owners submit them, and parsed on demand.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), alias="_id")
    name: str = Field(..., description="Display name of the store")
    address: str = Field("", description="Human readable street address")
    latitude: Optional[str] = Field(None, description="Latitude as stored (text).")
    longitude: Optional[str] = Field(None, description="Longitude as stored (text).")
    phone: str = Field("", description="Contact phone number")
    description: Optional[str] = None
    owner_id: str = Field(..., description="ID of the user who owns this store")
    created_at: datetime = Field(default_factory=utc_now)
    is_active: bool = True
    website: Optional[str] = None
    logo: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    total_reviews: Optional[int] = Field(None, ge=0)
    google_maps_link: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    @field_validator('id', 'owner_id', mode='before')
    @classmethod
    def convert_object_id_to_string(cls, v):
        if isinstance(v, ObjectId):
            return str(v)
        return v

    @field_validator('latitude', 'longitude', mode='before')
    @classmethod
    def coordinates_as_text(cls, v):
        if v is None:
            return None
        return str(v)

    @property
    def location(self) -> Optional[GeoPoint]:
        """The parsed coordinates, or None when they are missing or malformed."""
        return GeoPoint.from_text(self.latitude, self.longitude)


class RankedStore(Store):
    """A store annotated with its distance and direction from a reference point."""
    distance_km: float
    bearing: str
    display_distance: str
    directions_url: str
    map_url: str


class UnlocatedStore(Store):
    """A store whose stored coordinates could not be parsed."""
    location_status: str = "location unknown"
