from pydantic import BaseModel, Field
from typing import Optional

from models.location import LocationReading


class LocationReadingIn(BaseModel):
    """A position reported by the client's location sensor."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(None, ge=0, description="Accuracy radius in meters.")


class LocationRequestToken(BaseModel):
    token: int


class LocationCommitResult(BaseModel):
    committed: bool
    token: int
    location: Optional[LocationReading] = None


class PlaceQuery(BaseModel):
    query: str = Field(..., min_length=2, description="Place name or address, e.g. 'Kathmandu'.")


class AddressOut(BaseModel):
    house_number: str = ""
    street: str = ""
    city: str = ""
    district: str = ""
    state: str = ""
    country: str = ""
    postcode: str = ""
    display_name: str = ""
    formatted: str = ""


class SensorErrorReport(BaseModel):
    """Error code from the browser geolocation API: 1 denied, 2 unavailable, 3 timeout."""
    code: int = Field(..., ge=0)
