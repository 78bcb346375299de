from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from enum import Enum
from datetime import datetime, timezone
import math


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp used for every stored datetime."""
    return datetime.now(timezone.utc)


class Compass(str, Enum):
    """Eight-point compass rose, ordered clockwise from north."""
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


COMPASS_POINTS = [
    Compass.N, Compass.NE, Compass.E, Compass.SE,
    Compass.S, Compass.SW, Compass.W, Compass.NW,
]


class GeoPoint(BaseModel):
    """
    A latitude/longitude pair in decimal degrees.
    Immutable once created; out of range values are rejected on construction.
    """
    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees.")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees.")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_text(cls, latitude: Any, longitude: Any) -> Optional["GeoPoint"]:
        """
        Build a GeoPoint from stored text coordinates.

        Returns None when either value is missing, unparseable or out of range,
        so callers can tell "location unknown" apart from a real point at (0, 0).
        """
        lat = parse_coordinate(latitude)
        lng = parse_coordinate(longitude)
        if lat is None or lng is None:
            return None
        if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lng <= 180.0):
            return None
        return cls(latitude=lat, longitude=lng)

    def as_tuple(self):
        return (self.latitude, self.longitude)


def parse_coordinate(value: Any) -> Optional[float]:
    """Parse a single stored coordinate, returning None instead of defaulting to 0."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number
