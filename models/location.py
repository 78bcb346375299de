from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone

from models.geo import GeoPoint, utc_now
from core.config import LOCATION_HIGH_ACCURACY, LOCATION_TIMEOUT_SECONDS, LOCATION_MAX_AGE_SECONDS


class LocationPolicy(BaseModel):
    """Accuracy, timeout and cache-age settings for a location lookup."""
    enable_high_accuracy: bool = LOCATION_HIGH_ACCURACY
    timeout_seconds: float = Field(LOCATION_TIMEOUT_SECONDS, gt=0)
    maximum_age_seconds: float = Field(LOCATION_MAX_AGE_SECONDS, ge=0)


class LocationReading(BaseModel):
    """A single resolved user location."""
    point: GeoPoint
    accuracy_m: Optional[float] = Field(None, ge=0, description="Reported accuracy radius in meters.")
    acquired_at: datetime = Field(default_factory=utc_now)
    source: str = "device"

    model_config = ConfigDict(frozen=True)

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        now = now or utc_now()
        acquired_at = self.acquired_at
        if acquired_at.tzinfo is None:
            acquired_at = acquired_at.replace(tzinfo=timezone.utc)
        return (now - acquired_at).total_seconds()


class Address(BaseModel):
    """Address components from a reverse geocoding lookup."""
    house_number: str = ""
    street: str = ""
    city: str = ""
    district: str = ""
    state: str = ""
    country: str = ""
    postcode: str = ""
    display_name: str = ""

    @property
    def formatted(self) -> str:
        parts = [
            f"{self.house_number} {self.street}" if self.house_number else "",
            self.city,
            self.district,
            self.state,
            self.country,
        ]
        return ", ".join(part for part in parts if part)
