from geopy.geocoders import Nominatim
from core.config import NOMINATIM_USER_AGENT, GEOCODER_TIMEOUT_SECONDS
from typing import Annotated
from fastapi import Depends

geocoder_instance = None

def get_geocoder():
    global geocoder_instance
    if geocoder_instance is None:
        geocoder_instance = Nominatim(user_agent=NOMINATIM_USER_AGENT, timeout=GEOCODER_TIMEOUT_SECONDS)
    return geocoder_instance

GeocoderDependency = Annotated[Nominatim, Depends(get_geocoder)]
