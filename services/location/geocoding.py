from typing import Optional
from collections import OrderedDict
import asyncio
import logging
from geopy.exc import GeopyError

from models.geo import GeoPoint
from models.location import Address
from dependencies.geocoder import get_geocoder
from core.config import GEOCODE_CACHE_SIZE

logger = logging.getLogger(__name__)

# Cache for locations to avoid repeated geocoding, least recently used first
location_cache: "OrderedDict[str, GeoPoint]" = OrderedDict()


def cache_point(key: str, point: GeoPoint, max_size: Optional[int] = None) -> None:
    max_size = max_size or GEOCODE_CACHE_SIZE
    location_cache[key] = point
    location_cache.move_to_end(key)
    while len(location_cache) > max_size:
        location_cache.popitem(last=False)


async def geocode_place(place_name: str, geolocator=None) -> Optional[GeoPoint]:
    """
    Retrieves the coordinates for a place name through Nominatim.

    Args:
        place_name (str): The name or address of the place to geocode.
        geolocator: A geopy geocoder; defaults to the shared Nominatim client.

    Returns:
        Optional[GeoPoint]: The coordinates if found, otherwise None.
    """
    if not place_name or not place_name.strip():
        return None
    cache_key = place_name.strip().lower()
    if cache_key in location_cache:
        location_cache.move_to_end(cache_key)
        return location_cache[cache_key]

    geolocator = geolocator or get_geocoder()
    try:
        loop = asyncio.get_running_loop()
        location = await loop.run_in_executor(
            None,  # uses default executor
            lambda: geolocator.geocode(place_name)
        )
    except GeopyError as e:
        logger.error(f"Error geocoding location '{place_name}': {e}")
        return None

    if not location:
        return None
    point = GeoPoint(latitude=location.latitude, longitude=location.longitude)
    cache_point(cache_key, point)
    return point


def address_from_raw(raw: dict) -> Address:
    """Pick the address components out of a Nominatim response."""
    address = raw.get("address") or {}
    return Address(
        house_number=address.get("house_number", ""),
        street=address.get("road", ""),
        city=address.get("city") or address.get("town") or address.get("village") or "",
        district=address.get("county") or address.get("district") or "",
        state=address.get("state", ""),
        country=address.get("country", ""),
        postcode=address.get("postcode", ""),
        display_name=raw.get("display_name", ""),
    )


async def reverse_geocode(point: GeoPoint, geolocator=None) -> Optional[Address]:
    """
    Looks up the street address for a coordinate pair.
    Returns None when the lookup fails or finds nothing.
    """
    geolocator = geolocator or get_geocoder()
    try:
        loop = asyncio.get_running_loop()
        location = await loop.run_in_executor(
            None,
            lambda: geolocator.reverse(point.as_tuple(), zoom=18, addressdetails=True)
        )
    except GeopyError as e:
        logger.error(f"Reverse geocoding failed for {point.as_tuple()}: {e}")
        return None

    if not location or not location.raw.get("display_name"):
        return None
    address = address_from_raw(location.raw)
    logger.debug(f"Address components: {address.model_dump()}")
    return address
