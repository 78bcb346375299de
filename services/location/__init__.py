from .errors import (
    LocationError,
    GeolocationUnsupportedError,
    PermissionDeniedError,
    PositionUnavailableError,
    LocationTimeoutError,
    error_from_sensor_code,
)
from .tracker import LocationTracker
from .service import LocationService, LocationSource, StaticLocationSource, GeocoderLocationSource
from .geocoding import geocode_place, reverse_geocode
from .store import RedisLocationStore, UserLocationTracker

__all__ = [
    'LocationError',
    'GeolocationUnsupportedError',
    'PermissionDeniedError',
    'PositionUnavailableError',
    'LocationTimeoutError',
    'error_from_sensor_code',
    'LocationTracker',
    'LocationService',
    'LocationSource',
    'StaticLocationSource',
    'GeocoderLocationSource',
    'geocode_place',
    'reverse_geocode',
    'RedisLocationStore',
    'UserLocationTracker',
]
