class LocationError(Exception):
    """
    Base class for location acquisition failures.
    The message is shown to the user as-is.
    """
    code = "location_error"
    default_message = "Unable to get your location. Please make sure location services are enabled."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class GeolocationUnsupportedError(LocationError):
    code = "geolocation_unsupported"
    default_message = "Geolocation is not supported"


class PermissionDeniedError(LocationError):
    code = "permission_denied"
    default_message = "Location permission denied. Please allow location access and try again."


class PositionUnavailableError(LocationError):
    code = "position_unavailable"
    default_message = "Your position is currently unavailable."


class LocationTimeoutError(LocationError):
    code = "timeout"
    default_message = "Timed out while getting your location."


# Error codes reported by browser/device location sensors
SENSOR_ERROR_CODES = {
    1: PermissionDeniedError,
    2: PositionUnavailableError,
    3: LocationTimeoutError,
}


def error_from_sensor_code(code: int, message: str = None) -> LocationError:
    error_cls = SENSOR_ERROR_CODES.get(code, PositionUnavailableError)
    return error_cls(message)
