import math

from models.geo import GeoPoint, Compass, COMPASS_POINTS

EARTH_RADIUS_KM = 6371.0


def compute_distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """
    Great-circle distance between two points using the Haversine formula.

    Args:
        a (GeoPoint): The reference point.
        b (GeoPoint): The target point.

    Returns:
        float: Distance in kilometers on a sphere of radius 6371 km.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push h just past 1 for antipodal points
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def compute_bearing_degrees(a: GeoPoint, b: GeoPoint) -> float:
    """Initial bearing (forward azimuth) from a to b, clockwise from north, in [0, 360)."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360.0) % 360.0


def compute_bearing_compass(a: GeoPoint, b: GeoPoint) -> Compass:
    """
    Buckets the initial bearing into one of the eight compass points.
    Each point covers a 45 degree arc centred on its angle, so N is [-22.5, 22.5).
    """
    bearing = compute_bearing_degrees(a, b)
    # Half-up rounding keeps the arc boundaries on the clockwise side
    index = int(math.floor(bearing / 45.0 + 0.5)) % 8
    return COMPASS_POINTS[index]


def format_distance(km: float) -> str:
    """
    '4.2km' for a kilometer or more, otherwise whole meters such as '350m'.
    The unit is chosen before rounding, so 0.9996 km reads '1000m'.
    """
    if km >= 1:
        return f"{km:.1f}km"
    return f"{km * 1000:.0f}m"


def format_coordinates(point: GeoPoint) -> str:
    return f"Latitude: {point.latitude:.6f}, Longitude: {point.longitude:.6f}"


def directions_url(point: GeoPoint) -> str:
    return f"https://www.google.com/maps/dir/?api=1&destination={point.latitude},{point.longitude}"


def map_url(point: GeoPoint) -> str:
    return f"https://www.google.com/maps?q={point.latitude},{point.longitude}"
