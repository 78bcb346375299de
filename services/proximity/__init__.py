# This file makes the proximity directory a Python package
# Import key components to make them available when importing the package
from .geometry import (
    compute_distance_km,
    compute_bearing_degrees,
    compute_bearing_compass,
    format_distance,
    format_coordinates,
    directions_url,
    map_url,
)
from .ranker import Candidate, RankedPoint, NearbyStores, rank_by_proximity, rank_stores

__all__ = [
    'compute_distance_km',
    'compute_bearing_degrees',
    'compute_bearing_compass',
    'format_distance',
    'format_coordinates',
    'directions_url',
    'map_url',
    'Candidate',
    'RankedPoint',
    'NearbyStores',
    'rank_by_proximity',
    'rank_stores',
]
