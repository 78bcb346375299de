from typing import List, Dict, Any, Iterable, Sequence, Optional
from collections import namedtuple
from pydantic import BaseModel, ConfigDict, Field
import logging

from models.geo import GeoPoint, Compass
from models.store import Store, RankedStore, UnlocatedStore
from services.proximity.geometry import (
    compute_distance_km,
    compute_bearing_compass,
    format_distance,
    directions_url,
    map_url,
)

logger = logging.getLogger(__name__)


Candidate = namedtuple('Candidate', ['id', 'point', 'metadata'])


class RankedPoint(BaseModel):
    """A candidate location annotated with distance and direction from the origin."""
    id: Any
    point: GeoPoint
    metadata: Dict[str, Any] = Field(default_factory=dict)
    distance_km: float
    bearing: Compass
    display_distance: str

    model_config = ConfigDict(frozen=True)

    @property
    def directions_url(self) -> str:
        return directions_url(self.point)


class NearbyStores(BaseModel):
    """Stores ranked by distance, plus the ones that could not be placed on the map."""
    origin: GeoPoint
    ranked: List[RankedStore] = Field(default_factory=list)
    unlocated: List[UnlocatedStore] = Field(default_factory=list)


def rank_point(origin: GeoPoint, candidate: Candidate) -> RankedPoint:
    distance_km = compute_distance_km(origin, candidate.point)
    bearing = compute_bearing_compass(origin, candidate.point)
    return RankedPoint(
        id=candidate.id,
        point=candidate.point,
        metadata=dict(candidate.metadata or {}),
        distance_km=distance_km,
        bearing=bearing,
        display_distance=f"{format_distance(distance_km)} ({bearing.value})",
    )


def rank_by_proximity(origin: GeoPoint, candidates: Iterable[Candidate]) -> List[RankedPoint]:
    """
    Ranks candidates by great-circle distance from the origin.

    Args:
        origin (GeoPoint): The reference location, usually the user's position.
        candidates (Iterable[Candidate]): (id, GeoPoint, metadata) triples.

    Returns:
        List[RankedPoint]: Every candidate, nearest first. Equal distances keep
                           their input order.
    """
    ranked = [rank_point(origin, candidate) for candidate in candidates]
    # sorted() is stable, so ties keep input order
    return sorted(ranked, key=lambda r: r.distance_km)


def rank_stores(origin: GeoPoint, stores: Sequence[Store]) -> NearbyStores:
    """
    Ranks stores by distance from origin. Stores whose stored coordinates are
    missing or malformed are reported separately instead of being ranked.
    """
    candidates = []
    unlocated = []
    for store in stores:
        point: Optional[GeoPoint] = store.location
        if point is None:
            logger.warning(f"Store {store.id} has no usable coordinates "
                           f"(latitude={store.latitude!r}, longitude={store.longitude!r})")
            unlocated.append(UnlocatedStore(**store.model_dump()))
            continue
        candidates.append(Candidate(id=store.id, point=point, metadata={"store": store}))

    ranked_stores = []
    for ranked in rank_by_proximity(origin, candidates):
        store = ranked.metadata["store"]
        ranked_stores.append(RankedStore(
            **store.model_dump(),
            distance_km=ranked.distance_km,
            bearing=ranked.bearing.value,
            display_distance=ranked.display_distance,
            directions_url=ranked.directions_url,
            map_url=store.google_maps_link or map_url(ranked.point),
        ))

    return NearbyStores(origin=origin, ranked=ranked_stores, unlocated=unlocated)
