# stores.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional, List
import logging

from dependencies.database import DatabaseDependency
from dependencies.geocoder import GeocoderDependency
from dependencies.location import LocationStoreDependency
from models.geo import GeoPoint
from models.store import Store
from models.user import Permission
from routers.auth import get_optional_session, require_permissions, require_admin
from schemas.store import StoreCreate, StoreStatusUpdate, PaginatedStores, NearbyStoresResponse
from services.location.geocoding import reverse_geocode
from services.proximity import rank_stores, format_coordinates, map_url
from services.session import SessionContext
from services.stores import StoreService, maps_share_link

logger = logging.getLogger(__name__)

ADDRESS_LOOKUP_FAILED = "Location coordinates set but address lookup failed"

router = APIRouter(
    prefix="/stores",
    tags=["Stores"]
)


def get_store_service(db: DatabaseDependency) -> StoreService:
    return StoreService(db)


@router.get("", response_model=PaginatedStores)
async def list_stores(
    search: str = "",
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    store_service: StoreService = Depends(get_store_service)
):
    """
    List active stores, optionally filtered by name, description or address.
    """
    skip = (page - 1) * page_size
    stores, total = await store_service.search(search, skip=skip, limit=page_size)
    return PaginatedStores(
        items=stores,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=(total + page_size - 1) // page_size
    )


@router.get("/nearby", response_model=NearbyStoresResponse)
async def nearby_stores(
    location_store: LocationStoreDependency,
    latitude: Optional[float] = Query(None, ge=-90, le=90),
    longitude: Optional[float] = Query(None, ge=-180, le=180),
    session: SessionContext = Depends(get_optional_session),
    store_service: StoreService = Depends(get_store_service)
):
    """
    Rank every active store by distance from the given coordinates, or from the
    caller's last committed location when none are given.
    """
    if (latitude is None) != (longitude is None):
        raise HTTPException(status_code=422, detail="Provide both latitude and longitude, or neither")

    if latitude is not None:
        origin = GeoPoint(latitude=latitude, longitude=longitude)
    else:
        if not session.is_authenticated:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in or pass coordinates")
        reading = await location_store.current(session.user_id)
        if reading is None:
            raise HTTPException(status_code=404, detail="No location on record. Share your location first.")
        origin = reading.point

    stores = await store_service.list_active()
    nearby = rank_stores(origin, stores)
    return NearbyStoresResponse(
        origin=origin,
        origin_coordinates=format_coordinates(origin),
        origin_map_url=map_url(origin),
        stores=nearby.ranked,
        unlocated=nearby.unlocated,
    )


@router.get("/mine", response_model=List[Store])
async def my_stores(
    session: SessionContext = Depends(require_permissions(Permission.STORES_CREATE)),
    store_service: StoreService = Depends(get_store_service)
):
    return await store_service.list_by_owner(session.user_id)


@router.get("/all", response_model=PaginatedStores)
async def all_stores(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    session: SessionContext = Depends(require_admin),
    store_service: StoreService = Depends(get_store_service)
):
    """
    Every store, active or not, for the admin dashboard.
    """
    total = await store_service.count({})
    stores = await store_service.get_multiple(skip=(page - 1) * page_size, limit=page_size)
    return PaginatedStores(
        items=stores,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=(total + page_size - 1) // page_size
    )


@router.get("/{store_id}", response_model=Store)
async def get_store(store_id: str, store_service: StoreService = Depends(get_store_service)):
    store = await store_service.get(store_id)
    if store is None:
        raise HTTPException(status_code=404, detail="Store not found")
    return store


@router.post("", response_model=Store, status_code=status.HTTP_201_CREATED)
async def create_store(
    store_in: StoreCreate,
    geolocator: GeocoderDependency,
    session: SessionContext = Depends(require_permissions(Permission.STORES_CREATE)),
    store_service: StoreService = Depends(get_store_service)
):
    """
    Create a store at the given coordinates. A blank address is filled in by
    reverse geocoding the coordinates.
    """
    address = store_in.address.strip()
    if not address:
        found = await reverse_geocode(GeoPoint(latitude=store_in.latitude, longitude=store_in.longitude), geolocator=geolocator)
        address = found.formatted if found and found.formatted else ADDRESS_LOOKUP_FAILED

    store = Store(
        name=store_in.name,
        address=address,
        latitude=str(store_in.latitude),
        longitude=str(store_in.longitude),
        phone=store_in.phone,
        description=store_in.description,
        owner_id=session.user_id,
        website=str(store_in.website) if store_in.website else None,
        logo=str(store_in.logo) if store_in.logo else None,
        google_maps_link=maps_share_link(store_in.latitude, store_in.longitude),
    )
    try:
        await store_service.create(store)
    except Exception as e:
        logger.error(f"Failed to save store '{store.name}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Could not create store")
    logger.info(f"Store {store.id} created by {session.user_id}")
    return store


@router.patch("/{store_id}/status", response_model=Store)
async def set_store_status(
    store_id: str,
    update: StoreStatusUpdate,
    session: SessionContext = Depends(require_permissions(Permission.STORES_MANAGE)),
    store_service: StoreService = Depends(get_store_service)
):
    result = await store_service.update(store_id, update)
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Store not found")
    return await store_service.get(store_id)
