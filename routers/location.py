# location.py
from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from dependencies.geocoder import GeocoderDependency
from dependencies.location import LocationStoreDependency
from models.geo import GeoPoint
from models.location import LocationPolicy
from models.user import Permission
from routers.auth import require_permissions
from schemas.location import (
    LocationReadingIn,
    LocationRequestToken,
    LocationCommitResult,
    PlaceQuery,
    SensorErrorReport,
    AddressOut,
)
from services.location.errors import error_from_sensor_code
from services.location.geocoding import reverse_geocode
from services.location.service import LocationService, StaticLocationSource, GeocoderLocationSource
from services.session import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/location",
    tags=["User Location"]
)

track_location = require_permissions(Permission.LOCATION_TRACK)


@router.post("/requests", response_model=LocationRequestToken)
async def begin_location_request(
    location_store: LocationStoreDependency,
    session: SessionContext = Depends(track_location)
):
    """
    Start a location lookup. The returned token must accompany the reading;
    readings for anything but the newest token are discarded.
    """
    token = await location_store.begin(session.user_id)
    return LocationRequestToken(token=token)


@router.put("/requests/{token}", response_model=LocationCommitResult)
async def commit_location_reading(
    token: int,
    reading_in: LocationReadingIn,
    location_store: LocationStoreDependency,
    session: SessionContext = Depends(track_location)
):
    source = StaticLocationSource(
        GeoPoint(latitude=reading_in.latitude, longitude=reading_in.longitude),
        accuracy_m=reading_in.accuracy
    )
    tracker = location_store.for_user(session.user_id)
    reading = await source.read(LocationPolicy())
    committed = await tracker.commit(token, reading)
    return LocationCommitResult(committed=committed, token=token, location=await tracker.current())


@router.post("/requests/{token}/error", response_model=LocationCommitResult)
async def report_location_error(
    token: int,
    report: SensorErrorReport,
    location_store: LocationStoreDependency,
    session: SessionContext = Depends(track_location)
):
    """
    The client could not read its sensor. Answers with the user-facing message
    for the reported error code; nothing is retried. A report for a superseded
    token is ignored and answered like a stale reading.
    """
    tracker = location_store.for_user(session.user_id)
    error = error_from_sensor_code(report.code)
    if not await tracker.fail(token, error):
        return LocationCommitResult(committed=False, token=token, location=await tracker.current())
    raise error


@router.post("/resolve", response_model=LocationCommitResult)
async def resolve_place(
    place: PlaceQuery,
    location_store: LocationStoreDependency,
    geolocator: GeocoderDependency,
    session: SessionContext = Depends(track_location)
):
    """
    Use a typed place name as the user's location, for visitors who do not
    share their device position.
    """
    tracker = location_store.for_user(session.user_id)
    service = LocationService(tracker, LocationPolicy())
    await service.acquire(GeocoderLocationSource(place.query, geolocator=geolocator), force=True)
    return LocationCommitResult(committed=tracker.committed, token=tracker.token, location=await tracker.current())


@router.get("/current", response_model=LocationCommitResult)
async def current_location(
    location_store: LocationStoreDependency,
    session: SessionContext = Depends(track_location)
):
    reading = await location_store.current(session.user_id)
    if reading is None:
        raise HTTPException(status_code=404, detail="No location on record")
    token = await location_store.latest_token(session.user_id)
    return LocationCommitResult(committed=True, token=token, location=reading)


@router.get("/reverse", response_model=AddressOut)
async def reverse_lookup(
    geolocator: GeocoderDependency,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180)
):
    address = await reverse_geocode(GeoPoint(latitude=latitude, longitude=longitude), geolocator=geolocator)
    if address is None:
        raise HTTPException(status_code=404, detail="No address found for these coordinates")
    return AddressOut(**address.model_dump(), formatted=address.formatted)
