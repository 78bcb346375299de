import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from routers import auth_router, stores_router, location_router
from dependencies.database import get_mongo_client, close_mongo_connection
from services.location.errors import (
    LocationError,
    PermissionDeniedError,
    LocationTimeoutError,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

LOCATION_ERROR_STATUS = {
    PermissionDeniedError: 403,
    LocationTimeoutError: 504,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await get_mongo_client()
        logger.info("MongoDB client initialized successfully.")
    except Exception as e:
        logger.error(f"Error, failed to initialize MongoDB client: {e}")
    yield
    await close_mongo_connection()


app = FastAPI(
    title="Siraha Bazaar Store Locator API",
    description="Find Siraha Bazaar stores near you, sorted by distance and direction",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Stores",
            "description": "Store listings, creation and proximity ranking"
        },
        {
            "name": "User Location",
            "description": "Sequenced acquisition of the user's reference location"
        }
    ]
)


@app.exception_handler(LocationError)
async def location_error_handler(request: Request, exc: LocationError):
    """Location failures go back to the user verbatim and are never retried."""
    status_code = LOCATION_ERROR_STATUS.get(type(exc), 503)
    logger.warning(f"Location error on {request.url.path}: {exc.code}")
    return JSONResponse(status_code=status_code, content={"code": exc.code, "detail": exc.message})


app.include_router(auth_router)
app.include_router(stores_router)
app.include_router(location_router)


@app.get("/")
def read_root():
    return {"message": "Welcome to the Siraha Bazaar Store Locator API! Check /docs for endpoints."}
