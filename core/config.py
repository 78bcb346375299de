import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Mongo vars
MONGODB_URI = os.getenv("MONGODB_URI")
DATABASE_NAME = os.getenv("DATABASE_NAME", "siraha-bazaar-db")
USER_COLLECTION = "users"
STORE_COLLECTION = "stores"

# Redis
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")

# JWT
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me-siraha-bazaar-development-secret")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", 60 * 24))

# Geocoding (OpenStreetMap Nominatim)
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "siraha_bazaar_store_locator")
GEOCODER_TIMEOUT_SECONDS = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", 5))
GEOCODE_CACHE_SIZE = int(os.getenv("GEOCODE_CACHE_SIZE", 2000))

# Location acquisition policy
LOCATION_HIGH_ACCURACY = os.getenv("LOCATION_HIGH_ACCURACY", "true").lower() == "true"
LOCATION_TIMEOUT_SECONDS = float(os.getenv("LOCATION_TIMEOUT_SECONDS", 10))
LOCATION_MAX_AGE_SECONDS = float(os.getenv("LOCATION_MAX_AGE_SECONDS", 300))
LOCATION_TTL_SECONDS = int(os.getenv("LOCATION_TTL_SECONDS", 60 * 60))

if not MONGODB_URI:
    logger.warning("MONGODB_URI NOT FOUND")
if not os.getenv("JWT_SECRET_KEY"):
    logger.warning("JWT_SECRET_KEY NOT FOUND, using the development secret")
