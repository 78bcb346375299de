import re
import pytest
from types import SimpleNamespace
from fastapi import HTTPException
from fastapi.testclient import TestClient
from redis.exceptions import WatchError

from main import app
from dependencies.database import get_database
from dependencies.redis import get_redis
from dependencies.geocoder import get_geocoder
from models.geo import GeoPoint
from models.store import Store
from models.user import User, Role
from routers.auth import get_session, get_optional_session
from services.session import SessionContext

# The five sample stores shown on the storefront's "Nearby Stores" panel
SAMPLE_STORES = [
    {"_id": "1", "name": "Nepal Electronics", "address": "Maitidevi, Kathmandu",
     "latitude": "27.7058", "longitude": "85.3292", "phone": "+977 1 4223456", "owner_id": "owner-1", "is_active": True},
    {"_id": "2", "name": "Tech World", "address": "Biratnagar",
     "latitude": "26.4672", "longitude": "87.2744", "phone": "+977 23 4223456", "owner_id": "owner-2", "is_active": True},
    {"_id": "3", "name": "Smart Devices", "address": "Pokhara",
     "latitude": "28.2418", "longitude": "83.9718", "phone": "+977 61 4223456", "owner_id": "owner-3", "is_active": True},
    {"_id": "4", "name": "Digital Hub", "address": "Lalitpur",
     "latitude": "27.6672", "longitude": "85.3240", "phone": "+977 1 4223456", "owner_id": "owner-4", "is_active": True},
    {"_id": "5", "name": "Tech Solutions", "address": "Birgunj",
     "latitude": "27.2543", "longitude": "84.7222", "phone": "+977 51 4223456", "owner_id": "owner-5", "is_active": True},
]

KATHMANDU = GeoPoint(latitude=27.7058, longitude=85.3292)


def _matches(document, query):
    for key, expected in query.items():
        if key == "$or":
            if not any(_matches(document, sub) for sub in expected):
                return False
            continue
        value = document.get(key)
        if isinstance(expected, dict) and "$regex" in expected:
            flags = re.IGNORECASE if "i" in expected.get("$options", "") else 0
            if value is None or not re.search(expected["$regex"], str(value), flags):
                return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents
        self._skip = 0
        self._limit = 0

    def skip(self, n):
        self._skip = n
        return self

    def limit(self, n):
        self._limit = n
        return self

    async def to_list(self, length=None):
        docs = self.documents[self._skip:]
        if self._limit:
            docs = docs[:self._limit]
        return [dict(doc) for doc in docs]


class FakeCollection:
    """Just enough of a Motor collection for the routes under test."""

    def __init__(self, documents=None):
        self.documents = [dict(doc) for doc in documents or []]

    async def find_one(self, query):
        for doc in self.documents:
            if _matches(doc, query):
                return dict(doc)
        return None

    def find(self, query=None):
        return FakeCursor([doc for doc in self.documents if _matches(doc, query or {})])

    async def count_documents(self, query):
        return len([doc for doc in self.documents if _matches(doc, query)])

    async def insert_one(self, document):
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document.get("_id"))

    async def update_one(self, query, update):
        for doc in self.documents:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


class FakeDatabase(dict):
    def __missing__(self, name):
        collection = FakeCollection()
        self[name] = collection
        return collection


class FakePipeline:
    def __init__(self, redis):
        self.redis = redis
        self.watched = {}
        self.queued = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def watch(self, *keys):
        self.watched = {key: self.redis.data.get(key) for key in keys}

    async def unwatch(self):
        self.watched = {}

    async def get(self, key):
        return await self.redis.get(key)

    def multi(self):
        self.queued = []

    def setex(self, key, ttl, value):
        self.queued.append((key, value))
        return self

    async def execute(self):
        for key, value in self.watched.items():
            if self.redis.data.get(key) != value:
                raise WatchError("watched key changed")
        for key, value in self.queued:
            self.redis.data[key] = value
        return [True] * len(self.queued)


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis with decode_responses=True."""

    def __init__(self):
        self.data = {}

    async def incr(self, key):
        value = int(self.data.get(key, 0)) + 1
        self.data[key] = str(value)
        return value

    async def expire(self, key, seconds):
        return True

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        return True

    async def delete(self, *keys):
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def exists(self, key):
        return 1 if key in self.data else 0

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    async def close(self):
        pass


class FakeGeolocator:
    def __init__(self, places=None, reverse_raw=None):
        self.places = places or {}
        self.reverse_raw = reverse_raw
        self.geocode_calls = 0

    def geocode(self, query):
        self.geocode_calls += 1
        point = self.places.get(query)
        if point is None:
            return None
        return SimpleNamespace(latitude=point[0], longitude=point[1])

    def reverse(self, query, zoom=None, addressdetails=True):
        if self.reverse_raw is None:
            return None
        return SimpleNamespace(raw=self.reverse_raw)


def make_user(role=Role.CUSTOMER, user_id="user-1", permissions=None):
    return User(
        _id=user_id,
        email=f"{user_id}@sirahabazaar.com",
        hashed_password="not-a-real-hash",
        role=role,
        permissions=permissions or [],
    )


@pytest.fixture
def sample_stores():
    return [Store(**doc) for doc in SAMPLE_STORES]


@pytest.fixture
def fake_db():
    db = FakeDatabase()
    db["stores"] = FakeCollection(SAMPLE_STORES)
    return db


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def fake_geolocator():
    return FakeGeolocator(
        places={"Kathmandu": (27.7058, 85.3292)},
        reverse_raw={
            "display_name": "Maitidevi, Kathmandu, Bagmati, Nepal",
            "address": {
                "house_number": "12",
                "road": "Maitidevi Marg",
                "city": "Kathmandu",
                "county": "Kathmandu District",
                "state": "Bagmati Province",
                "country": "Nepal",
                "postcode": "44600",
            },
        },
    )


@pytest.fixture
def client_factory(fake_db, fake_redis, fake_geolocator):
    """Builds a TestClient whose session belongs to the given user (None for anonymous)."""
    def build(user=None):
        session = SessionContext(user, token="test-token" if user else None)

        async def override_db():
            return fake_db

        async def override_redis():
            yield fake_redis

        async def override_session():
            if session.user is None:
                raise HTTPException(status_code=401, detail="Could not validate credentials")
            return session

        async def override_optional_session():
            return session

        app.dependency_overrides[get_database] = override_db
        app.dependency_overrides[get_redis] = override_redis
        app.dependency_overrides[get_geocoder] = lambda: fake_geolocator
        app.dependency_overrides[get_session] = override_session
        app.dependency_overrides[get_optional_session] = override_optional_session
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()
