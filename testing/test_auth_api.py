import pytest
from fastapi.testclient import TestClient

from main import app
from dependencies.database import get_database
from dependencies.redis import get_redis
from services.session import get_password_hash


@pytest.fixture
def auth_client(fake_db, fake_redis):
    """A client that authenticates with real bearer tokens against the in-memory stores."""
    async def override_db():
        return fake_db

    async def override_redis():
        yield fake_redis

    app.dependency_overrides[get_database] = override_db
    app.dependency_overrides[get_redis] = override_redis
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, email, role="customer"):
    return client.post("/auth/register", json={
        "email": email, "password": "namaste-123", "full_name": "Sita Sharma", "role": role,
    })


def login(client, email, password="namaste-123"):
    return client.post("/auth/token", data={"username": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_register_login_and_logout(auth_client, fake_db):
    created = register(auth_client, "sita@sirahabazaar.com")
    assert created.status_code == 201
    assert created.json()["role"] == "customer"
    assert "hashed_password" not in created.json()

    assert register(auth_client, "sita@sirahabazaar.com").status_code == 400

    response = login(auth_client, "sita@sirahabazaar.com")
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["token_type"] == "bearer"
    assert fake_db["users"].documents[0]["last_login"].tzinfo is not None

    me = auth_client.get("/auth/users/me", headers=bearer(token))
    assert me.status_code == 200
    assert me.json()["email"] == "sita@sirahabazaar.com"

    assert auth_client.post("/auth/logout", headers=bearer(token)).status_code == 204
    # The token is revoked even though it has not expired
    assert auth_client.get("/auth/users/me", headers=bearer(token)).status_code == 401


def test_wrong_password_is_rejected(auth_client):
    register(auth_client, "ram@sirahabazaar.com")
    assert login(auth_client, "ram@sirahabazaar.com", password="wrong-password").status_code == 401
    assert login(auth_client, "nobody@sirahabazaar.com").status_code == 401


def test_garbage_token_is_rejected(auth_client):
    assert auth_client.get("/auth/users/me", headers=bearer("not-a-jwt")).status_code == 401
    assert auth_client.get("/auth/users/me").status_code == 401


def test_logout_clears_stored_location(auth_client):
    register(auth_client, "hari@sirahabazaar.com")
    token = login(auth_client, "hari@sirahabazaar.com").json()["access_token"]

    request_token = auth_client.post("/location/requests", headers=bearer(token)).json()["token"]
    auth_client.put(
        f"/location/requests/{request_token}",
        json={"latitude": 26.6541, "longitude": 86.2037},
        headers=bearer(token),
    )
    assert auth_client.get("/location/current", headers=bearer(token)).status_code == 200

    auth_client.post("/auth/logout", headers=bearer(token))
    fresh = login(auth_client, "hari@sirahabazaar.com").json()["access_token"]
    assert auth_client.get("/location/current", headers=bearer(fresh)).status_code == 404


def test_admin_listing_needs_an_admin_token(auth_client, fake_db):
    register(auth_client, "shop@sirahabazaar.com", role="store_owner")
    owner_token = login(auth_client, "shop@sirahabazaar.com").json()["access_token"]
    assert auth_client.get("/stores/all", headers=bearer(owner_token)).status_code == 403
    assert auth_client.get("/stores/all").status_code == 401

    fake_db["users"].documents.append({
        "_id": "admin-1",
        "email": "admin@sirahabazaar.com",
        "hashed_password": get_password_hash("namaste-123"),
        "role": "admin",
    })
    admin_token = login(auth_client, "admin@sirahabazaar.com").json()["access_token"]
    body = auth_client.get("/stores/all", headers=bearer(admin_token)).json()
    assert body["total"] == 5
