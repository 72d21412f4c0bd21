import os

os.environ["API_KEY"] = "test-key"
os.environ["GEOLOCATION_URL"] = ""
os.environ["PUBLIC_BASE_URL"] = "https://resumin.test"
os.environ.pop("ALLOWED_IPS", None)

import mongomock
import pytest
from fastapi.testclient import TestClient

import database
from api.analytics.service import reset_guards
from app import app
from factories import make_profile

API_HEADERS = {"X-API-Key": "test-key"}
OWNER_ID = "owner-1"


@pytest.fixture(autouse=True)
def mongo(monkeypatch):
    client = mongomock.MongoClient()
    monkeypatch.setattr(database, "_client", client)
    reset_guards()
    yield client
    reset_guards()


@pytest.fixture
def client():
    return TestClient(app, headers=API_HEADERS)


@pytest.fixture
def owner_headers():
    return {"X-User-Id": OWNER_ID}


@pytest.fixture
def saved_profile(client, owner_headers):
    resp = client.post("/api/profile", json=make_profile(), headers=owner_headers)
    assert resp.status_code == 200, resp.text
    return resp.json()
