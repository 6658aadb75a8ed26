"""
Shared fixtures: the API runs against in-memory storage and identity.
"""
import os

# Must be set before habit_tracker.config is imported
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("IDENTITY_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CLIENT_URL", "http://localhost:3000")

import pytest
from fastapi.testclient import TestClient

from habit_tracker.identity import MemoryIdentityProvider, get_identity_provider
from habit_tracker.main import app
from habit_tracker.storage import MemoryHabitStore, get_store


@pytest.fixture
def store():
    return MemoryHabitStore()


@pytest.fixture
def identity():
    return MemoryIdentityProvider()


@pytest.fixture
def client(store, identity):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity_provider] = lambda: identity
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user(identity, store):
    """A registered user with a profile, plus auth headers for it."""
    principal = identity.create_user("ada@example.com", "secret123", "Ada Lovelace")
    store.create_profile({"id": principal.id, "email": principal.email, "name": "Ada Lovelace"})
    token = identity.issue_token(principal.id)
    return {
        "id": principal.id,
        "principal": principal,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture
def make_habit(client, user):
    """Create a habit for ``user`` through the API and return its JSON."""
    def _make_habit(name="Read", **fields):
        response = client.post("/api/habits", json={"name": name, **fields}, headers=user["headers"])
        assert response.status_code == 201, response.text
        return response.json()
    return _make_habit


@pytest.fixture
def other_user(identity):
    principal = identity.create_user("grace@example.com", "secret456", "Grace Hopper")
    token = identity.issue_token(principal.id)
    return {"id": principal.id, "headers": {"Authorization": f"Bearer {token}"}}
