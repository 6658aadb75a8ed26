"""
Tests for identity and storage backend selection and the Identity Toolkit client
"""
from unittest.mock import Mock, patch

import pydantic
import pytest
import requests

from habit_tracker.config import Settings, settings
from habit_tracker.exceptions import IdentityError
from habit_tracker.identity import MemoryIdentityProvider, create_identity_provider
from habit_tracker.identity import firebase
from habit_tracker.storage import get_store


@pytest.fixture
def toolkit():
    with patch.object(firebase, "initialize_firebase"):
        yield firebase.FirebaseIdentityProvider(api_key="test-key", base_url="https://toolkit.test/v1")


def toolkit_response(status_code, content, json_result=None, json_error=None):
    resp = Mock(status_code=status_code, content=content)
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = json_result
    return resp


def test_memory_identity_backend(monkeypatch):
    monkeypatch.setattr(settings, "IDENTITY_BACKEND", "memory")
    assert isinstance(create_identity_provider(), MemoryIdentityProvider)


def test_unknown_identity_backend_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "IDENTITY_BACKEND", "firbase")
    with pytest.raises(ValueError, match="IDENTITY_BACKEND"):
        create_identity_provider()


def test_unknown_storage_backend_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "postgres")
    with pytest.raises(ValueError, match="STORAGE_BACKEND"):
        next(get_store())


def test_settings_reject_unknown_backends():
    with pytest.raises(pydantic.ValidationError):
        Settings(IDENTITY_BACKEND="firbase")
    with pytest.raises(pydantic.ValidationError):
        Settings(STORAGE_BACKEND="mysql")


def test_sign_in(toolkit):
    resp = toolkit_response(200, b"{...}", json_result={
        "localId": "uid-1",
        "email": "ada@example.com",
        "displayName": "Ada",
        "idToken": "id-token",
        "refreshToken": "refresh-token",
    })
    with patch.object(firebase.requests, "post", return_value=resp) as post:
        session = toolkit.sign_in("ada@example.com", "secret123")

    assert post.call_args.args[0] == "https://toolkit.test/v1/accounts:signInWithPassword"
    assert post.call_args.kwargs["params"] == {"key": "test-key"}
    assert session.access_token == "id-token"
    assert session.principal.id == "uid-1"
    assert session.principal.name == "Ada"


def test_toolkit_error_code_is_kept(toolkit):
    resp = toolkit_response(400, b"{...}", json_result={"error": {"message": "INVALID_LOGIN_CREDENTIALS"}})
    with patch.object(firebase.requests, "post", return_value=resp):
        with pytest.raises(IdentityError) as excinfo:
            toolkit.sign_in("ada@example.com", "wrong")
    assert excinfo.value.code == "INVALID_LOGIN_CREDENTIALS"


def test_non_json_error_body_becomes_identity_error(toolkit):
    resp = toolkit_response(502, b"<html>Bad Gateway</html>", json_error=ValueError("Expecting value"))
    with patch.object(firebase.requests, "post", return_value=resp):
        with pytest.raises(IdentityError) as excinfo:
            toolkit.sign_in("ada@example.com", "secret123")
    assert excinfo.value.code == "PROVIDER_UNAVAILABLE"


def test_unreachable_toolkit(toolkit):
    with patch.object(firebase.requests, "post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(IdentityError) as excinfo:
            toolkit.oauth_url("google", "http://localhost:3000/auth/callback")
    assert excinfo.value.code == "PROVIDER_UNAVAILABLE"


def test_login_with_unreadable_toolkit_response(client, identity):
    identity.sign_in = Mock(side_effect=IdentityError("Identity provider returned an invalid response", "PROVIDER_UNAVAILABLE"))
    response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert response.status_code == 401
    assert response.json()["code"] == "PROVIDER_UNAVAILABLE"
