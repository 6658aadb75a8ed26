import os
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict

import firebase_admin
import requests
from firebase_admin import auth, credentials
from firebase_admin import exceptions as firebase_exceptions

from habit_tracker.config import settings
from habit_tracker.exceptions import AuthError, IdentityError
from habit_tracker.identity.base import AuthSession, IdentityProvider, Principal
from habit_tracker.utils.dates import now_utc
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

OAUTH_PROVIDER_IDS = {
    "google": "google.com",
}


def initialize_firebase():
    """Initialize the Firebase Admin SDK once per process."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    firebase_json_path = settings.FIREBASE_SERVICE_ACCOUNT_JSON
    if os.path.exists(firebase_json_path):
        cred = credentials.Certificate(firebase_json_path)
        app = firebase_admin.initialize_app(cred)
        logger.info("Initialized Firebase Admin with provided service account JSON")
    else:
        # Fallback to Application Default Credentials
        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        app = firebase_admin.initialize_app(options=options)
        logger.warning(f"FIREBASE_SERVICE_ACCOUNT_JSON not found at {firebase_json_path}. Initialized Firebase with default credentials.")
    return app


def _principal_from_record(record) -> Principal:
    created_at = None
    if record.user_metadata and record.user_metadata.creation_timestamp:
        created_at = datetime.fromtimestamp(record.user_metadata.creation_timestamp / 1000, tz=dt_timezone.utc)
    return Principal(
        id=record.uid,
        email=record.email,
        name=record.display_name or "",
        avatar_url=record.photo_url or "",
        created_at=created_at,
    )


class FirebaseIdentityProvider(IdentityProvider):
    """
    Identity backed by Firebase Authentication.

    Token verification, account creation, deletion and token revocation go
    through the Admin SDK; password sign-in and OAuth URLs go through the
    Identity Toolkit REST API, which the Admin SDK does not cover.
    """

    def __init__(self, api_key: str, base_url: str = "https://identitytoolkit.googleapis.com/v1", timeout: int = 10):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        initialize_firebase()

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise IdentityError("FIREBASE_WEB_API_KEY is not configured", "CONFIG_ERROR")
        url = f"{self.base_url}/{endpoint}"
        try:
            resp = requests.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Identity Toolkit {endpoint} unreachable: {e}")
            raise IdentityError("Identity provider unavailable", "PROVIDER_UNAVAILABLE") from e
        try:
            body = resp.json() if resp.content else {}
        except ValueError as e:
            logger.error(f"Identity Toolkit {endpoint} returned a non-JSON body: {resp.status_code}")
            raise IdentityError("Identity provider returned an invalid response", "PROVIDER_UNAVAILABLE") from e
        if 200 <= resp.status_code < 300:
            return body
        error = body.get("error", {}) if isinstance(body, dict) else {}
        message = error.get("message") or f"Identity Toolkit request failed: {resp.status_code}"
        logger.warning(f"Identity Toolkit {endpoint} failed: {resp.status_code} {message}")
        raise IdentityError(message, message if message.isupper() else None)

    def verify(self, token: str) -> Principal:
        try:
            decoded = auth.verify_id_token(token, check_revoked=True)
        except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError,
                auth.UserDisabledError, auth.CertificateFetchError, ValueError) as e:
            raise AuthError(f"Invalid or expired token: {e}") from e

        auth_time = decoded.get("auth_time")
        return Principal(
            id=decoded["uid"],
            email=decoded.get("email"),
            name=decoded.get("name") or "",
            avatar_url=decoded.get("picture") or "",
            created_at=None,
            metadata={"auth_time": auth_time} if auth_time else {},
        )

    def create_user(self, email: str, password: str, name: str) -> Principal:
        try:
            record = auth.create_user(email=email, password=password, display_name=name, email_verified=False)
        except auth.EmailAlreadyExistsError as e:
            raise IdentityError("A user with this email address has already been registered", "EMAIL_EXISTS") from e
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityError(str(e), getattr(e, "code", None)) from e
        principal = _principal_from_record(record)
        principal.created_at = principal.created_at or now_utc()
        return principal

    def sign_in(self, email: str, password: str) -> AuthSession:
        body = self._post("accounts:signInWithPassword", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })
        principal = Principal(
            id=body["localId"],
            email=body.get("email", email),
            name=body.get("displayName") or "",
            avatar_url=body.get("profilePicture") or "",
        )
        return AuthSession(
            access_token=body["idToken"],
            refresh_token=body.get("refreshToken", ""),
            principal=principal,
        )

    def sign_out(self, user_id: str) -> None:
        try:
            auth.revoke_refresh_tokens(user_id)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityError(str(e), getattr(e, "code", None)) from e

    def delete_user(self, user_id: str) -> None:
        try:
            auth.delete_user(user_id)
        except auth.UserNotFoundError:
            logger.warning(f"Identity {user_id} already deleted")
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise IdentityError(str(e), getattr(e, "code", None)) from e

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        provider_id = OAUTH_PROVIDER_IDS.get(provider)
        if not provider_id:
            raise IdentityError(f"Unsupported OAuth provider: {provider}")
        body = self._post("accounts:createAuthUri", {
            "providerId": provider_id,
            "continueUri": redirect_to,
        })
        return body["authUri"]
