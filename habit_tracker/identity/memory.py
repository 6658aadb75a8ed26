import hashlib
import secrets
import threading
import uuid
from typing import Dict
from urllib.parse import urlencode

from habit_tracker.exceptions import AuthError, IdentityError
from habit_tracker.identity.base import AuthSession, IdentityProvider, Principal
from habit_tracker.utils.dates import now_utc


def _hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class MemoryIdentityProvider(IdentityProvider):
    """
    Identity provider held in process memory, for tests and local runs.

    Access tokens are opaque random strings; ``issue_token`` mints one for an
    existing user without a password round trip.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.users: Dict[str, Principal] = {}
        self._passwords: Dict[str, str] = {}
        self._tokens: Dict[str, str] = {}

    def _find_by_email(self, email: str):
        for principal in self.users.values():
            if principal.email and principal.email.lower() == email.lower():
                return principal
        return None

    def issue_token(self, user_id: str) -> str:
        with self._lock:
            if user_id not in self.users:
                raise IdentityError(f"User {user_id} not found", "USER_NOT_FOUND")
            token = secrets.token_urlsafe(24)
            self._tokens[token] = user_id
            return token

    def verify(self, token: str) -> Principal:
        with self._lock:
            user_id = self._tokens.get(token)
            if user_id is None or user_id not in self.users:
                raise AuthError()
            return self.users[user_id]

    def create_user(self, email: str, password: str, name: str) -> Principal:
        with self._lock:
            if self._find_by_email(email):
                raise IdentityError("A user with this email address has already been registered", "EMAIL_EXISTS")
            principal = Principal(id=str(uuid.uuid4()), email=email, name=name, created_at=now_utc())
            self.users[principal.id] = principal
            self._passwords[principal.id] = _hash_password(password)
            return principal

    def sign_in(self, email: str, password: str) -> AuthSession:
        with self._lock:
            principal = self._find_by_email(email)
            if principal is None or self._passwords.get(principal.id) != _hash_password(password):
                raise IdentityError("Invalid login credentials", "INVALID_LOGIN_CREDENTIALS")
        access_token = self.issue_token(principal.id)
        return AuthSession(access_token=access_token, refresh_token=secrets.token_urlsafe(24), principal=principal)

    def sign_out(self, user_id: str) -> None:
        with self._lock:
            for token in [t for t, uid in self._tokens.items() if uid == user_id]:
                del self._tokens[token]

    def delete_user(self, user_id: str) -> None:
        self.sign_out(user_id)
        with self._lock:
            self.users.pop(user_id, None)
            self._passwords.pop(user_id, None)

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        if provider != "google":
            raise IdentityError(f"Unsupported OAuth provider: {provider}")
        return f"https://accounts.google.com/o/oauth2/v2/auth?{urlencode({'redirect_uri': redirect_to})}"
