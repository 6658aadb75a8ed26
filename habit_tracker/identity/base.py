"""
Credential verification and account management seam.

Routes only see ``Principal`` objects; which identity provider issued the
token is decided by configuration.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class Principal:
    """The authenticated caller."""
    id: str
    email: Optional[str] = None
    name: str = ""
    avatar_url: str = ""
    created_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str
    principal: Principal


class IdentityProvider(ABC):

    @abstractmethod
    def verify(self, token: str) -> Principal:
        """
        Verify a bearer token.

        Raises:
            AuthError: If the token is invalid, expired or revoked
        """

    @abstractmethod
    def create_user(self, email: str, password: str, name: str) -> Principal:
        """
        Register an account.

        Raises:
            IdentityError: If the provider rejects the account
        """

    @abstractmethod
    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Exchange email and password for tokens.

        Raises:
            IdentityError: On bad credentials
        """

    @abstractmethod
    def sign_out(self, user_id: str) -> None:
        """Revoke the user's refresh tokens."""

    @abstractmethod
    def delete_user(self, user_id: str) -> None:
        pass

    @abstractmethod
    def oauth_url(self, provider: str, redirect_to: str) -> str:
        """URL that starts a third-party sign-in and returns to ``redirect_to``."""
