from typing import Optional

from habit_tracker.config import settings
from habit_tracker.identity.base import AuthSession, IdentityProvider, Principal
from habit_tracker.identity.memory import MemoryIdentityProvider
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

_provider: Optional[IdentityProvider] = None


def create_identity_provider() -> IdentityProvider:
    """Build the identity provider selected by IDENTITY_BACKEND."""
    backend = settings.IDENTITY_BACKEND
    if backend == "firebase":
        from habit_tracker.identity.firebase import FirebaseIdentityProvider
        return FirebaseIdentityProvider(
            api_key=settings.FIREBASE_WEB_API_KEY,
            base_url=settings.IDENTITY_TOOLKIT_URL,
        )
    if backend == "memory":
        logger.warning("Using MemoryIdentityProvider; accounts are lost on restart")
        return MemoryIdentityProvider()
    raise ValueError(f"Unknown IDENTITY_BACKEND: {backend!r}")


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency returning the process-wide identity provider."""
    global _provider
    if _provider is None:
        _provider = create_identity_provider()
    return _provider


__all__ = [
    "AuthSession", "IdentityProvider", "Principal", "MemoryIdentityProvider",
    "create_identity_provider", "get_identity_provider",
]
