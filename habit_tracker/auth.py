from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from habit_tracker.exceptions import APIError, AuthError
from habit_tracker.identity import IdentityProvider, Principal, get_identity_provider
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

BEARER_HEADERS = {"WWW-Authenticate": "Bearer"}


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Principal:
    """
    Verify the bearer token and return the calling principal.

    Args:
        request: The incoming request; the user id is stored on its state for
            per-user rate limiting.
        credentials: The HTTP Authorization credentials.
        identity: The configured identity provider.

    Returns:
        Principal: The authenticated user

    Raises:
        APIError: 401 with code NO_TOKEN, INVALID_TOKEN or AUTH_ERROR
    """
    if credentials is None or not credentials.credentials:
        raise APIError(401, "Access denied. No token provided.", "NO_TOKEN", headers=BEARER_HEADERS)

    try:
        principal = identity.verify(credentials.credentials)
    except AuthError as e:
        raise APIError(401, "Invalid or expired token", e.code, headers=BEARER_HEADERS)
    except Exception as e:
        logger.exception(f"Auth verification error: {e}")
        raise APIError(401, "Authentication failed", "AUTH_ERROR", headers=BEARER_HEADERS)

    request.state.user_id = principal.id
    return principal
