from fastapi import APIRouter, Depends, Request
from typing import Optional

from habit_tracker.auth import get_current_user
from habit_tracker.config import settings, DEFAULT_THEME
from habit_tracker.exceptions import APIError, IdentityError, ServerError, StorageError
from habit_tracker.identity import IdentityProvider, Principal, get_identity_provider
from habit_tracker.middleware.rate_limit import rate_limit_auth
from habit_tracker.schemas import (
    LoginRequest, LoginResponse, MeResponse, MessageResponse, OAuthUrlResponse,
    RegisterRequest, RegisterResponse, UserOut
)
from habit_tracker.storage import HabitStore, Record, get_store
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def merge_user(principal: Principal, profile: Optional[Record]) -> UserOut:
    """Profile values win, identity metadata fills the gaps."""
    profile = profile or {}
    return UserOut(
        id=principal.id,
        email=principal.email,
        name=profile.get("name") or principal.name or "",
        avatar_url=profile.get("avatar_url") or principal.avatar_url or "",
        theme=profile.get("theme") or DEFAULT_THEME,
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
@rate_limit_auth
async def register(
    request: Request,
    body: RegisterRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    store: HabitStore = Depends(get_store),
):
    """Create an account and its profile."""
    try:
        principal = identity.create_user(body.email, body.password, body.name)
    except IdentityError as e:
        raise APIError(400, e.message, e.code or "REGISTRATION_ERROR")

    try:
        store.create_profile({
            "id": principal.id,
            "email": principal.email,
            "name": body.name,
            "avatar_url": "",
            "theme": DEFAULT_THEME,
        })
        store.commit()
    except StorageError as e:
        # The profile is recreated on the first profile update
        logger.error(f"Profile creation error for {principal.id}: {e}")
        store.rollback()

    logger.info(f"Registered user {principal.id}")
    return RegisterResponse(
        message="User registered successfully",
        user=UserOut(id=principal.id, email=principal.email, name=body.name, avatar_url="", theme=DEFAULT_THEME),
    )


@router.post("/login", response_model=LoginResponse)
@rate_limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    store: HabitStore = Depends(get_store),
):
    """Exchange email and password for access and refresh tokens."""
    try:
        session = identity.sign_in(body.email, body.password)
    except IdentityError as e:
        raise APIError(401, e.message, e.code or "LOGIN_ERROR")

    try:
        profile = store.get_profile(session.principal.id)
    except StorageError as e:
        logger.error(f"Profile fetch error on login for {session.principal.id}: {e}")
        profile = None

    return LoginResponse(
        message="Login successful",
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user=merge_user(session.principal, profile),
    )


@router.post("/google", response_model=OAuthUrlResponse)
async def google_login(identity: IdentityProvider = Depends(get_identity_provider)):
    """Start a Google sign-in that returns to the client's callback page."""
    try:
        url = identity.oauth_url("google", f"{settings.CLIENT_URL}/auth/callback")
    except IdentityError as e:
        raise APIError(400, e.message, "GOOGLE_AUTH_ERROR")
    return OAuthUrlResponse(url=url)


@router.get("/me", response_model=MeResponse)
async def me(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Get the current user's profile."""
    try:
        profile = store.get_profile(current_user.id)
    except StorageError:
        logger.exception(f"Profile fetch error for {current_user.id}")
        raise ServerError("Failed to fetch profile", "PROFILE_ERROR")
    return MeResponse(user=merge_user(current_user, profile))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Principal = Depends(get_current_user),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    try:
        identity.sign_out(current_user.id)
    except IdentityError as e:
        logger.error(f"Logout error for {current_user.id}: {e}")
    return MessageResponse(message="Logged out successfully")
