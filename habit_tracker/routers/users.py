from fastapi import APIRouter, Depends

from habit_tracker.auth import get_current_user
from habit_tracker.config import settings, DEFAULT_THEME
from habit_tracker.exceptions import IdentityError, ServerError, StorageError
from habit_tracker.identity import IdentityProvider, Principal, get_identity_provider
from habit_tracker.schemas import DashboardResponse, MessageResponse, ProfileResponse, ProfileUpdate
from habit_tracker.services.stats_service import dashboard
from habit_tracker.storage import HabitStore, get_store
from habit_tracker.utils.dates import days_ago, now_utc, today_local
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    responses={404: {"description": "Not found"}}
)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Get the user's profile, filled in from the identity where the profile is empty."""
    try:
        profile = store.get_profile(current_user.id) or {}
    except StorageError:
        logger.exception(f"Profile fetch error for {current_user.id}")
        raise ServerError("Failed to fetch profile", "FETCH_ERROR")

    return ProfileResponse(
        id=current_user.id,
        email=current_user.email,
        name=profile.get("name") or current_user.name or "",
        avatar_url=profile.get("avatar_url") or current_user.avatar_url or "",
        theme=profile.get("theme") or DEFAULT_THEME,
        created_at=profile.get("created_at") or current_user.created_at,
        updated_at=profile.get("updated_at"),
    )


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Update the profile, creating it when the user has none yet."""
    update_data = body.dict(exclude_unset=True)
    update_data["updated_at"] = now_utc()

    try:
        existing = store.get_profile(current_user.id)
        if existing:
            profile = store.update_profile(current_user.id, update_data)
        else:
            profile = store.create_profile({
                "id": current_user.id,
                "email": current_user.email,
                **update_data,
            })
        store.commit()
    except StorageError:
        logger.exception(f"Profile update error for {current_user.id}")
        raise ServerError("Failed to update profile", "UPDATE_ERROR")
    return profile


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Headline numbers for the dashboard plus the last week of activity."""
    today = today_local()
    try:
        habits = store.list_habits(current_user.id)
        today_progress = store.list_progress(current_user.id, day=today)
    except StorageError:
        logger.exception(f"Dashboard fetch error for {current_user.id}")
        raise ServerError("Failed to fetch habits", "FETCH_ERROR")

    try:
        recent_activity = store.list_progress(
            current_user.id,
            start=days_ago(settings.DASHBOARD_ACTIVITY_DAYS, today),
            ascending=True,
        )
    except StorageError as e:
        logger.error(f"Activity fetch error for {current_user.id}: {e}")
        recent_activity = []

    return dashboard(habits, today_progress, recent_activity)


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """Delete all of the user's data and then the identity itself."""
    try:
        store.delete_progress_for_user(current_user.id)
        store.delete_habits_for_user(current_user.id)
        store.delete_shares_for_user(current_user.id)
        store.delete_profile(current_user.id)
        store.commit()
    except StorageError:
        logger.exception(f"Account data deletion error for {current_user.id}")
        raise ServerError("Failed to delete account", "DELETE_ERROR")

    try:
        identity.delete_user(current_user.id)
    except IdentityError as e:
        logger.error(f"User deletion error for {current_user.id}: {e}")
        raise ServerError("Failed to delete account", "DELETE_ERROR")

    logger.info(f"Deleted account {current_user.id}")
    return MessageResponse(message="Account deleted successfully")
