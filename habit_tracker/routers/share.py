from fastapi import APIRouter, Depends, Request
from typing import List

from habit_tracker.auth import get_current_user
from habit_tracker.config import settings
from habit_tracker.exceptions import APIError, NotFoundError, ServerError, StorageError
from habit_tracker.identity import Principal
from habit_tracker.middleware.rate_limit import rate_limit_api_write, rate_limit_share_public
from habit_tracker.schemas import (
    MessageResponse, ShareableStats, ShareCreate, ShareCreateResponse, SharedLink, SharedProgressView
)
from habit_tracker.services import share_service
from habit_tracker.services.stats_service import activity_by_date, habit_totals
from habit_tracker.storage import HabitStore, get_store
from habit_tracker.utils.dates import days_ago, now_utc, today_local
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/share", tags=["share"])


@router.get("/stats", response_model=ShareableStats)
async def shareable_stats(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Live stats a user can preview before sharing."""
    try:
        profile = store.get_profile(current_user.id) or {}
        habits = store.list_habits(current_user.id, active=True, sort="streak")
    except StorageError:
        logger.exception(f"Habits fetch error for {current_user.id}")
        raise ServerError("Failed to fetch habits", "FETCH_ERROR")

    try:
        recent_activity = store.list_progress(
            current_user.id,
            start=days_ago(settings.SHARE_ACTIVITY_DAYS, today_local()),
            ascending=True,
        )
    except StorageError as e:
        logger.error(f"Activity fetch error for {current_user.id}: {e}")
        recent_activity = []

    return ShareableStats(
        user={
            "name": profile.get("name") or "Anonymous",
            "avatar_url": profile.get("avatar_url") or "",
        },
        stats=habit_totals(habits),
        top_habits=[
            {
                "name": h["name"],
                "emoji": h["emoji"],
                "current_streak": h["current_streak"],
                "longest_streak": h["longest_streak"],
            }
            for h in habits[:settings.SHARE_TOP_HABITS]
        ],
        activity_chart=activity_by_date(recent_activity),
        generated_at=now_utc(),
    )


@router.post("/create", response_model=ShareCreateResponse, status_code=201)
@rate_limit_api_write
async def create_share(
    request: Request,
    body: ShareCreate,
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Snapshot the user's progress under a new public share id."""
    try:
        share = share_service.create_share(
            store,
            current_user.id,
            title=body.title,
            description=body.description,
            include_stats=body.include_stats,
            include_habits=body.include_habits,
        )
    except StorageError:
        logger.exception(f"Share creation error for {current_user.id}")
        raise ServerError("Failed to create shareable link", "CREATE_ERROR")

    logger.info(f"Created share {share['share_id']} for user {current_user.id}")
    return ShareCreateResponse(
        share_id=share["share_id"],
        share_url=share_service.share_url(share["share_id"]),
        share_record=share,
    )


@router.get("/user/links", response_model=List[SharedLink])
async def list_links(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """The caller's share links, newest first."""
    try:
        shares = store.list_shares(current_user.id)
    except StorageError:
        logger.exception(f"Shared links fetch error for {current_user.id}")
        raise ServerError("Failed to fetch shared links", "FETCH_ERROR")

    return [
        SharedLink(
            share_id=s["share_id"],
            title=s["title"],
            description=s["description"],
            created_at=s["created_at"],
            expires_at=s["expires_at"],
            share_url=share_service.share_url(s["share_id"]),
        )
        for s in shares
    ]


@router.get("/{share_id}", response_model=SharedProgressView, response_model_exclude_none=True)
@rate_limit_share_public
async def view_share(
    request: Request,
    share_id: str,
    store: HabitStore = Depends(get_store),
):
    """Public view of a shared snapshot. No authentication."""
    try:
        share = store.get_share(share_id)
    except StorageError:
        logger.exception(f"Shared progress fetch error for {share_id}")
        raise ServerError()
    if not share:
        raise NotFoundError("Shared progress not found")

    if share_service.is_expired(share):
        raise APIError(410, "Shared progress has expired", "EXPIRED")

    try:
        profile = store.get_profile(share["user_id"]) or {}
    except StorageError as e:
        logger.error(f"Profile fetch error for share {share_id}: {e}")
        profile = {}

    view = {
        "title": share["title"],
        "description": share["description"],
        "user": {
            "name": profile.get("name") or "Anonymous User",
            "avatar_url": profile.get("avatar_url") or "",
        },
        "created_at": share["created_at"],
    }
    if share["include_stats"] and share.get("stats"):
        view["stats"] = share["stats"]
    if share["include_habits"] and share.get("habits"):
        view["habits"] = share["habits"]
    return SharedProgressView(**view)


@router.delete("/{share_id}", response_model=MessageResponse)
async def delete_share(
    share_id: str,
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    try:
        store.delete_share(current_user.id, share_id)
        store.commit()
    except StorageError:
        logger.exception(f"Share deletion error for {share_id}")
        raise ServerError("Failed to delete shared link", "DELETE_ERROR")
    return MessageResponse(message="Shared link deleted successfully")
