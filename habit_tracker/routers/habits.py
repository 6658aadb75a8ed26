from fastapi import APIRouter, Depends, Query, Request
from typing import List, Optional

from habit_tracker.auth import get_current_user
from habit_tracker.config import DEFAULT_HABIT_CATEGORY, DEFAULT_HABIT_COLOR, DEFAULT_HABIT_EMOJI
from habit_tracker.exceptions import NotFoundError, ServerError, StorageError
from habit_tracker.identity import Principal
from habit_tracker.middleware.rate_limit import rate_limit_api_write
from habit_tracker.schemas import HabitCreate, HabitResponse, HabitUpdate, MessageResponse
from habit_tracker.storage import HabitStore, get_store
from habit_tracker.utils.dates import now_utc
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/habits", tags=["habits"])


@router.get("", response_model=List[HabitResponse])
async def list_habits(
    active: Optional[bool] = Query(None, description="Only active (true) or archived (false) habits"),
    category: Optional[str] = Query(None, description="Category name, or 'all'"),
    sort: Optional[str] = Query(None, description="name | streak | created"),
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Get all habits for the authenticated user."""
    if category == "all":
        category = None
    try:
        return store.list_habits(current_user.id, active=active, category=category, sort=sort)
    except StorageError:
        logger.exception(f"Habits fetch error for user {current_user.id}")
        raise ServerError("Failed to fetch habits", "FETCH_ERROR")


@router.post("", response_model=HabitResponse, status_code=201)
@rate_limit_api_write
async def create_habit(
    request: Request,
    body: HabitCreate,
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Create a new habit with zeroed streak counters."""
    habit_data = {
        "user_id": current_user.id,
        "name": body.name,
        "description": body.description or "",
        "emoji": body.emoji or DEFAULT_HABIT_EMOJI,
        "category": body.category or DEFAULT_HABIT_CATEGORY,
        "color": body.color or DEFAULT_HABIT_COLOR,
        "is_active": True,
        "current_streak": 0,
        "longest_streak": 0,
        "total_completions": 0,
    }
    try:
        habit = store.create_habit(habit_data)
        store.commit()
    except StorageError:
        logger.exception(f"Habit creation error for user {current_user.id}")
        raise ServerError("Failed to create habit", "CREATE_ERROR")

    logger.info(f"Created habit {habit['id']} for user {current_user.id}")
    return habit


@router.get("/categories", response_model=List[str])
async def list_categories(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Distinct categories used by the user's habits."""
    try:
        habits = store.list_habits(current_user.id)
    except StorageError:
        logger.exception(f"Categories fetch error for user {current_user.id}")
        raise ServerError("Failed to fetch categories", "FETCH_ERROR")

    categories: List[str] = []
    for habit in habits:
        category = habit.get("category")
        if category and category not in categories:
            categories.append(category)
    return categories


@router.put("/{habit_id}", response_model=HabitResponse)
async def update_habit(
    habit_id: str,
    body: HabitUpdate,
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Update the fields present in the body."""
    try:
        existing = store.get_habit(current_user.id, habit_id)
    except StorageError:
        logger.exception(f"Habit fetch error for {habit_id}")
        existing = None
    if not existing:
        raise NotFoundError("Habit not found")

    update_data = body.dict(exclude_unset=True)
    update_data["updated_at"] = now_utc()
    try:
        habit = store.update_habit(current_user.id, habit_id, update_data)
        store.commit()
    except StorageError:
        logger.exception(f"Habit update error for {habit_id}")
        raise ServerError("Failed to update habit", "UPDATE_ERROR")
    return habit


@router.delete("/{habit_id}", response_model=MessageResponse)
async def delete_habit(
    habit_id: str,
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Delete a habit and all of its completion records."""
    try:
        existing = store.get_habit(current_user.id, habit_id)
    except StorageError:
        logger.exception(f"Habit fetch error for {habit_id}")
        existing = None
    if not existing:
        raise NotFoundError("Habit not found")

    try:
        store.delete_progress_for_habit(current_user.id, habit_id)
        store.delete_habit(current_user.id, habit_id)
        store.commit()
    except StorageError:
        logger.exception(f"Habit deletion error for {habit_id}")
        raise ServerError("Failed to delete habit", "DELETE_ERROR")

    logger.info(f"Deleted habit {habit_id} for user {current_user.id}")
    return MessageResponse(message="Habit deleted successfully")
