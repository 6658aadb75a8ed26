from fastapi import APIRouter, Depends, Path, Query, Request
from datetime import date
from typing import List, Optional

from habit_tracker.auth import get_current_user
from habit_tracker.exceptions import APIError, ServerError, StorageError
from habit_tracker.identity import Principal
from habit_tracker.middleware.rate_limit import rate_limit_api_write
from habit_tracker.schemas import ProgressResponse, ProgressStats, TodayProgressItem, ToggleRequest
from habit_tracker.services.progress_service import toggle_progress
from habit_tracker.services.stats_service import completion_stats
from habit_tracker.storage import HabitStore, get_store
from habit_tracker.utils.dates import days_ago, month_bounds, today_local
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("", response_model=List[ProgressResponse])
async def list_progress(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    habit_id: Optional[str] = Query(None, alias="habitId"),
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Completion records, newest first. The date range applies only when both ends are given."""
    if not (start_date and end_date):
        start_date = end_date = None
    try:
        return store.list_progress(
            current_user.id,
            habit_id=habit_id,
            start=start_date,
            end=end_date,
            with_habit=True,
        )
    except StorageError:
        logger.exception(f"Progress fetch error for user {current_user.id}")
        raise ServerError("Failed to fetch progress", "FETCH_ERROR")


@router.post("/toggle", response_model=ProgressResponse)
@rate_limit_api_write
async def toggle(
    request: Request,
    body: ToggleRequest,
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """
    Toggle habit completion for a date.

    Streak counters and the completion total of the habit are recomputed
    before the response is sent.
    """
    try:
        return toggle_progress(store, current_user.id, str(body.habit_id), body.date, body.notes)
    except APIError:
        store.rollback()
        raise
    except StorageError:
        logger.exception(f"Toggle progress error for habit {body.habit_id}")
        store.rollback()
        raise ServerError("Failed to update progress", "UPDATE_ERROR")


@router.get("/today", response_model=List[TodayProgressItem])
async def today_progress(
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Today's completion state for every active habit."""
    today = today_local()
    try:
        habits = store.list_habits(current_user.id, active=True)
        progress = store.list_progress(current_user.id, day=today)
    except StorageError:
        logger.exception(f"Today progress fetch error for user {current_user.id}")
        raise ServerError("Failed to fetch progress", "FETCH_ERROR")

    by_habit = {p["habit_id"]: p for p in progress}
    items = []
    for habit in habits:
        record = by_habit.get(habit["id"])
        items.append(TodayProgressItem(
            habit=habit,
            completed=record["completed"] if record else False,
            notes=record["notes"] if record else "",
            progress_id=record["id"] if record else None,
        ))
    return items


@router.get("/stats", response_model=ProgressStats)
async def progress_stats(
    habit_id: Optional[str] = Query(None, alias="habitId"),
    days: int = Query(30, ge=1, le=3660),
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """Completion rate over the last ``days`` days."""
    today = today_local()
    try:
        progress = store.list_progress(
            current_user.id,
            habit_id=habit_id,
            start=days_ago(days, today),
            end=today,
        )
    except StorageError:
        logger.exception(f"Stats fetch error for user {current_user.id}")
        raise ServerError("Failed to fetch statistics", "FETCH_ERROR")
    return completion_stats(progress, days)


@router.get("/calendar/{year}/{month}", response_model=List[ProgressResponse])
async def calendar(
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
    habit_id: Optional[str] = Query(None, alias="habitId"),
    current_user: Principal = Depends(get_current_user),
    store: HabitStore = Depends(get_store),
):
    """All completion records within one month."""
    first, last = month_bounds(year, month)
    try:
        return store.list_progress(
            current_user.id,
            habit_id=habit_id,
            start=first,
            end=last,
            with_habit=True,
        )
    except StorageError:
        logger.exception(f"Calendar fetch error for user {current_user.id}")
        raise ServerError("Failed to fetch calendar data", "FETCH_ERROR")
