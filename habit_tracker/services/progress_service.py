from __future__ import annotations
from datetime import date
from typing import Optional, Tuple

from habit_tracker.exceptions import NotFoundError
from habit_tracker.services.streaks import StreakState, calculate_streaks
from habit_tracker.storage import HabitStore, Record
from habit_tracker.utils.dates import now_utc, today_local
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)


def refresh_habit_streaks(store: HabitStore, user_id: str, habit_id: str, today: Optional[date] = None) -> Tuple[StreakState, int]:
    """
    Recompute the cached streak fields of a habit from its completion records.

    Reads every completed day for the habit, runs the streak calculator and
    writes current_streak, longest_streak and total_completions back to the
    habit row. Callers hold the habit row lock when this runs inside a toggle.

    Returns:
        Tuple of (StreakState, total_completions)
    """
    dates = store.completed_dates(user_id, habit_id)
    streaks = calculate_streaks(dates, today or today_local())
    total_completions = len(dates)

    store.update_habit(user_id, habit_id, {
        "current_streak": streaks.current_streak,
        "longest_streak": streaks.longest_streak,
        "total_completions": total_completions,
        "updated_at": now_utc(),
    })
    return streaks, total_completions


def toggle_progress(
    store: HabitStore,
    user_id: str,
    habit_id: str,
    day: date,
    notes: Optional[str] = None,
    today: Optional[date] = None,
) -> Record:
    """
    Flip the completion flag of a habit for one day and refresh its streaks.

    The first toggle for a day creates a completed record; later toggles flip
    it. Notes are replaced only when given. Commits on success.

    Raises:
        NotFoundError: If the habit does not exist or belongs to someone else
        StorageError: If the store fails
    """
    habit = store.get_habit(user_id, habit_id, for_update=True)
    if not habit:
        raise NotFoundError("Habit not found")

    existing = store.get_progress_for_day(user_id, habit_id, day)
    if existing:
        progress = store.update_progress(existing["id"], {
            "completed": not existing["completed"],
            "notes": notes if notes is not None else existing["notes"],
            "updated_at": now_utc(),
        })
    else:
        progress = store.create_progress({
            "user_id": user_id,
            "habit_id": habit_id,
            "date": day,
            "completed": True,
            "notes": notes or "",
        })

    streaks, total = refresh_habit_streaks(store, user_id, habit_id, today)
    store.commit()

    logger.info(
        f"Toggled habit {habit_id} on {day} for user {user_id}: "
        f"completed={progress['completed']}, current={streaks.current_streak}, "
        f"longest={streaks.longest_streak}, total={total}"
    )
    return progress
