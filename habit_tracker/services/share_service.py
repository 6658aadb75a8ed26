from __future__ import annotations
import secrets
import string
import time
from datetime import datetime
from typing import Optional

from habit_tracker.config import settings
from habit_tracker.services.stats_service import habit_totals
from habit_tracker.storage import HabitStore, Record
from habit_tracker.utils.dates import now_utc

BASE36 = string.digits + string.ascii_lowercase


def generate_share_id(user_id: str) -> str:
    """``<user_id>_<epoch ms>_<9 random base36 chars>``"""
    suffix = "".join(secrets.choice(BASE36) for _ in range(9))
    return f"{user_id}_{int(time.time() * 1000)}_{suffix}"


def share_url(share_id: str) -> str:
    return f"{settings.CLIENT_URL}/share/{share_id}"


def is_expired(share: Record, now: Optional[datetime] = None) -> bool:
    expires_at = share.get("expires_at")
    if not expires_at:
        return False
    now = now or now_utc()
    if expires_at.tzinfo is None:
        now = now.replace(tzinfo=None)
    return expires_at < now


def create_share(
    store: HabitStore,
    user_id: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    include_stats: Optional[bool] = None,
    include_habits: Optional[bool] = None,
) -> Record:
    """
    Store a public snapshot of the user's progress.

    The include flags are stored as true unless explicitly false, but a
    snapshot is only taken for a flag the caller actually set.
    """
    data: Record = {
        "user_id": user_id,
        "share_id": generate_share_id(user_id),
        "title": title or "My Habit Progress",
        "description": description or "",
        "include_stats": include_stats is not False,
        "include_habits": include_habits is not False,
        "expires_at": None,
    }

    if include_stats:
        habits = store.list_habits(user_id, active=True)
        totals = habit_totals(habits)
        data["stats"] = {
            "totalHabits": totals["totalHabits"],
            "totalCompletions": totals["totalCompletions"],
            "longestStreak": totals["longestStreak"],
        }

    if include_habits:
        top_habits = store.list_habits(user_id, active=True, sort="streak", limit=settings.SHARE_TOP_HABITS)
        data["habits"] = [
            {"name": h["name"], "emoji": h["emoji"], "current_streak": h["current_streak"]}
            for h in top_habits
        ]

    share = store.create_share(data)
    store.commit()
    return share
