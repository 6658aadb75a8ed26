from __future__ import annotations
import copy
import itertools
import threading
import uuid
from datetime import date
from typing import Dict, List, Optional

from habit_tracker.config import DEFAULT_HABIT_CATEGORY, DEFAULT_HABIT_COLOR, DEFAULT_HABIT_EMOJI, DEFAULT_THEME
from habit_tracker.exceptions import StorageError
from habit_tracker.storage.base import HabitStore, Record
from habit_tracker.utils.dates import now_utc

HABIT_SUMMARY_FIELDS = ("id", "name", "emoji", "color", "category")


class MemoryHabitStore(HabitStore):
    """
    HabitStore kept in process memory.

    Used by the test suite and for local runs without a database. Every call
    runs under one lock and writes are visible immediately; ``commit`` and
    ``rollback`` are no-ops.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._seq = itertools.count()
        self._order: Dict[str, int] = {}
        self.profiles: Dict[str, Record] = {}
        self.habits: Dict[str, Record] = {}
        self.progress: Dict[str, Record] = {}
        self.shares: Dict[str, Record] = {}

    def _insert(self, table: Dict[str, Record], record: Record) -> Record:
        self._order[record["id"]] = next(self._seq)
        table[record["id"]] = record
        return copy.deepcopy(record)

    def _newest_first(self, records: List[Record]) -> List[Record]:
        return sorted(records, key=lambda r: (r.get("created_at"), self._order.get(r["id"], 0)), reverse=True)

    # Profiles

    def get_profile(self, user_id: str) -> Optional[Record]:
        with self._lock:
            profile = self.profiles.get(user_id)
            return copy.deepcopy(profile) if profile else None

    def create_profile(self, data: Record) -> Record:
        with self._lock:
            record = {
                "email": None,
                "name": None,
                "avatar_url": "",
                "theme": DEFAULT_THEME,
                "created_at": now_utc(),
                "updated_at": None,
            }
            record.update(data)
            return self._insert(self.profiles, record)

    def update_profile(self, user_id: str, data: Record) -> Optional[Record]:
        with self._lock:
            profile = self.profiles.get(user_id)
            if profile is None:
                return None
            profile.update(data)
            return copy.deepcopy(profile)

    def delete_profile(self, user_id: str) -> None:
        with self._lock:
            self.profiles.pop(user_id, None)

    # Habits

    def list_habits(self, user_id, active=None, category=None, sort=None, limit=None) -> List[Record]:
        with self._lock:
            habits = [h for h in self.habits.values() if h["user_id"] == user_id]
            if active is not None:
                habits = [h for h in habits if h["is_active"] == active]
            if category:
                habits = [h for h in habits if h["category"] == category]

            habits = self._newest_first(habits)
            if sort == "name":
                habits.sort(key=lambda h: h["name"])
            elif sort == "streak":
                # stable sort keeps newest first among equal streaks
                habits.sort(key=lambda h: h["current_streak"], reverse=True)

            if limit is not None:
                habits = habits[:limit]
            return copy.deepcopy(habits)

    def get_habit(self, user_id: str, habit_id: str, for_update: bool = False) -> Optional[Record]:
        with self._lock:
            habit = self.habits.get(habit_id)
            if habit is None or habit["user_id"] != user_id:
                return None
            return copy.deepcopy(habit)

    def create_habit(self, data: Record) -> Record:
        with self._lock:
            record = {
                "id": str(uuid.uuid4()),
                "description": "",
                "emoji": DEFAULT_HABIT_EMOJI,
                "category": DEFAULT_HABIT_CATEGORY,
                "color": DEFAULT_HABIT_COLOR,
                "is_active": True,
                "current_streak": 0,
                "longest_streak": 0,
                "total_completions": 0,
                "created_at": now_utc(),
                "updated_at": None,
            }
            record.update(data)
            return self._insert(self.habits, record)

    def update_habit(self, user_id: str, habit_id: str, data: Record) -> Optional[Record]:
        with self._lock:
            habit = self.habits.get(habit_id)
            if habit is None or habit["user_id"] != user_id:
                return None
            habit.update(data)
            return copy.deepcopy(habit)

    def delete_habit(self, user_id: str, habit_id: str) -> bool:
        with self._lock:
            habit = self.habits.get(habit_id)
            if habit is None or habit["user_id"] != user_id:
                return False
            del self.habits[habit_id]
            return True

    def delete_habits_for_user(self, user_id: str) -> int:
        with self._lock:
            ids = [h["id"] for h in self.habits.values() if h["user_id"] == user_id]
            for habit_id in ids:
                del self.habits[habit_id]
            return len(ids)

    # Progress

    def list_progress(self, user_id, habit_id=None, start=None, end=None, day=None,
                      ascending=False, with_habit=False) -> List[Record]:
        with self._lock:
            rows = [p for p in self.progress.values() if p["user_id"] == user_id]
            if habit_id:
                rows = [p for p in rows if p["habit_id"] == habit_id]
            if start is not None:
                rows = [p for p in rows if p["date"] >= start]
            if end is not None:
                rows = [p for p in rows if p["date"] <= end]
            if day is not None:
                rows = [p for p in rows if p["date"] == day]
            rows = sorted(rows, key=lambda p: p["date"], reverse=not ascending)

            records = copy.deepcopy(rows)
            if with_habit:
                for record in records:
                    habit = self.habits.get(record["habit_id"])
                    record["habit"] = (
                        {field: habit[field] for field in HABIT_SUMMARY_FIELDS} if habit else None
                    )
            return records

    def get_progress_for_day(self, user_id: str, habit_id: str, day: date) -> Optional[Record]:
        with self._lock:
            for p in self.progress.values():
                if p["user_id"] == user_id and p["habit_id"] == habit_id and p["date"] == day:
                    return copy.deepcopy(p)
            return None

    def create_progress(self, data: Record) -> Record:
        with self._lock:
            for p in self.progress.values():
                if p["habit_id"] == data["habit_id"] and p["date"] == data["date"]:
                    raise StorageError(
                        "create progress",
                        f"progress for habit {data['habit_id']} on {data['date']} already exists"
                    )
            record = {
                "id": str(uuid.uuid4()),
                "completed": True,
                "notes": "",
                "created_at": now_utc(),
                "updated_at": None,
            }
            record.update(data)
            return self._insert(self.progress, record)

    def update_progress(self, progress_id: str, data: Record) -> Optional[Record]:
        with self._lock:
            progress = self.progress.get(progress_id)
            if progress is None:
                return None
            progress.update(data)
            return copy.deepcopy(progress)

    def completed_dates(self, user_id: str, habit_id: str) -> List[date]:
        with self._lock:
            return sorted(
                (p["date"] for p in self.progress.values()
                 if p["user_id"] == user_id and p["habit_id"] == habit_id and p["completed"]),
                reverse=True,
            )

    def delete_progress_for_habit(self, user_id: str, habit_id: str) -> int:
        with self._lock:
            ids = [p["id"] for p in self.progress.values() if p["user_id"] == user_id and p["habit_id"] == habit_id]
            for progress_id in ids:
                del self.progress[progress_id]
            return len(ids)

    def delete_progress_for_user(self, user_id: str) -> int:
        with self._lock:
            ids = [p["id"] for p in self.progress.values() if p["user_id"] == user_id]
            for progress_id in ids:
                del self.progress[progress_id]
            return len(ids)

    # Shared snapshots

    def create_share(self, data: Record) -> Record:
        with self._lock:
            record = {
                "id": str(uuid.uuid4()),
                "stats": None,
                "habits": None,
                "created_at": now_utc(),
                "expires_at": None,
            }
            record.update(data)
            return self._insert(self.shares, record)

    def get_share(self, share_id: str) -> Optional[Record]:
        with self._lock:
            for share in self.shares.values():
                if share["share_id"] == share_id:
                    return copy.deepcopy(share)
            return None

    def list_shares(self, user_id: str) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._newest_first([s for s in self.shares.values() if s["user_id"] == user_id]))

    def delete_share(self, user_id: str, share_id: str) -> bool:
        with self._lock:
            for key, share in list(self.shares.items()):
                if share["share_id"] == share_id and share["user_id"] == user_id:
                    del self.shares[key]
                    return True
            return False

    def delete_shares_for_user(self, user_id: str) -> int:
        with self._lock:
            keys = [k for k, s in self.shares.items() if s["user_id"] == user_id]
            for key in keys:
                del self.shares[key]
            return len(keys)

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass
