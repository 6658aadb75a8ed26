"""
Storage-access interface for the habit tracker.

Every operation is scoped to what a route needs (find by owner, range query
by date, create/update, delete) and exchanges plain dicts, so routes and
services can run against the SQL store in production and the in-memory store
in tests. Writes are not visible to other sessions until ``commit()``.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]

HABIT_SORTS = ("name", "streak", "created")


class HabitStore(ABC):

    # Profiles

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Record]:
        pass

    @abstractmethod
    def create_profile(self, data: Record) -> Record:
        pass

    @abstractmethod
    def update_profile(self, user_id: str, data: Record) -> Optional[Record]:
        pass

    @abstractmethod
    def delete_profile(self, user_id: str) -> None:
        pass

    # Habits

    @abstractmethod
    def list_habits(
        self,
        user_id: str,
        active: Optional[bool] = None,
        category: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        """
        List a user's habits.

        Args:
            active: Only habits whose is_active equals this value
            category: Only habits in this category
            sort: "name" (A-Z), "streak" (longest current streak first),
                anything else newest first
            limit: Maximum number of habits to return
        """

    @abstractmethod
    def get_habit(self, user_id: str, habit_id: str, for_update: bool = False) -> Optional[Record]:
        """
        Fetch one habit owned by the user.

        ``for_update`` holds a row lock until the transaction ends, so that a
        read-modify-write of the cached streak fields cannot interleave with
        another writer on the same habit.
        """

    @abstractmethod
    def create_habit(self, data: Record) -> Record:
        pass

    @abstractmethod
    def update_habit(self, user_id: str, habit_id: str, data: Record) -> Optional[Record]:
        pass

    @abstractmethod
    def delete_habit(self, user_id: str, habit_id: str) -> bool:
        pass

    @abstractmethod
    def delete_habits_for_user(self, user_id: str) -> int:
        pass

    # Progress (completion records)

    @abstractmethod
    def list_progress(
        self,
        user_id: str,
        habit_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        day: Optional[date] = None,
        ascending: bool = False,
        with_habit: bool = False,
    ) -> List[Record]:
        """
        Range query over a user's completion records, ordered by date.

        With ``with_habit`` each record carries a ``habit`` summary
        (id, name, emoji, color, category).
        """

    @abstractmethod
    def get_progress_for_day(self, user_id: str, habit_id: str, day: date) -> Optional[Record]:
        pass

    @abstractmethod
    def create_progress(self, data: Record) -> Record:
        pass

    @abstractmethod
    def update_progress(self, progress_id: str, data: Record) -> Optional[Record]:
        pass

    @abstractmethod
    def completed_dates(self, user_id: str, habit_id: str) -> List[date]:
        """All days on which the habit is marked completed."""

    @abstractmethod
    def delete_progress_for_habit(self, user_id: str, habit_id: str) -> int:
        pass

    @abstractmethod
    def delete_progress_for_user(self, user_id: str) -> int:
        pass

    # Shared snapshots

    @abstractmethod
    def create_share(self, data: Record) -> Record:
        pass

    @abstractmethod
    def get_share(self, share_id: str) -> Optional[Record]:
        pass

    @abstractmethod
    def list_shares(self, user_id: str) -> List[Record]:
        pass

    @abstractmethod
    def delete_share(self, user_id: str, share_id: str) -> bool:
        pass

    @abstractmethod
    def delete_shares_for_user(self, user_id: str) -> int:
        pass

    # Transaction control

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass

    def close(self) -> None:
        pass
