from __future__ import annotations
from contextlib import contextmanager
from datetime import date
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from habit_tracker.database import get_pool_status
from habit_tracker.exceptions import StorageError
from habit_tracker.models import Habit, Profile, Progress, SharedProgress
from habit_tracker.storage.base import HabitStore, Record
from habit_tracker.utils.logger import get_logger

logger = get_logger(__name__)

HABIT_SUMMARY_FIELDS = ("id", "name", "emoji", "color", "category")


def _to_dict(obj) -> Record:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


def _apply(obj, data: Record) -> None:
    for field, value in data.items():
        if hasattr(obj, field):
            setattr(obj, field, value)


class SqlHabitStore(HabitStore):
    """HabitStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Database error during {name}: {e}")
            try:
                self.db.rollback()
            except SQLAlchemyError as rollback_error:
                logger.error(f"Error during rollback: {rollback_error}")
            logger.error(f"Pool status during error: {get_pool_status()}")
            raise StorageError(name, str(e)) from e

    # Profiles

    def get_profile(self, user_id: str) -> Optional[Record]:
        with self._operation("get profile"):
            profile = self.db.query(Profile).filter(Profile.id == user_id).first()
            return _to_dict(profile) if profile else None

    def create_profile(self, data: Record) -> Record:
        with self._operation("create profile"):
            profile = Profile(**data)
            self.db.add(profile)
            self.db.flush()
            self.db.refresh(profile)
            return _to_dict(profile)

    def update_profile(self, user_id: str, data: Record) -> Optional[Record]:
        with self._operation("update profile"):
            profile = self.db.query(Profile).filter(Profile.id == user_id).first()
            if not profile:
                return None
            _apply(profile, data)
            self.db.flush()
            self.db.refresh(profile)
            return _to_dict(profile)

    def delete_profile(self, user_id: str) -> None:
        with self._operation("delete profile"):
            self.db.query(Profile).filter(Profile.id == user_id).delete(synchronize_session=False)

    # Habits

    def list_habits(
        self,
        user_id: str,
        active: Optional[bool] = None,
        category: Optional[str] = None,
        sort: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        with self._operation("list habits"):
            query = self.db.query(Habit).filter(Habit.user_id == user_id)
            if active is not None:
                query = query.filter(Habit.is_active == active)
            if category:
                query = query.filter(Habit.category == category)

            if sort == "name":
                query = query.order_by(Habit.name.asc())
            elif sort == "streak":
                query = query.order_by(Habit.current_streak.desc(), Habit.created_at.desc())
            else:
                query = query.order_by(Habit.created_at.desc())

            if limit is not None:
                query = query.limit(limit)
            return [_to_dict(h) for h in query.all()]

    def get_habit(self, user_id: str, habit_id: str, for_update: bool = False) -> Optional[Record]:
        with self._operation("get habit"):
            query = self.db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user_id)
            if for_update:
                # SELECT ... FOR UPDATE; ignored by dialects without row locks
                query = query.with_for_update()
            habit = query.first()
            return _to_dict(habit) if habit else None

    def create_habit(self, data: Record) -> Record:
        with self._operation("create habit"):
            habit = Habit(**data)
            self.db.add(habit)
            self.db.flush()
            self.db.refresh(habit)
            return _to_dict(habit)

    def update_habit(self, user_id: str, habit_id: str, data: Record) -> Optional[Record]:
        with self._operation("update habit"):
            habit = self.db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user_id).first()
            if not habit:
                return None
            _apply(habit, data)
            self.db.flush()
            self.db.refresh(habit)
            return _to_dict(habit)

    def delete_habit(self, user_id: str, habit_id: str) -> bool:
        with self._operation("delete habit"):
            deleted = self.db.query(Habit).filter(
                Habit.id == habit_id,
                Habit.user_id == user_id
            ).delete(synchronize_session=False)
            return deleted > 0

    def delete_habits_for_user(self, user_id: str) -> int:
        with self._operation("delete habits"):
            return self.db.query(Habit).filter(Habit.user_id == user_id).delete(synchronize_session=False)

    # Progress

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
        with self._operation("list progress"):
            query = self.db.query(Progress).filter(Progress.user_id == user_id)
            if habit_id:
                query = query.filter(Progress.habit_id == habit_id)
            if start is not None:
                query = query.filter(Progress.date >= start)
            if end is not None:
                query = query.filter(Progress.date <= end)
            if day is not None:
                query = query.filter(Progress.date == day)

            order = Progress.date.asc() if ascending else Progress.date.desc()
            rows = query.order_by(order).all()

            records = []
            for row in rows:
                record = _to_dict(row)
                if with_habit:
                    habit = row.habit
                    record["habit"] = (
                        {field: getattr(habit, field) for field in HABIT_SUMMARY_FIELDS} if habit else None
                    )
                records.append(record)
            return records

    def get_progress_for_day(self, user_id: str, habit_id: str, day: date) -> Optional[Record]:
        with self._operation("get progress"):
            progress = self.db.query(Progress).filter(
                Progress.user_id == user_id,
                Progress.habit_id == habit_id,
                Progress.date == day
            ).first()
            return _to_dict(progress) if progress else None

    def create_progress(self, data: Record) -> Record:
        with self._operation("create progress"):
            progress = Progress(**data)
            self.db.add(progress)
            self.db.flush()
            self.db.refresh(progress)
            return _to_dict(progress)

    def update_progress(self, progress_id: str, data: Record) -> Optional[Record]:
        with self._operation("update progress"):
            progress = self.db.query(Progress).filter(Progress.id == progress_id).first()
            if not progress:
                return None
            _apply(progress, data)
            self.db.flush()
            self.db.refresh(progress)
            return _to_dict(progress)

    def completed_dates(self, user_id: str, habit_id: str) -> List[date]:
        with self._operation("list completed dates"):
            rows = self.db.query(Progress.date).filter(
                Progress.user_id == user_id,
                Progress.habit_id == habit_id,
                Progress.completed.is_(True)
            ).order_by(Progress.date.desc()).all()
            return [row[0] for row in rows]

    def delete_progress_for_habit(self, user_id: str, habit_id: str) -> int:
        with self._operation("delete habit progress"):
            return self.db.query(Progress).filter(
                Progress.habit_id == habit_id,
                Progress.user_id == user_id
            ).delete(synchronize_session=False)

    def delete_progress_for_user(self, user_id: str) -> int:
        with self._operation("delete user progress"):
            return self.db.query(Progress).filter(Progress.user_id == user_id).delete(synchronize_session=False)

    # Shared snapshots

    def create_share(self, data: Record) -> Record:
        with self._operation("create share"):
            share = SharedProgress(**data)
            self.db.add(share)
            self.db.flush()
            self.db.refresh(share)
            return _to_dict(share)

    def get_share(self, share_id: str) -> Optional[Record]:
        with self._operation("get share"):
            share = self.db.query(SharedProgress).filter(SharedProgress.share_id == share_id).first()
            return _to_dict(share) if share else None

    def list_shares(self, user_id: str) -> List[Record]:
        with self._operation("list shares"):
            shares = self.db.query(SharedProgress).filter(
                SharedProgress.user_id == user_id
            ).order_by(SharedProgress.created_at.desc()).all()
            return [_to_dict(s) for s in shares]

    def delete_share(self, user_id: str, share_id: str) -> bool:
        with self._operation("delete share"):
            deleted = self.db.query(SharedProgress).filter(
                SharedProgress.share_id == share_id,
                SharedProgress.user_id == user_id
            ).delete(synchronize_session=False)
            return deleted > 0

    def delete_shares_for_user(self, user_id: str) -> int:
        with self._operation("delete shares"):
            return self.db.query(SharedProgress).filter(
                SharedProgress.user_id == user_id
            ).delete(synchronize_session=False)

    # Transaction control

    def commit(self) -> None:
        with self._operation("commit"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()
