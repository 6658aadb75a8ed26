from pydantic import BaseModel, Field, validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import date as Date, datetime
from uuid import UUID

from habit_tracker.schemas.habit import HabitResponse, HabitSummary
from habit_tracker.utils.dates import to_day


class ToggleRequest(BaseModel):
    """Toggle completion of a habit for one calendar day."""
    habit_id: UUID = Field(..., alias="habitId", description="Valid habit ID is required")
    date: Date
    notes: Optional[str] = None

    @validator('date', pre=True)
    def normalize_date(cls, v):
        # Accept any ISO-8601 date or datetime; time of day is dropped
        if isinstance(v, (str, datetime, Date)):
            try:
                return to_day(v)
            except ValueError:
                raise ValueError('Valid date is required')
        raise ValueError('Valid date is required')

    class Config:
        populate_by_name = True


class ProgressResponse(BaseModel):
    id: str
    user_id: str
    habit_id: str
    date: Date
    completed: bool
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    habit: Optional[HabitSummary] = None

    class Config:
        from_attributes = True


class TodayProgressItem(BaseModel):
    habit: HabitResponse
    completed: bool
    notes: str = ""
    progress_id: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProgressStats(BaseModel):
    completed_days: int
    total_days: int
    completion_rate: float
    missed_days: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True
