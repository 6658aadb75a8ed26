from pydantic import BaseModel, validator
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional
from datetime import date as Date, datetime


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile"""
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    theme: Optional[Literal["light", "dark"]] = None

    @validator('name')
    def validate_name(cls, v):
        if v is not None:
            v = v.strip()
            if len(v) < 2:
                raise ValueError('Name must be at least 2 characters')
        return v

    @validator('avatar_url', 'theme')
    def reject_null(cls, v):
        if v is None:
            raise ValueError('Value cannot be null')
        return v


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: str = ""
    theme: str = "light"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActivityEntry(BaseModel):
    date: Date
    completed: bool


class DashboardResponse(BaseModel):
    total_habits: int
    active_habits: int
    completed_today: int
    total_completions: int
    longest_streak: int
    recent_activity: List[ActivityEntry]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
