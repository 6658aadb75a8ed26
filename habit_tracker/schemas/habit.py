from pydantic import BaseModel, validator
from typing import Optional
from datetime import datetime


class HabitCreate(BaseModel):
    """Schema for creating a habit. Missing optional fields take defaults."""
    name: str
    description: Optional[str] = None
    emoji: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None

    @validator('name')
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Habit name is required')
        return v

    @validator('description', 'emoji', 'category', 'color')
    def strip_optional(cls, v):
        return v.strip() if v is not None else v


class HabitUpdate(BaseModel):
    """Partial update; only fields present in the body are changed."""
    name: Optional[str] = None
    description: Optional[str] = None
    emoji: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None

    @validator('name', 'emoji', 'category', 'color', 'is_active')
    def reject_null(cls, v):
        # Fields are optional in the body but their columns are not nullable
        if v is None:
            raise ValueError('Value cannot be null')
        return v

    @validator('name')
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError('Habit name is required')
        return v

    @validator('category')
    def strip_category(cls, v):
        return v.strip() if v is not None else v

    @validator('description')
    def blank_description(cls, v):
        return (v or "").strip()


class HabitSummary(BaseModel):
    id: str
    name: str
    emoji: str
    color: str
    category: Optional[str] = None


class HabitResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: str = ""
    emoji: str
    category: str
    color: str
    is_active: bool
    current_streak: int
    longest_streak: int
    total_completions: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
