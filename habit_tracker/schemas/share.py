from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional
from datetime import datetime


class ShareCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    include_stats: Optional[bool] = None
    include_habits: Optional[bool] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SharedUser(BaseModel):
    name: str
    avatar_url: str = ""


class SharedHabit(BaseModel):
    name: str
    emoji: str
    current_streak: int


class ShareRecord(BaseModel):
    id: str
    user_id: str
    share_id: str
    title: str
    description: str = ""
    include_stats: bool
    include_habits: bool
    stats: Optional[Dict[str, Any]] = None
    habits: Optional[List[SharedHabit]] = None
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class ShareCreateResponse(BaseModel):
    share_id: str
    share_url: str
    share_record: ShareRecord

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SharedProgressView(BaseModel):
    """What an anonymous visitor sees at /api/share/{share_id}."""
    title: str
    description: str = ""
    user: SharedUser
    created_at: Optional[datetime] = None
    stats: Optional[Dict[str, Any]] = None
    habits: Optional[List[SharedHabit]] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SharedLink(BaseModel):
    share_id: str
    title: str
    description: str = ""
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    share_url: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TopHabit(BaseModel):
    name: str
    emoji: str
    current_streak: int
    longest_streak: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ShareableStats(BaseModel):
    user: SharedUser
    stats: Dict[str, int]
    top_habits: List[TopHabit]
    activity_chart: Dict[str, Dict[str, int]]
    generated_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
