from habit_tracker.schemas.auth import (
    RegisterRequest, LoginRequest, UserOut, RegisterResponse, LoginResponse,
    MeResponse, OAuthUrlResponse, MessageResponse
)
from habit_tracker.schemas.habit import HabitCreate, HabitUpdate, HabitSummary, HabitResponse
from habit_tracker.schemas.progress import ToggleRequest, ProgressResponse, TodayProgressItem, ProgressStats
from habit_tracker.schemas.user import ProfileUpdate, ProfileResponse, ActivityEntry, DashboardResponse
from habit_tracker.schemas.share import (
    ShareCreate, SharedUser, SharedHabit, ShareRecord, ShareCreateResponse,
    SharedProgressView, SharedLink, TopHabit, ShareableStats
)

__all__ = [
    "RegisterRequest", "LoginRequest", "UserOut", "RegisterResponse", "LoginResponse",
    "MeResponse", "OAuthUrlResponse", "MessageResponse",
    "HabitCreate", "HabitUpdate", "HabitSummary", "HabitResponse",
    "ToggleRequest", "ProgressResponse", "TodayProgressItem", "ProgressStats",
    "ProfileUpdate", "ProfileResponse", "ActivityEntry", "DashboardResponse",
    "ShareCreate", "SharedUser", "SharedHabit", "ShareRecord", "ShareCreateResponse",
    "SharedProgressView", "SharedLink", "TopHabit", "ShareableStats",
]
