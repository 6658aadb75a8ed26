# API Routers
from habit_tracker.routers import auth, habits, progress, users, share

__all__ = ["auth", "habits", "progress", "users", "share"]
