from habit_tracker.database import Base
from habit_tracker.models.profile import Profile
from habit_tracker.models.habit import Habit
from habit_tracker.models.progress import Progress
from habit_tracker.models.shared_progress import SharedProgress

__all__ = ["Base", "Profile", "Habit", "Progress", "SharedProgress"]
