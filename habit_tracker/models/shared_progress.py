from sqlalchemy import Column, String, DateTime, Boolean, Text, JSON
from sqlalchemy.sql import func
from habit_tracker.database import Base
import uuid


class SharedProgress(Base):
    """A public snapshot of a user's stats and top habits, addressed by share_id."""
    __tablename__ = "shared_progress"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    share_id = Column(String, unique=True, nullable=False, index=True)

    title = Column(String, nullable=False, default="My Habit Progress")
    description = Column(Text, nullable=False, default="")
    include_stats = Column(Boolean, nullable=False, default=True)
    include_habits = Column(Boolean, nullable=False, default=True)

    # Snapshots taken at creation time
    stats = Column(JSON, nullable=True)
    habits = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<SharedProgress share_id={self.share_id} user_id={self.user_id}>"
