from sqlalchemy import Column, String, DateTime, Integer, Boolean, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from habit_tracker.database import Base
import uuid


class Habit(Base):
    """A recurring activity tracked for daily completion."""
    __tablename__ = "habits"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    emoji = Column(String, nullable=False, default="✅")
    category = Column(String, nullable=False, default="General", index=True)
    color = Column(String, nullable=False, default="#3B82F6")
    is_active = Column(Boolean, nullable=False, default=True)

    # Cached output of the streak calculator, refreshed after every toggle
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    total_completions = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    progress = relationship("Progress", back_populates="habit", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return (
            f"<Habit id={self.id} user_id={self.user_id} name={self.name} "
            f"current={self.current_streak} longest={self.longest_streak}>"
        )
