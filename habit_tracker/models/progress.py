from sqlalchemy import Column, String, Date, DateTime, Boolean, ForeignKey, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from habit_tracker.database import Base
import uuid


class Progress(Base):
    """Completion record: at most one row per habit per calendar day."""
    __tablename__ = "progress"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    habit_id = Column(String, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    completed = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    habit = relationship("Habit", back_populates="progress")

    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_progress_habit_date"),
    )

    def __repr__(self) -> str:
        return f"<Progress habit_id={self.habit_id} date={self.date} completed={self.completed}>"
