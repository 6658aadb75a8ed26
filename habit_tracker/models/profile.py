from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from habit_tracker.database import Base


class Profile(Base):
    """Display data for an account. The id is the identity provider's user id."""
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    email = Column(String, index=True, nullable=True)
    name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=False, default="")
    theme = Column(String(10), nullable=False, default="light")  # 'light' | 'dark'

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Profile id={self.id} email={self.email} name={self.name}>"
