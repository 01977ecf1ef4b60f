from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from app.db.base import Base

def utc_now():
    return datetime.now(timezone.utc)

class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # No FK: entries must survive the deletion of the task they describe
    task_id = Column(Integer, nullable=True, index=True)
    action_type = Column(String(50), nullable=False) # task_created, task_deleted, login, signup, ...
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)

    user = relationship("User", back_populates="activities")
