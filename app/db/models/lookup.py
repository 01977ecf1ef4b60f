from sqlalchemy import Column, Integer, String, Text
from app.db.base import Base

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    color_hex = Column(String(7), default="#6366f1")

class Priority(Base):
    __tablename__ = "priorities"

    id = Column(Integer, primary_key=True, index=True)
    level = Column(String(20), nullable=False, unique=True) # High, Medium, Low
    sort_order = Column(Integer, default=0)

class TaskStatus(Base):
    __tablename__ = "task_statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True) # Pending, In Progress, Completed
    sort_order = Column(Integer, default=0)

# Seed rows; ids are referenced by clients (status 1 is the default for new tasks)
STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"

DEFAULT_STATUSES = [
    (1, STATUS_PENDING, 1),
    (2, STATUS_IN_PROGRESS, 2),
    (3, STATUS_COMPLETED, 3),
]

DEFAULT_PRIORITIES = [
    (1, "High", 1),
    (2, "Medium", 2),
    (3, "Low", 3),
]

DEFAULT_CATEGORIES = [
    (1, "Technical Work", "Hands-on assignments from the host department", "#3b82f6"),
    (2, "Documentation", "Reports, manuals and written deliverables", "#10b981"),
    (3, "Meetings", "Briefings, stand-ups and supervisor check-ins", "#f59e0b"),
    (4, "Training", "Orientation, seminars and skills sessions", "#8b5cf6"),
    (5, "Research", "Reading and investigation for assigned tasks", "#ef4444"),
]
