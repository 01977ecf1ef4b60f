from sqlalchemy import Column, Integer, String, Text, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    priority_id = Column(Integer, ForeignKey("priorities.id"), nullable=True)
    status_id = Column(Integer, ForeignKey("task_statuses.id"), nullable=False, default=1)
    due_date = Column(Date, nullable=True)
    estimated_hours = Column(Float, nullable=True)
    actual_hours = Column(Float, nullable=True)
    completion_percentage = Column(Float, default=0.0)

    # OJT Fields
    date_performed = Column(Date, nullable=True)
    hours_rendered = Column(Float, nullable=True)
    department = Column(String(255), nullable=True)
    supervisor = Column(String(255), nullable=True)
    remarks = Column(Text, nullable=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="tasks")
    category = relationship("Category")
    priority = relationship("Priority")
    status = relationship("TaskStatus")
    document = relationship("Document")

    @property
    def status_name(self):
        return self.status.name if self.status else None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "category_id": self.category_id,
            "category_name": self.category.name if self.category else None,
            "priority_id": self.priority_id,
            "priority_name": self.priority.level if self.priority else None,
            "status_id": self.status_id,
            "status_name": self.status_name,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "estimated_hours": self.estimated_hours,
            "actual_hours": self.actual_hours,
            "completion_percentage": self.completion_percentage,
            "date_performed": self.date_performed.isoformat() if self.date_performed else None,
            "hours_rendered": self.hours_rendered,
            "department": self.department,
            "supervisor": self.supervisor,
            "remarks": self.remarks,
            "document_id": self.document_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
