from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class TaskCreate(BaseModel):
    user_id: int
    title: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    priority_id: Optional[int] = None
    status_id: int = 1
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None

    # OJT fields
    date_performed: Optional[date] = None
    hours_rendered: Optional[float] = None
    department: Optional[str] = None
    supervisor: Optional[str] = None
    remarks: Optional[str] = None
    document_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class TaskUpdate(BaseModel):
    """Partial patch: only the fields present in the request body are applied."""
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[int] = None
    priority_id: Optional[int] = None
    status_id: Optional[int] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    completion_percentage: Optional[float] = None
    date_performed: Optional[date] = None
    hours_rendered: Optional[float] = None
    department: Optional[str] = None
    supervisor: Optional[str] = None
    remarks: Optional[str] = None
    document_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("status_id")
    @classmethod
    def status_required(cls, v: Optional[int]) -> int:
        if v is None:
            raise ValueError("Status cannot be empty")
        return v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
