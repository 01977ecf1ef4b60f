from typing import Optional

from pydantic import BaseModel


class ActivityCreate(BaseModel):
    user_id: Optional[int] = None
    task_id: Optional[int] = None
    action_type: Optional[str] = None
    description: Optional[str] = None
