from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.responses import success_response
from app.db.models.task import Task
from app.db.models.user import User
from app.db.runner import SQLRunner
from app.routers import deps
from app.services import progress as progress_service

router = APIRouter(
    prefix="/api",
    tags=["progress"],
    dependencies=[Depends(deps.get_current_user)]
)

@router.get("/progress")
async def get_progress(
    user_id: Optional[int] = None,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    owner_id = deps.resolve_user_id(user, user_id)
    runner = SQLRunner(db)
    return success_response({
        "overall": progress_service.overall_progress(runner, owner_id),
        "by_category": progress_service.category_progress(runner, owner_id),
    }, "Progress retrieved successfully")

@router.get("/stats")
async def get_stats(
    user_id: Optional[int] = None,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    owner_id = deps.resolve_user_id(user, user_id)
    tasks = [t.to_dict() for t in db.query(Task).filter(Task.user_id == owner_id).all()]
    today = date.today()

    summary = progress_service.summarize_tasks(tasks)
    rate = summary["completion_rate"]
    return success_response({
        **summary,
        "by_priority": progress_service.by_priority(tasks),
        "overdue": [t["id"] for t in progress_service.overdue_tasks(tasks, today)],
        "due_this_week": [t["id"] for t in progress_service.due_this_week(tasks, today)],
        "hours": progress_service.hours_progress(tasks, settings.OJT_REQUIRED_HOURS),
        "milestones": progress_service.milestones(rate),
        "next_milestone": progress_service.next_milestone(rate, summary["total"]),
    }, "Statistics retrieved successfully")
