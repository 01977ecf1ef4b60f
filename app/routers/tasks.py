import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import asc
from sqlalchemy.orm import Session

from app.core.responses import success_response
from app.db.models.lookup import TaskStatus
from app.db.models.task import Task
from app.db.models.user import User
from app.routers import deps
from app.schemas.task import TaskCreate, TaskUpdate
from app.utils.activity import log_activity

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    dependencies=[Depends(deps.get_current_user)]
)

def get_task_or_404(db: Session, task_id: int, user: User) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    if task.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied")
    return task

@router.get("")
async def read_tasks(
    action: str = "list",
    id: Optional[int] = None,
    user_id: Optional[int] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    category: Optional[int] = None,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    if action == "get":
        if id is None:
            raise HTTPException(status_code=400, detail="Task ID required")
        task = get_task_or_404(db, id, user)
        return success_response(task.to_dict(), "Task retrieved successfully")

    if action != "list":
        raise HTTPException(status_code=400, detail="Invalid action")

    owner_id = deps.resolve_user_id(user, user_id)
    query = db.query(Task).filter(Task.user_id == owner_id)

    if status_filter:
        query = query.join(TaskStatus, Task.status_id == TaskStatus.id).filter(TaskStatus.name == status_filter)
    if category:
        query = query.filter(Task.category_id == category)

    # Tasks without a due date sort last
    tasks = query.order_by(Task.due_date.is_(None), asc(Task.due_date), asc(Task.priority_id), asc(Task.id)).all()
    return success_response([t.to_dict() for t in tasks], "Tasks retrieved successfully")

@router.post("")
async def create_task(
    payload: TaskCreate,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    owner_id = deps.resolve_user_id(user, payload.user_id)
    if not db.query(User).filter(User.id == owner_id).first():
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("[TASK CREATE] User: %s, Title: %s, Category: %s, Priority: %s",
                owner_id, payload.title, payload.category_id, payload.priority_id)

    task = Task(**payload.model_dump())
    now = datetime.now(timezone.utc)
    task.created_at = now
    task.updated_at = now
    db.add(task)
    db.flush() # Get ID

    log_activity(db, owner_id, "task_created", f"Task created: {task.title}", task.id)
    db.commit()

    logger.info("[TASK CREATE SUCCESS] New Task ID: %s", task.id)
    return success_response({"id": task.id}, "Task created successfully", status.HTTP_201_CREATED)

@router.put("")
async def update_task(
    id: Optional[int] = None,
    payload: Optional[TaskUpdate] = None,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    if id is None:
        raise HTTPException(status_code=400, detail="Task ID required")

    changes = payload.changes() if payload else {}
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    task = get_task_or_404(db, id, user)
    previous_status = task.status_id

    for field, value in changes.items():
        setattr(task, field, value)
    task.updated_at = datetime.now(timezone.utc)

    if "status_id" in changes and changes["status_id"] != previous_status:
        new_status = db.query(TaskStatus).filter(TaskStatus.id == changes["status_id"]).first()
        description = f"Task '{task.title}' moved to {new_status.name if new_status else changes['status_id']}"
    else:
        description = f"Task updated: {', '.join(sorted(changes))}"
    log_activity(db, task.user_id, "task_updated", description, task.id)
    db.commit()

    logger.info("[TASK UPDATE] Task %s fields: %s", id, sorted(changes))
    return success_response(None, "Task updated successfully")

@router.delete("")
async def delete_task(
    id: Optional[int] = None,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    if id is None:
        raise HTTPException(status_code=400, detail="Task ID required")

    logger.info("[TASK DELETE] Deleting task ID: %s", id)
    task = get_task_or_404(db, id, user)

    # The log row and the delete share one transaction
    log_activity(db, task.user_id, "task_deleted", f"Task deleted: {task.title}", task.id)
    db.delete(task)
    db.commit()

    logger.info("[TASK DELETE SUCCESS] Task %s deleted", id)
    return success_response(None, "Task deleted successfully")
