from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.responses import success_response
from app.db.models.user import User
from app.db.runner import SQLRunner
from app.routers import deps
from app.schemas.activity import ActivityCreate
from app.utils.activity import log_activity

router = APIRouter(
    prefix="/api/activity",
    tags=["activity"],
    dependencies=[Depends(deps.get_current_user)]
)

ACTIVITY_SQL = """
    SELECT
        a.id, a.user_id, a.task_id, a.action_type, a.description, a.created_at,
        t.title AS task_title,
        u.username
    FROM activity_logs a
    LEFT JOIN tasks t ON a.task_id = t.id
    LEFT JOIN users u ON a.user_id = u.id
    WHERE a.user_id = :user_id
    ORDER BY a.created_at DESC, a.id DESC
    LIMIT :limit
"""

@router.get("")
async def list_activity(
    user_id: Optional[int] = None,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    owner_id = deps.resolve_user_id(user, user_id)
    activities = SQLRunner(db).fetch_all(ACTIVITY_SQL, {"user_id": owner_id, "limit": limit})
    return success_response(activities, "Activities retrieved successfully")

@router.post("")
async def create_activity(
    payload: ActivityCreate,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    if not payload.user_id or not payload.action_type:
        raise HTTPException(status_code=400, detail="User ID and Action Type are required")
    owner_id = deps.resolve_user_id(user, payload.user_id)

    entry = log_activity(db, owner_id, payload.action_type, payload.description, payload.task_id)
    db.commit()
    return success_response({"id": entry.id}, "Activity logged successfully", status.HTTP_201_CREATED)
