import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.responses import success_response
from app.core.security import get_password_hash
from app.db.models.document import Document
from app.db.models.lookup import STATUS_COMPLETED
from app.db.models.user import User
from app.db.runner import SQLRunner
from app.routers import deps
from app.routers.auth import MIN_PASSWORD_LENGTH, check_username, normalize_email
from app.schemas.user import UserDelete, UserUpdate
from app.utils import uploads
from app.utils.activity import log_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])

ROLES = ("admin", "user")

USERS_SQL = """
    SELECT
        u.id, u.username, u.email, u.full_name, u.role, u.is_active,
        u.created_at, u.updated_at,
        COUNT(DISTINCT t.id) AS task_count,
        COUNT(DISTINCT CASE WHEN ts.name = :completed THEN t.id END) AS completed_count
    FROM users u
    LEFT JOIN tasks t ON u.id = t.user_id
    LEFT JOIN task_statuses ts ON t.status_id = ts.id
    GROUP BY u.id, u.username, u.email, u.full_name, u.role, u.is_active, u.created_at, u.updated_at
    ORDER BY u.created_at DESC, u.id DESC
"""

@router.get("/get_users")
async def list_users(
    db: Session = Depends(deps.get_db),
    admin: User = Depends(deps.get_current_admin)
):
    users = SQLRunner(db).fetch_all(USERS_SQL, {"completed": STATUS_COMPLETED})
    for row in users:
        row["is_active"] = bool(row["is_active"])
    return success_response(users, "Users retrieved successfully")

@router.post("/update_user")
async def update_user(
    payload: UserUpdate,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    # Users can only edit their own profile unless they're admin
    if not user.is_admin and payload.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    edit_user = db.query(User).filter(User.id == payload.user_id).first()
    if not edit_user:
        raise HTTPException(status_code=404, detail="User not found")

    changed = False
    if payload.full_name is not None:
        edit_user.full_name = payload.full_name.strip()
        changed = True

    if payload.email is not None:
        email = normalize_email(payload.email.strip())
        existing = db.query(User).filter(func.lower(User.email) == email, User.id != edit_user.id).first()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")
        edit_user.email = email
        changed = True

    if payload.username is not None:
        username = payload.username.strip()
        check_username(username)
        existing = db.query(User).filter(User.username == username, User.id != edit_user.id).first()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
        edit_user.username = username
        changed = True

    # Only admin can change role and active status
    if user.is_admin:
        if payload.role is not None:
            if payload.role not in ROLES:
                raise HTTPException(status_code=400, detail="Invalid role")
            edit_user.role = payload.role
            changed = True
        if payload.is_active is not None:
            edit_user.is_active = payload.is_active
            changed = True

    if payload.password:
        if len(payload.password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        edit_user.hashed_password = get_password_hash(payload.password)
        changed = True

    if not changed:
        raise HTTPException(status_code=400, detail="No fields to update")

    log_activity(db, user.id, "profile_update", f"Profile updated for user: {edit_user.username}")
    db.commit()

    data = edit_user.to_session_dict()
    data["is_active"] = edit_user.is_active
    return success_response(None, "User updated successfully", user=data)

@router.post("/delete_user")
async def delete_user(
    payload: UserDelete,
    db: Session = Depends(deps.get_db),
    admin: User = Depends(deps.get_current_admin)
):
    if payload.user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user_to_delete = db.query(User).filter(User.id == payload.user_id).first()
    if not user_to_delete:
        raise HTTPException(status_code=404, detail="User not found")

    deleted_username = user_to_delete.username
    file_paths = [
        path for (path,) in db.query(Document.file_path).filter(Document.user_id == user_to_delete.id)
    ]

    # Tasks, documents and activity rows go with the user (ON DELETE CASCADE)
    db.delete(user_to_delete)
    log_activity(db, admin.id, "user_deleted", f"User deleted: {deleted_username}")
    db.commit()

    for path in file_paths:
        try:
            uploads.remove_file(path)
        except OSError:
            logger.warning("Could not remove %s after deleting user %s", path, deleted_username)

    return success_response(None, "User deleted successfully")
