import logging
from typing import Optional

from sqlalchemy.orm import Session
from app.db.models.activity import ActivityLog

logger = logging.getLogger(__name__)

def log_activity(
    db: Session,
    user_id: int,
    action_type: str,
    description: Optional[str] = None,
    task_id: Optional[int] = None,
) -> ActivityLog:
    """
    Records an activity in the audit log.

    The row joins the caller's transaction: it is written when the caller
    commits, together with the change it describes.

    :param db: Database session
    :param user_id: Owner of the entry
    :param action_type: e.g. task_created, task_deleted, login, signup
    :param description: Human readable text
    :param task_id: Task the entry refers to, if any
    """
    activity = ActivityLog(
        user_id=user_id,
        task_id=task_id,
        action_type=action_type,
        description=description,
    )
    db.add(activity)
    logger.debug("Activity %s queued for user %s", action_type, user_id)
    return activity
