import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import engine
# Model imports register the tables on Base.metadata
from app.db.models.user import User
from app.db.models.lookup import (
    Category, Priority, TaskStatus,
    DEFAULT_CATEGORIES, DEFAULT_PRIORITIES, DEFAULT_STATUSES,
)
from app.db.models.document import Document
from app.db.models.task import Task
from app.db.models.activity import ActivityLog

logger = logging.getLogger(__name__)

def create_tables():
    Base.metadata.create_all(bind=engine)

def seed_lookups(db: Session):
    """Inserts the reference rows that are missing; existing rows are left alone."""
    if db.query(TaskStatus).count() == 0:
        for id_, name, order in DEFAULT_STATUSES:
            db.add(TaskStatus(id=id_, name=name, sort_order=order))
    if db.query(Priority).count() == 0:
        for id_, level, order in DEFAULT_PRIORITIES:
            db.add(Priority(id=id_, level=level, sort_order=order))
    if db.query(Category).count() == 0:
        for id_, name, description, color in DEFAULT_CATEGORIES:
            db.add(Category(id=id_, name=name, description=description, color_hex=color))
    db.commit()

def ensure_admin(db: Session):
    if not settings.SEED_ADMIN_USERNAME or not settings.SEED_ADMIN_PASSWORD:
        return
    if db.query(User).filter(User.role == "admin").first():
        return
    admin = User(
        username=settings.SEED_ADMIN_USERNAME,
        email=(settings.SEED_ADMIN_EMAIL or f"{settings.SEED_ADMIN_USERNAME}@localhost").lower(),
        hashed_password=get_password_hash(settings.SEED_ADMIN_PASSWORD),
        full_name="Administrator",
        role="admin",
    )
    db.add(admin)
    db.commit()
    logger.info("Bootstrap admin '%s' created", admin.username)

def init_db(db: Session):
    create_tables()
    seed_lookups(db)
    ensure_admin(db)
