from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.responses import success_response
from app.db.models.lookup import Category, Priority, TaskStatus
from app.routers import deps

router = APIRouter(prefix="/api", tags=["lookups"])

@router.get("/categories")
async def list_categories(db: Session = Depends(deps.get_db)):
    categories = db.query(Category).order_by(Category.name.asc()).all()
    data = [
        {"id": c.id, "name": c.name, "description": c.description, "color_hex": c.color_hex}
        for c in categories
    ]
    return success_response(data, "Categories retrieved successfully")

@router.get("/priorities")
async def list_priorities(db: Session = Depends(deps.get_db)):
    priorities = db.query(Priority).order_by(Priority.sort_order.asc()).all()
    data = [{"id": p.id, "level": p.level, "sort_order": p.sort_order} for p in priorities]
    return success_response(data, "Priorities retrieved successfully")

@router.get("/statuses")
async def list_statuses(db: Session = Depends(deps.get_db)):
    statuses = db.query(TaskStatus).order_by(TaskStatus.sort_order.asc()).all()
    data = [{"id": s.id, "name": s.name, "sort_order": s.sort_order} for s in statuses]
    return success_response(data, "Statuses retrieved successfully")
