from typing import Optional
from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.core.security import decode_access_token
from app.db.models.user import User

ACCESS_COOKIE = "access_token"
REMEMBER_COOKIE = "remember_token"

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def user_from_session_cookie(request: Request, db: Session) -> Optional[User]:
    token = request.cookies.get(ACCESS_COOKIE)
    if not token:
        return None
    payload = decode_access_token(token)
    if not payload or payload.get("sub") is None:
        return None
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        return None
    return user

def user_from_remember_cookie(request: Request, db: Session) -> Optional[User]:
    token = request.cookies.get(REMEMBER_COOKIE)
    if not token:
        return None
    return db.query(User).filter(User.remember_token == token, User.is_active == True).first()

async def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    return user_from_session_cookie(request, db) or user_from_remember_cookie(request, db)

async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user

async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Admin only.")
    return user

def resolve_user_id(user: User, user_id: Optional[int]) -> int:
    """Defaults to the caller; only admins may act on someone else's records."""
    if user_id is None:
        return user.id
    if user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return user_id
