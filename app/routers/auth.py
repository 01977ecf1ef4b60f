import logging
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.responses import success_response
from app.core.security import (
    create_access_token,
    generate_remember_token,
    get_password_hash,
    verify_password,
)
from app.db.models.user import User
from app.routers import deps
from app.schemas.user import LoginRequest, SignupRequest
from app.utils.activity import log_activity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

def start_session(response: Response, user: User):
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role})
    response.set_cookie(
        key=deps.ACCESS_COOKIE,
        value=f"Bearer {access_token}",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )

def check_username(username: str):
    if len(username) < MIN_USERNAME_LENGTH:
        raise HTTPException(status_code=400, detail=f"Username must be at least {MIN_USERNAME_LENGTH} characters long")

def normalize_email(email: str) -> str:
    """Validated address, lowercased; stored and compared in this form."""
    try:
        return validate_email(email, check_deliverability=False).normalized.lower()
    except EmailNotValidError:
        raise HTTPException(status_code=400, detail="Invalid email format")

def validate_signup(payload: SignupRequest) -> dict:
    """Input checks that run before the database is touched."""
    username = (payload.username or "").strip()
    email = (payload.email or "").strip()
    password = payload.password or ""
    full_name = (payload.full_name or "").strip()

    if not username or not email or not password or not full_name:
        raise HTTPException(status_code=400, detail="All fields are required")
    check_username(username)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    email = normalize_email(email)

    return {"username": username, "email": email, "password": password, "full_name": full_name}

@router.post("/login")
async def login(payload: LoginRequest, db: Session = Depends(deps.get_db)):
    identifier = payload.username.strip()
    if not identifier or not payload.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    db_user = db.query(User).filter(
        or_(User.username == identifier, func.lower(User.email) == identifier.lower()),
        User.is_active == True
    ).first()
    if not db_user or not verify_password(payload.password, db_user.hashed_password):
        logger.info("Failed login for %s", identifier)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    remember_token = None
    if payload.remember:
        remember_token = generate_remember_token()
        db_user.remember_token = remember_token

    log_activity(db, db_user.id, "login", f"User {db_user.username} logged in")
    db.commit()

    response = success_response(None, "Login successful", user=db_user.to_session_dict())
    start_session(response, db_user)
    if remember_token:
        response.set_cookie(
            key=deps.REMEMBER_COOKIE,
            value=remember_token,
            max_age=settings.REMEMBER_ME_DAYS * 86400,
            httponly=True,
            samesite="lax",
        )
    return response

@router.post("/signup")
async def signup(payload: SignupRequest, db: Session = Depends(deps.get_db)):
    fields = validate_signup(payload)

    if db.query(User).filter(User.username == fields["username"]).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    if db.query(User).filter(func.lower(User.email) == fields["email"]).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already exists")

    new_user = User(
        username=fields["username"],
        email=fields["email"],
        hashed_password=get_password_hash(fields["password"]),
        full_name=fields["full_name"],
        role="user",
        is_active=True,
    )
    db.add(new_user)
    db.flush()

    log_activity(db, new_user.id, "signup", f"New user registered: {new_user.username}")
    db.commit()
    logger.info("User %s signed up", new_user.username)

    response = success_response(
        None, "Account created successfully!", status.HTTP_201_CREATED,
        user=new_user.to_session_dict()
    )
    start_session(response, new_user)
    return response

@router.post("/logout")
async def logout(
    db: Session = Depends(deps.get_db),
    user: Optional[User] = Depends(deps.get_optional_user)
):
    if user is not None and user.remember_token:
        user.remember_token = None
        db.commit()

    response = success_response(None, "Logged out successfully")
    response.delete_cookie(deps.ACCESS_COOKIE)
    response.delete_cookie(deps.REMEMBER_COOKIE)
    return response

@router.get("/check_auth")
async def check_auth(request: Request, db: Session = Depends(deps.get_db)):
    user = deps.user_from_session_cookie(request, db)
    restored = False
    if user is None:
        user = deps.user_from_remember_cookie(request, db)
        restored = user is not None

    if user is None:
        return JSONResponse({"authenticated": False})

    response = JSONResponse({"authenticated": True, "user": user.to_session_dict()})
    if restored:
        start_session(response, user)
    return response
