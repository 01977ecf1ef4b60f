import logging
from pathlib import Path

from fastapi import FastAPI, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.responses import error_response
from app.core.templates import templates
from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.routers import activity, auth, deps, documents, lookups, progress, tasks, users
from app.utils.uploads import URL_PREFIX

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

# Uploaded documents are addressable as /uploads/documents/<name>
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount(f"/{URL_PREFIX}", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

@app.middleware("http")
async def short_circuit_options(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200)
    return await call_next(request)

# Outermost: answers browser preflights, bare OPTIONS fall through to the shortcut
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = error_response(str(exc.detail), exc.status_code)
    if exc.headers:
        response.headers.update(exc.headers)
    return response

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response("Validation error", 400, exc.errors())

@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("[API ERROR] %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return error_response("Database error", 500)

@app.get("/")
async def read_root(request: Request, user=Depends(deps.get_optional_user)):
    return templates.TemplateResponse(request, "index.html", {"user": user, "app_name": settings.PROJECT_NAME})

@app.get("/health")
async def health():
    return {"status": "healthy", "service": settings.PROJECT_NAME}

app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(lookups.router)
app.include_router(progress.router)
app.include_router(documents.router)
app.include_router(activity.router)
app.include_router(users.router)

# Create tables and reference data on startup (Simple approach)
@app.on_event("startup")
def on_startup():
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()
