import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.responses import success_response
from app.db.models.document import Document
from app.db.models.user import User
from app.routers import deps
from app.utils import uploads

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/documents",
    tags=["documents"],
    dependencies=[Depends(deps.get_current_user)]
)

def get_document_or_404(db: Session, document_id: int, user: User) -> Document:
    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    if document.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied")
    return document

@router.get("")
async def list_documents(
    id: Optional[int] = None,
    user_id: Optional[int] = None,
    category: str = "all",
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    if id is not None:
        document = get_document_or_404(db, id, user)
        return success_response(document.to_dict(), "Document retrieved successfully")

    owner_id = deps.resolve_user_id(user, user_id)
    query = db.query(Document).filter(Document.user_id == owner_id)
    if category != "all":
        query = query.filter(Document.category == category)
    documents = query.order_by(desc(Document.created_at), desc(Document.id)).all()
    return success_response([d.to_dict() for d in documents], "Documents retrieved successfully")

@router.post("")
async def upload_document(
    user_id: Optional[int] = Form(None),
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(""),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    if user_id is None or not name or not category:
        raise HTTPException(status_code=400, detail="Missing required fields: user_id, name, or category")
    owner_id = deps.resolve_user_id(user, user_id)
    if not db.query(User).filter(User.id == owner_id).first():
        raise HTTPException(status_code=404, detail="User not found")

    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    # One byte past the ceiling is enough to flag an oversize file
    contents = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    try:
        ext = uploads.validate_upload(file.filename, len(contents))
    except uploads.UploadRejected as e:
        raise HTTPException(status_code=400, detail=str(e))

    relative_path = uploads.save_document(contents, ext)
    logger.info("Stored upload %s for user %s", relative_path, owner_id)

    document = Document(
        user_id=owner_id,
        name=name.strip(),
        description=description or "",
        category=category,
        file_name=file.filename,
        file_path=relative_path,
        file_size=len(contents),
        file_type=file.content_type,
        file_extension=ext,
    )
    try:
        db.add(document)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        uploads.remove_file(relative_path)
        logger.exception("Failed to save document row; removed %s", relative_path)
        raise

    return success_response({
        "id": document.id,
        "name": document.name,
        "file_name": document.file_name,
        "file_path": document.file_path,
    }, "Document uploaded successfully", status.HTTP_201_CREATED)

@router.delete("")
async def delete_document(
    id: Optional[int] = None,
    db: Session = Depends(deps.get_db),
    user: User = Depends(deps.get_current_user)
):
    if id is None:
        raise HTTPException(status_code=400, detail="Document ID required")

    document = get_document_or_404(db, id, user)
    file_path = document.file_path

    # Row delete stays uncommitted until the file is gone
    db.delete(document)
    db.flush()
    try:
        uploads.remove_file(file_path)
    except OSError:
        db.rollback()
        logger.exception("Could not remove %s; document %s kept", file_path, id)
        raise HTTPException(status_code=500, detail="Failed to delete document file")
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error("Document %s row kept after its file %s was removed", id, file_path)
        raise

    return success_response(None, "Document deleted successfully")
