import logging
import time
import uuid
from pathlib import Path
from typing import Optional

from app.core.config import settings

logger = logging.getLogger(__name__)

# Stored paths look like "uploads/documents/<name>" and map onto UPLOAD_DIR
URL_PREFIX = "uploads"
DOCUMENTS_SUBDIR = "documents"

class UploadRejected(ValueError):
    pass

def file_extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()

def validate_upload(filename: Optional[str], size: int) -> str:
    """Checks the allow-list and size ceiling. Returns the lowercase extension."""
    if not filename:
        raise UploadRejected("No file uploaded")
    ext = file_extension(filename)
    if ext not in settings.ALLOWED_EXTENSIONS:
        raise UploadRejected(
            "File type not allowed. Allowed types: " + ", ".join(settings.ALLOWED_EXTENSIONS)
        )
    if size > settings.MAX_UPLOAD_SIZE:
        raise UploadRejected(f"File size exceeds {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit")
    return ext

def unique_filename(ext: str) -> str:
    return f"{uuid.uuid4().hex}_{int(time.time())}.{ext}"

def documents_dir() -> Path:
    target = Path(settings.UPLOAD_DIR) / DOCUMENTS_SUBDIR
    target.mkdir(parents=True, exist_ok=True)
    return target

def save_document(contents: bytes, ext: str) -> str:
    """Writes the file and returns its stored relative path."""
    name = unique_filename(ext)
    (documents_dir() / name).write_bytes(contents)
    return f"{URL_PREFIX}/{DOCUMENTS_SUBDIR}/{name}"

def physical_path(relative_path: str) -> Path:
    rel = Path(relative_path)
    if rel.parts and rel.parts[0] == URL_PREFIX:
        rel = Path(*rel.parts[1:])
    return Path(settings.UPLOAD_DIR) / rel

def remove_file(relative_path: str) -> bool:
    """Deletes a stored file. A file that is already gone counts as removed."""
    path = physical_path(relative_path)
    if path.exists():
        path.unlink()
        return True
    logger.warning("Upload %s was already missing on disk", relative_path)
    return False
