import logging
import re
from pathlib import Path
from typing import Optional
from uuid import uuid4

from fastapi import UploadFile

from coachtrack.config import UPLOAD_DIR, UPLOAD_URL_PREFIX, MAX_UPLOAD_MB
from coachtrack.exceptions import ValidationError

logger = logging.getLogger(__name__)

"""
Evidence Storage
----------------
Local-directory blob store for uploaded evidence (cardio machine photos).
Files land in UPLOAD_DIR under a random name and are served back by the
static mount at UPLOAD_URL_PREFIX.
"""

CHUNK_SIZE = 1024 * 256


def _safe_suffix(filename: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if not re.fullmatch(r"\.[a-z0-9]{1,10}", suffix):
        return ""
    return suffix


def upload_root() -> Path:
    root = Path(UPLOAD_DIR)
    root.mkdir(parents=True, exist_ok=True)
    return root


def save_upload(upload: UploadFile) -> str:
    """Write the upload to disk and return its public URL."""
    name = f"{uuid4().hex}{_safe_suffix(upload.filename)}"
    path = upload_root() / name

    size = 0
    max_bytes = MAX_UPLOAD_MB * 1024 * 1024
    try:
        with path.open("wb") as f:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise ValidationError(f"File too large (> {MAX_UPLOAD_MB} MB)")
                f.write(chunk)
    except ValidationError:
        path.unlink(missing_ok=True)
        raise
    finally:
        upload.file.close()

    if size == 0:
        path.unlink(missing_ok=True)
        raise ValidationError("Uploaded file is empty")

    logger.info(f"Stored upload {upload.filename!r} as {name} ({size} bytes)")
    return f"{UPLOAD_URL_PREFIX.rstrip('/')}/{name}"


def delete_upload(url: Optional[str]) -> None:
    """Best-effort removal of a file previously returned by save_upload."""
    if not url or not url.startswith(UPLOAD_URL_PREFIX):
        return
    path = upload_root() / Path(url).name
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove upload {path}: {e}")
