"""
Blob storage service for offer thumbnails.

Stores files on local disk under UPLOAD_BASE_DIR/{bucket}/[{folder}/]{filename}
and hands out public URLs of the form {STORAGE_PUBLIC_URL}/{bucket}/[{folder}/]{filename},
which main.py serves read-only.
"""
import logging
import secrets
import time
from pathlib import Path
from typing import Optional

from app.config import settings
from app.errors import RemoteOperationError

logger = logging.getLogger(__name__)


def _bucket_dir() -> Path:
    return Path(settings.upload_base_dir) / settings.storage_bucket


def _blob_name(filename: str) -> str:
    """Unique, timestamped name keeping the original extension."""
    ext = Path(filename).suffix.lstrip(".").lower() if filename else ""
    stem = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"
    return f"{stem}.{ext}" if ext else stem


def public_url(relative_path: str) -> str:
    return f"{settings.storage_public_url.rstrip('/')}/{settings.storage_bucket}/{relative_path}"


def get_absolute_path(relative_path: str) -> Path:
    """Resolve a path inside the bucket, refusing anything that escapes it."""
    base = _bucket_dir().resolve()
    full = (base / relative_path).resolve()
    if base != full and base not in full.parents:
        raise ValueError(f"Path escapes storage bucket: {relative_path}")
    return full


def blob_path_from_url(url: Optional[str]) -> Optional[str]:
    """
    Extract the in-bucket path from a public URL.

    Returns None for URLs that do not point into our bucket (e.g. external images).
    """
    if not url:
        return None
    prefix = public_url("")
    if not url.startswith(prefix):
        return None
    return url[len(prefix):] or None


def upload_blob(content: bytes, filename: str, folder: Optional[str] = None) -> str:
    """
    Store bytes under a fresh name and return its public URL.

    Raises RemoteOperationError when the write fails.
    """
    name = _blob_name(filename)
    relative_path = f"{folder}/{name}" if folder else name
    try:
        target = get_absolute_path(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    except OSError as e:
        logger.error("Blob upload failed for %s: %s", relative_path, e)
        raise RemoteOperationError("upload_blob", str(e)) from e

    logger.info("Stored blob %s (%d bytes)", relative_path, len(content))
    return public_url(relative_path)


def delete_blob(url: Optional[str]) -> bool:
    """
    Release the blob behind a public URL.

    Returns False when the URL is not one of ours. Raises RemoteOperationError
    when the delete itself fails.
    """
    relative_path = blob_path_from_url(url)
    if relative_path is None:
        logger.info("Not a storage URL, nothing to delete: %s", url)
        return False
    try:
        get_absolute_path(relative_path).unlink(missing_ok=True)
    except (OSError, ValueError) as e:
        logger.error("Blob delete failed for %s: %s", relative_path, e)
        raise RemoteOperationError("delete_blob", str(e)) from e
    logger.info("Deleted blob %s", relative_path)
    return True
