"""
Disk storage for uploaded images
"""
import os
import time
from typing import BinaryIO, Optional

from runbook_checklist.core.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


class UploadTooLarge(Exception):
    """Raised when an upload exceeds the configured size limit."""


def stored_filename(original_name: Optional[str], timestamp_ms: Optional[int] = None) -> str:
    """``name.png`` becomes ``name-<epoch millis>.png``; directories are dropped."""
    base = os.path.basename((original_name or "").replace("\\", "/")) or "upload"
    name, ext = os.path.splitext(base)
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{name or 'upload'}-{timestamp_ms}{ext}"


class UploadStorage:
    """Writes uploads under one directory served statically"""

    def __init__(self, upload_dir: str, url_prefix: str, max_size: int):
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size = max_size

    def save(self, source: BinaryIO, original_name: Optional[str]) -> str:
        """Store the stream and return its public URL"""
        os.makedirs(self.upload_dir, exist_ok=True)
        filename = stored_filename(original_name)
        path = os.path.join(self.upload_dir, filename)

        written = 0
        try:
            with open(path, "wb") as target:
                while True:
                    chunk = source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_size:
                        raise UploadTooLarge(f"Upload exceeds {self.max_size} bytes")
                    target.write(chunk)
        except UploadTooLarge:
            os.remove(path)
            raise

        logger.info(f"Stored upload {filename} ({written} bytes)")
        return f"{self.url_prefix}/{filename}"
