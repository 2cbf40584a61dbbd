from __future__ import annotations

import logging
import os
import re
import time
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from fastapi import UploadFile

from workai.core.config import settings
from workai.schemas.jobs import MediaRef

logger = logging.getLogger(__name__)

_CHUNK_BYTES = 1024 * 64
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


class MediaRejected(ValueError):
    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def safe_filename(original: str) -> str:
    name = os.path.basename((original or "").strip()) or "upload"
    return _UNSAFE_FILENAME_CHARS.sub("_", name)[:200]


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


class MediaStorage:
    def __init__(self, directory: str | Path, *, max_bytes: int, allowed_extensions: Iterable[str]):
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.allowed_extensions = frozenset(ext.lower().lstrip(".") for ext in allowed_extensions)

    def check_extension(self, filename: str) -> None:
        ext = file_extension(filename)
        if self.allowed_extensions and ext not in self.allowed_extensions:
            raise MediaRejected(
                f"Unsupported file type '.{ext}'. Allowed: {', '.join(sorted(self.allowed_extensions))}."
            )

    async def save(self, upload: UploadFile) -> MediaRef:
        original = upload.filename or "upload"
        self.check_extension(original)

        self.directory.mkdir(parents=True, exist_ok=True)
        stored_name = f"{int(time.time() * 1000)}-{safe_filename(original)}"
        target = self.directory / stored_name

        total = 0
        try:
            with target.open("wb") as handle:
                while True:
                    chunk = await upload.read(_CHUNK_BYTES)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > self.max_bytes:
                        raise MediaRejected(
                            f"File too large. Maximum allowed size is {self.max_bytes // (1024 * 1024)} MB.",
                            status_code=413,
                        )
                    handle.write(chunk)
        except MediaRejected:
            target.unlink(missing_ok=True)
            raise

        logger.info("media_stored filename=%s size=%s", stored_name, total)
        return MediaRef(
            filename=stored_name,
            original_name=original[:255],
            mimetype=(upload.content_type or "")[:120],
            size=total,
        )


@lru_cache(maxsize=1)
def get_media_storage() -> MediaStorage:
    return MediaStorage(
        settings.uploads_dir,
        max_bytes=settings.upload_max_bytes,
        allowed_extensions=settings.upload_allowed_extensions,
    )
