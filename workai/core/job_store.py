from __future__ import annotations

import json
import logging
import os
import secrets
import tempfile
import threading
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from workai.core.config import settings
from workai.schemas.jobs import ANONYMOUS_OPERATOR, RecommendationResult, StoredJob

logger = logging.getLogger(__name__)

_store_lock = threading.Lock()


class JobStoreError(RuntimeError):
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_job_id(now: datetime) -> str:
    return f"{int(now.timestamp() * 1000)}-{secrets.token_hex(3)}"


class JsonJobStore:
    """Append-only job history kept as a single JSON array on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def ensure(self) -> None:
        with _store_lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write_unlocked([])

    def _read_raw_unlocked(self) -> list[Any]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise JobStoreError(f"Unable to read job store '{self.path}': {exc}") from exc
        try:
            parsed = json.loads(raw or "[]")
        except json.JSONDecodeError as exc:
            raise JobStoreError(f"Job store '{self.path}' is not valid JSON: {exc}") from exc
        if not isinstance(parsed, list):
            raise JobStoreError(f"Job store '{self.path}' must contain a JSON array.")
        return parsed

    def _write_unlocked(self, records: list[Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".jobs-", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(records, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise JobStoreError(f"Unable to write job store '{self.path}': {exc}") from exc

    def load(self) -> list[StoredJob]:
        with _store_lock:
            raw_records = self._read_raw_unlocked()

        jobs: list[StoredJob] = []
        for index, raw in enumerate(raw_records):
            try:
                jobs.append(StoredJob.model_validate(raw))
            except ValidationError as exc:
                logger.warning(
                    "job_store_record_skipped path=%s index=%s errors=%s",
                    self.path,
                    index,
                    exc.error_count(),
                )
        return jobs

    def append(self, result: RecommendationResult, *, operator_id: str | None = None) -> StoredJob:
        created_at = _utc_now()
        job = StoredJob(
            **result.model_dump(),
            id=_new_job_id(created_at),
            created_at=created_at,
            operator_id=(operator_id or "").strip() or ANONYMOUS_OPERATOR,
        )
        payload = job.model_dump(mode="json", by_alias=True)

        with _store_lock:
            records = self._read_raw_unlocked()
            records.append(payload)
            self._write_unlocked(records)
        return job


@lru_cache(maxsize=1)
def get_job_store() -> JsonJobStore:
    return JsonJobStore(settings.jobs_db_path)
