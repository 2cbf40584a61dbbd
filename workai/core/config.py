from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    service_name: str
    api_key: str | None
    rate_limit: str
    upload_rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    jobs_db_path: str
    uploads_dir: str
    upload_max_bytes: int
    upload_allowed_extensions: tuple[str, ...]
    pricing_config_path: str
    note_refiner_enabled: bool
    note_refiner_timeout_s: float


settings = Settings(
    service_name=_get_env("SERVICE_NAME", "workai-backend") or "workai-backend",
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    upload_rate_limit=_get_env("UPLOAD_RATE_LIMIT", "20/minute") or "20/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    jobs_db_path=_get_env("JOBS_DB_PATH", "data/jobs.json") or "data/jobs.json",
    uploads_dir=_get_env("UPLOADS_DIR", "uploads") or "uploads",
    upload_max_bytes=_get_env_int("UPLOAD_MAX_BYTES", 25 * 1024 * 1024),
    upload_allowed_extensions=_get_env_list(
        "UPLOAD_ALLOWED_EXTENSIONS",
        ["png", "jpg", "jpeg", "webp", "gif", "heic", "mp4", "mov", "webm", "m4v"],
    ),
    pricing_config_path=_get_env("PRICING_CONFIG_PATH", "config/pricing.yaml") or "config/pricing.yaml",
    note_refiner_enabled=_get_env_bool("NOTE_REFINER_ENABLED", True),
    note_refiner_timeout_s=_get_env_float("NOTE_REFINER_TIMEOUT_S", 8.0),
)

if settings.upload_max_bytes <= 0:
    raise RuntimeError("UPLOAD_MAX_BYTES must be a positive number of bytes.")
