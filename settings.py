from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_TTL_ENV = "HR_READING_TTL_SECONDS"
_SWEEP_INTERVAL_ENV = "HR_SWEEP_INTERVAL_SECONDS"
_BIND_HOST_ENV = "HR_BIND_HOST"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    reading_ttl_seconds: int
    sweep_interval_seconds: float
    bind_host: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        reading_ttl_seconds=_read_positive_int(_TTL_ENV, 30 * 60),
        sweep_interval_seconds=_read_positive_float(_SWEEP_INTERVAL_ENV, 60.0),
        bind_host=_read_str_env(_BIND_HOST_ENV, "0.0.0.0"),
        log_level=_read_log_level("INFO"),
    )
