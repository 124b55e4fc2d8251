from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_STREAM_INTERVAL = 1.0
DEFAULT_TIMEOUT = 10.0

_BASE_URL_ENV = "API_BASE_URL"
_STREAM_INTERVAL_ENV = "CLI_STREAM_INTERVAL"
_TIMEOUT_ENV = "CLI_REQUEST_TIMEOUT"


@dataclass(frozen=True)
class CLIConfig:
    """Where the CLI talks to and how fast it streams simulated readings.

    A ``stream_interval`` of zero sends readings back to back.
    """

    base_url: str = DEFAULT_BASE_URL
    stream_interval: float = DEFAULT_STREAM_INTERVAL
    request_timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        parts = urlsplit(self.base_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"Relay URL must be an http(s) URL, got {self.base_url!r}")
        if self.stream_interval < 0:
            raise ValueError("Stream interval cannot be negative")
        if self.request_timeout <= 0:
            raise ValueError("Request timeout must be positive")


def _read_seconds(name: str, default: float, allow_zero: bool) -> float:
    """Read a duration from the environment, ignoring unusable values."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        parsed = float(raw)
    except ValueError:
        return default
    if parsed < 0 or (parsed == 0 and not allow_zero):
        return default
    return parsed


def load_config(
    base_url: Optional[str] = None,
    stream_interval: Optional[float] = None,
    request_timeout: Optional[float] = None,
) -> CLIConfig:
    """Merge explicit options over the environment.

    Explicit values are validated strictly and raise ``ValueError``; environment
    values that cannot be used fall back to the defaults.
    """
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if stream_interval is None:
        stream_interval = _read_seconds(_STREAM_INTERVAL_ENV, DEFAULT_STREAM_INTERVAL, allow_zero=True)
    if request_timeout is None:
        request_timeout = _read_seconds(_TIMEOUT_ENV, DEFAULT_TIMEOUT, allow_zero=False)
    return CLIConfig(
        base_url=url.strip().rstrip("/"),
        stream_interval=stream_interval,
        request_timeout=request_timeout,
    )
