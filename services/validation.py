"""Input checks shared by the HTTP API and the agent tools.

Every helper raises :class:`InvalidInput` with the message that is shown to the
caller verbatim, and returns the normalised value otherwise.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from services import pairing

MIN_BPM = 30
MAX_BPM = 250
MIN_ZONE = 1
MAX_ZONE = 5
MIN_WINDOW_SECONDS = 1
MAX_WINDOW_SECONDS = 1800
DEFAULT_HISTORY_SECONDS = 10
DEFAULT_STATS_SECONDS = 60

INVALID_CODE_FORMAT = "Invalid pairing code format"
INVALID_BPM = f"Invalid BPM (must be {MIN_BPM}-{MAX_BPM})"
INVALID_ZONE = f"Invalid zone (must be {MIN_ZONE}-{MAX_ZONE})"
INVALID_WINDOW = f"Seconds must be {MIN_WINDOW_SECONDS}-{MAX_WINDOW_SECONDS}"


class InvalidInput(ValueError):
    """Raised when caller-supplied input fails validation."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    if not _is_number(value):
        return False
    # Ints are exact and may be too large for float conversion.
    return isinstance(value, int) or math.isfinite(value)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def require_code(code: Any, missing_message: str = "Missing pairing code") -> str:
    if not code or not isinstance(code, str):
        raise InvalidInput(missing_message)
    if not pairing.validate(code):
        raise InvalidInput(INVALID_CODE_FORMAT)
    return code


def require_bpm(bpm: Any) -> int:
    if not _is_finite_number(bpm):
        raise InvalidInput(INVALID_BPM)
    if bpm < MIN_BPM or bpm > MAX_BPM:
        raise InvalidInput(INVALID_BPM)
    return _round_half_up(bpm)


def require_zone(zone: Any) -> int:
    if not _is_finite_number(zone):
        raise InvalidInput(INVALID_ZONE)
    if isinstance(zone, float) and not zone.is_integer():
        raise InvalidInput(INVALID_ZONE)
    if zone < MIN_ZONE or zone > MAX_ZONE:
        raise InvalidInput(INVALID_ZONE)
    return int(zone)


def require_window(seconds: Any, default: int) -> int:
    """Validate a lookback window, accepting ints or their string form."""
    if seconds is None:
        return default
    if isinstance(seconds, str):
        candidate = seconds.strip()
        if not candidate:
            return default
        try:
            seconds = int(candidate)
        except ValueError as exc:
            raise InvalidInput(INVALID_WINDOW) from exc
    if not _is_number(seconds):
        raise InvalidInput(INVALID_WINDOW)
    if isinstance(seconds, float) and not seconds.is_integer():
        raise InvalidInput(INVALID_WINDOW)
    if seconds < MIN_WINDOW_SECONDS or seconds > MAX_WINDOW_SECONDS:
        raise InvalidInput(INVALID_WINDOW)
    return int(seconds)

