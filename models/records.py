"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict


@dataclass(frozen=True, slots=True)
class Reading:
    """A single heart-rate sample as stamped by the store on arrival."""

    bpm: int
    zone: int
    timestamp: datetime


@dataclass
class Aggregate:
    """Summary statistics over the readings of one window.

    ``time_in_zone`` counts readings, not elapsed seconds. It approximates dwell
    time only while the device reports at roughly one reading per second.
    """

    avg: int
    min: int
    max: int
    count: int
    time_in_zone: Dict[int, int] = field(default_factory=dict)
