"""Unit tests for the aggregation logic."""

from __future__ import annotations

from datetime import datetime, timezone

from models.records import Reading
from services.aggregator import Aggregator


def _reading(bpm: int, zone: int) -> Reading:
    """Helper to build deterministic readings."""

    return Reading(bpm=bpm, zone=zone, timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))


def test_aggregate_empty_iterable_returns_none() -> None:
    aggregator = Aggregator()

    assert aggregator.aggregate([]) is None


def test_aggregate_computes_statistics() -> None:
    aggregator = Aggregator()
    readings = [
        _reading(100, 1),
        _reading(140, 3),
        _reading(120, 1),
    ]

    summary = aggregator.aggregate(readings)

    assert summary is not None
    assert summary.count == 3
    assert summary.min == 100
    assert summary.max == 140
    assert summary.avg == 120
    assert summary.time_in_zone == {1: 2, 2: 0, 3: 1, 4: 0, 5: 0}


def test_average_rounds_half_up() -> None:
    aggregator = Aggregator()

    summary = aggregator.aggregate([_reading(70, 2), _reading(71, 2)])

    assert summary is not None
    assert summary.avg == 71


def test_time_in_zone_counts_readings_not_durations() -> None:
    aggregator = Aggregator()
    zones = [1, 1, 2, 3, 5]

    summary = aggregator.aggregate(_reading(90, zone) for zone in zones)

    assert summary is not None
    assert summary.count == 5
    assert summary.time_in_zone == {1: 2, 2: 1, 3: 1, 4: 0, 5: 1}
    assert sum(summary.time_in_zone.values()) == summary.count
    assert summary.min <= summary.avg <= summary.max
