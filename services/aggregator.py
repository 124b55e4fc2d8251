"""Aggregation logic for heart-rate readings."""

from __future__ import annotations

from typing import Iterable, Optional

from models.records import Aggregate, Reading

ZONES = (1, 2, 3, 4, 5)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def aggregate(self, readings: Iterable[Reading]) -> Optional[Aggregate]:
        count = 0
        total = 0
        minimum: int | None = None
        maximum: int | None = None
        time_in_zone = {zone: 0 for zone in ZONES}

        for reading in readings:
            count += 1
            bpm = reading.bpm
            total += bpm

            if minimum is None or bpm < minimum:
                minimum = bpm
            if maximum is None or bpm > maximum:
                maximum = bpm

            # One reading stands in for one second in its zone.
            if reading.zone in time_in_zone:
                time_in_zone[reading.zone] += 1

        if count == 0 or minimum is None or maximum is None:
            return None

        return Aggregate(
            avg=_round_half_up(total, count),
            min=minimum,
            max=maximum,
            count=count,
            time_in_zone=time_in_zone,
        )


def _round_half_up(total: int, count: int) -> int:
    return (2 * total + count) // (2 * count)
