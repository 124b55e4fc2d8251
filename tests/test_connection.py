from __future__ import annotations

import pytest

from datastore.reading_store import ReadingStore
from services.connection import ConnectionState, connection_status


def test_unknown_code_is_disconnected(store: ReadingStore) -> None:
    status = connection_status(store, "falcon99")

    assert status.state is ConnectionState.disconnected
    assert status.connected is False
    assert status.last_seen is None


@pytest.mark.parametrize(
    "age, expected",
    [
        (0, ConnectionState.streaming),
        (10, ConnectionState.streaming),
        (10.5, ConnectionState.idle),
        (60, ConnectionState.idle),
        (61, ConnectionState.disconnected),
        (1799, ConnectionState.disconnected),
    ],
)
def test_state_follows_age_of_latest_reading(store: ReadingStore, clock, age, expected) -> None:
    reading = store.insert("tiger07", 72, 2)
    clock.advance(age)

    status = connection_status(store, "tiger07")

    assert status.state is expected
    assert status.connected is (expected is not ConnectionState.disconnected)
    assert status.last_seen == reading.timestamp


def test_expired_reading_reports_never_seen(store: ReadingStore, clock) -> None:
    store.insert("tiger07", 72, 2)
    clock.advance(1801)

    status = connection_status(store, "tiger07")

    assert status.state is ConnectionState.disconnected
    assert status.last_seen is None
