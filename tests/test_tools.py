"""Tool-level tests driven through an in-memory MCP client session."""

from __future__ import annotations

from datetime import datetime

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from app.tools import build_tool_server
from datastore.reading_store import ReadingStore

pytestmark = pytest.mark.anyio


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def _text(result) -> str:
    return " ".join(getattr(item, "text", "") for item in result.content)


async def _call(store: ReadingStore, name: str, arguments: dict):
    server = build_tool_server(store_factory=lambda: store)
    async with create_connected_server_and_client_session(server._mcp_server) as client:
        return await client.call_tool(name, arguments)


async def test_tools_are_listed_with_schemas(store: ReadingStore) -> None:
    server = build_tool_server(store_factory=lambda: store)

    async with create_connected_server_and_client_session(server._mcp_server) as client:
        listed = await client.list_tools()

    tools = {tool.name: tool for tool in listed.tools}
    assert set(tools) == {
        "checkConnection",
        "getCurrentHeartRate",
        "getHeartRate",
        "getHeartRateHistory",
        "getHeartRateStats",
    }
    history_seconds = tools["getHeartRateHistory"].inputSchema["properties"]["seconds"]
    assert history_seconds["minimum"] == 1
    assert history_seconds["maximum"] == 1800
    assert history_seconds["default"] == 10
    assert tools["getHeartRateStats"].inputSchema["properties"]["seconds"]["default"] == 60
    assert "pairingCode" in tools["checkConnection"].inputSchema["required"]
    assert "timeInZone" in tools["getHeartRateStats"].outputSchema["properties"]


async def test_check_connection_for_unseen_code(store: ReadingStore) -> None:
    result = await _call(store, "checkConnection", {"pairingCode": "falcon99"})

    assert result.isError is False
    assert result.structuredContent == {
        "connected": False,
        "lastSeen": None,
        "status": "disconnected",
    }


async def test_check_connection_while_streaming(store: ReadingStore, clock) -> None:
    store.insert("tiger07", 72, 2)
    clock.advance(3)

    result = await _call(store, "checkConnection", {"pairingCode": "tiger07"})

    assert result.isError is False
    assert result.structuredContent["status"] == "streaming"
    assert result.structuredContent["connected"] is True
    assert result.structuredContent["lastSeen"] is not None


@pytest.mark.parametrize("tool", ["getCurrentHeartRate", "getHeartRate"])
async def test_current_heart_rate(store: ReadingStore, clock, tool: str) -> None:
    store.insert("tiger07", 72, 2)

    result = await _call(store, tool, {"pairingCode": "tiger07"})

    assert result.isError is False
    assert result.structuredContent["bpm"] == 72
    assert result.structuredContent["zone"] == 2
    stamped = datetime.fromisoformat(result.structuredContent["timestamp"].replace("Z", "+00:00"))
    assert stamped == clock()


async def test_current_heart_rate_without_data_is_tool_error(store: ReadingStore) -> None:
    result = await _call(store, "getCurrentHeartRate", {"pairingCode": "falcon99"})

    assert result.isError is True
    assert "No heart rate data available for falcon99" in _text(result)
    assert "checkConnection" in _text(result)


async def test_invalid_pairing_code_is_tool_error(store: ReadingStore) -> None:
    result = await _call(store, "checkConnection", {"pairingCode": "Tiger07"})

    assert result.isError is True
    assert "Invalid pairing code format" in _text(result)
    assert store.session_count() == 0


async def test_history_defaults_and_orders_readings(store: ReadingStore, clock) -> None:
    for bpm in (60, 70, 80):
        store.insert("wolf11", bpm, 1)
        clock.advance(6)

    default = await _call(store, "getHeartRateHistory", {"pairingCode": "wolf11"})
    wider = await _call(store, "getHeartRateHistory", {"pairingCode": "wolf11", "seconds": 60})

    assert [r["bpm"] for r in default.structuredContent["readings"]] == [80]
    assert [r["bpm"] for r in wider.structuredContent["readings"]] == [60, 70, 80]


async def test_history_rejects_out_of_range_window(store: ReadingStore) -> None:
    store.insert("wolf11", 60, 1)

    rejected = await _call(store, "getHeartRateHistory", {"pairingCode": "wolf11", "seconds": 1801})
    accepted = await _call(store, "getHeartRateHistory", {"pairingCode": "wolf11", "seconds": 1800})

    assert rejected.isError is True
    assert accepted.isError is False


async def test_stats_for_zone_mix(store: ReadingStore, clock) -> None:
    for zone in (1, 1, 2, 3, 5):
        store.insert("wolf11", 120, zone)
        clock.advance(1)

    result = await _call(store, "getHeartRateStats", {"pairingCode": "wolf11", "seconds": 60})

    assert result.isError is False
    assert result.structuredContent == {
        "avg": 120,
        "min": 120,
        "max": 120,
        "count": 5,
        "timeInZone": {"1": 2, "2": 1, "3": 1, "4": 0, "5": 1},
    }


async def test_stats_without_data_is_tool_error(store: ReadingStore) -> None:
    result = await _call(store, "getHeartRateStats", {"pairingCode": "falcon99"})

    assert result.isError is True
    assert "No heart rate data in the last 60 seconds" in _text(result)


async def test_check_connection_text_describes_state(store: ReadingStore, clock) -> None:
    unseen = await _call(store, "checkConnection", {"pairingCode": "falcon99"})
    store.insert("tiger07", 72, 2)
    streaming = await _call(store, "checkConnection", {"pairingCode": "tiger07"})
    clock.advance(30)
    idle = await _call(store, "checkConnection", {"pairingCode": "tiger07"})

    assert _text(unseen) == "User is not connected. No heart rate data available."
    assert _text(streaming) == "User is actively streaming heart rate data."
    assert _text(idle).startswith("User is connected but no recent data.")


async def test_current_heart_rate_text_includes_age(store: ReadingStore, clock) -> None:
    store.insert("tiger07", 72, 2)
    clock.advance(3)

    result = await _call(store, "getCurrentHeartRate", {"pairingCode": "tiger07"})

    assert _text(result) == "Current heart rate: 72 BPM (Zone 2), 3s ago"
    assert result.structuredContent["bpm"] == 72


async def test_history_text_summarises_readings(store: ReadingStore, clock) -> None:
    for bpm in (90, 110, 100):
        store.insert("wolf11", bpm, 2)
        clock.advance(1)

    result = await _call(store, "getHeartRateHistory", {"pairingCode": "wolf11", "seconds": 30})

    assert _text(result) == "3 readings in last 30s. Range: 90-110 BPM, latest 100 BPM."
    assert len(result.structuredContent["readings"]) == 3


async def test_stats_text_lists_populated_zones(store: ReadingStore, clock) -> None:
    for bpm, zone in zip((100, 110, 130, 150, 175), (1, 1, 2, 3, 5)):
        store.insert("wolf11", bpm, zone)
        clock.advance(1)

    result = await _call(store, "getHeartRateStats", {"pairingCode": "wolf11", "seconds": 60})

    assert _text(result) == (
        "Stats (last 60s): Avg 133 BPM, Range 100-175 BPM. "
        "Time in zones: Zone 1: 2s, Zone 2: 1s, Zone 3: 1s, Zone 5: 1s"
    )
    assert result.structuredContent["timeInZone"]["4"] == 0
