from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_current(code: str, payload: Optional[Dict[str, Any]]) -> None:
    echo_heading(f"Current heart rate for {code}")
    if not payload:
        typer.echo("No heart rate data available.")
        return
    echo_key_values(
        [
            ("bpm", payload.get("bpm")),
            ("zone", payload.get("zone")),
            ("timestamp", payload.get("timestamp")),
        ]
    )


def render_history(code: str, payload: Dict[str, Any]) -> None:
    readings = payload.get("readings") or []
    echo_heading(f"History for {code} ({len(readings)} readings)")
    if not readings:
        typer.echo("No readings in window.")
        return
    for reading in readings:
        typer.echo(
            f"  - {reading.get('timestamp')}  {reading.get('bpm')} bpm  zone {reading.get('zone')}"
        )


def render_stats(code: str, payload: Optional[Dict[str, Any]]) -> None:
    echo_heading(f"Stats for {code}")
    if not payload:
        typer.echo("No heart rate data in window.")
        return
    echo_key_values(
        [
            ("count", payload.get("count")),
            ("avg", payload.get("avg")),
            ("min", payload.get("min")),
            ("max", payload.get("max")),
        ]
    )
    time_in_zone = payload.get("timeInZone") or {}
    typer.echo("timeInZone:")
    for zone, seconds in sorted(time_in_zone.items()):
        typer.echo(f"  - Z{zone}: {seconds}s")


def render_status(code: str, payload: Dict[str, Any]) -> None:
    echo_heading(f"Connection for {code}")
    status = payload.get("status")
    colour = {
        "streaming": typer.colors.GREEN,
        "idle": typer.colors.YELLOW,
    }.get(status or "", typer.colors.RED)
    typer.secho(f"status: {status}", fg=colour)
    echo_key_values(
        [
            ("connected", payload.get("connected")),
            ("lastSeen", payload.get("lastSeen")),
        ]
    )
