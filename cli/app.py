from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from typing import List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_current, render_history, render_stats, render_status
from services import pairing


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for feeding and querying the heart-rate relay.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Relay base URL (defaults to API_BASE_URL env or http://localhost:8080).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    try:
        config = load_config(base_url=base_url, request_timeout=timeout)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("pair")
def pair_command() -> None:
    """Print a freshly generated pairing code."""
    typer.echo(pairing.generate())


@app.command("send")
def send_command(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Pairing code, e.g. tiger42."),
    bpm: float = typer.Argument(..., help="Heart rate in beats per minute."),
    zone: int = typer.Argument(..., help="Heart rate zone (1-5)."),
) -> None:
    """Submit a single reading."""
    state = _get_state(ctx)
    state.client.submit_reading(code, bpm, zone)
    typer.secho(f"Reading accepted for {code}.", fg=typer.colors.GREEN)


@app.command("stream")
def stream_command(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Pairing code, e.g. tiger42."),
    bpm: float = typer.Option(72, "--bpm", help="Heart rate to report."),
    zones: List[int] = typer.Option(
        [1], "--zone", "-z", help="Zone to report; repeat to cycle through several."
    ),
    count: int = typer.Option(10, "--count", "-n", min=1, help="Number of readings to send."),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        min=0,
        help="Seconds between readings (defaults to CLI_STREAM_INTERVAL env or 1.0).",
    ),
) -> None:
    """Simulate a paired phone by sending readings at a fixed cadence."""
    state = _get_state(ctx)
    delay = interval if interval is not None else state.config.stream_interval
    zone_cycle = itertools.cycle(zones)
    typer.echo(f"Streaming {count} readings for {code} to {state.config.base_url} ...")
    for index in range(count):
        zone = next(zone_cycle)
        state.client.submit_reading(code, bpm, zone)
        typer.echo(f"  sent {bpm:g} bpm zone {zone}")
        if index < count - 1 and delay > 0:
            time.sleep(delay)
    typer.secho(f"Sent {count} readings.", fg=typer.colors.GREEN)


@app.command("current")
def current_command(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Pairing code, e.g. tiger42."),
) -> None:
    """Show the latest reading."""
    state = _get_state(ctx)
    render_current(code, state.client.get_current(code))


@app.command("history")
def history_command(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Pairing code, e.g. tiger42."),
    seconds: Optional[int] = typer.Option(None, "--seconds", "-s", help="Lookback window (1-1800)."),
) -> None:
    """List readings from the last N seconds."""
    state = _get_state(ctx)
    render_history(code, state.client.get_history(code, seconds))


@app.command("stats")
def stats_command(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Pairing code, e.g. tiger42."),
    seconds: Optional[int] = typer.Option(None, "--seconds", "-s", help="Lookback window (1-1800)."),
) -> None:
    """Show average, extremes and zone counts for the last N seconds."""
    state = _get_state(ctx)
    render_stats(code, state.client.get_stats(code, seconds))


@app.command("status")
def status_command(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Pairing code, e.g. tiger42."),
) -> None:
    """Show whether the device is streaming, idle or disconnected."""
    state = _get_state(ctx)
    render_status(code, state.client.get_status(code))
