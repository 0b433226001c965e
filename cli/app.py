from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import render_dashboard
from logging_config import configure_logging
from models.records import Reading
from services.engine import TelemetryEngine
from services.poller import PollStatus
from services.source import HttpTelemetrySource
from services.windows import TimeRange


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Terminal dashboard for the room sensor telemetry endpoint.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _build_engine(config: CLIConfig) -> TelemetryEngine:
    source = HttpTelemetrySource(config.endpoint_url, timeout=config.fetch_timeout)
    return TelemetryEngine(
        source=source,
        poll_interval_ms=config.poll_interval_ms,
        fetch_timeout=config.fetch_timeout,
    )


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Sensor API URL (defaults to TELEMETRY_ENDPOINT_URL env or the public sensor endpoint).",
    ),
    interval_ms: Optional[int] = typer.Option(
        None,
        "--interval-ms",
        help="Milliseconds between poll cycles.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds before a fetch is abandoned.",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging()
    config = load_config(
        endpoint_url=endpoint,
        poll_interval_ms=interval_ms,
        fetch_timeout=timeout,
    )
    ctx.obj = CLIState(config=config)


async def _snapshot(engine: TelemetryEngine) -> PollStatus:
    try:
        return await engine.refresh()
    finally:
        await engine.aclose()


async def _watch(engine: TelemetryEngine, time_range: TimeRange, cycles: Optional[int]) -> None:
    done = asyncio.Event()
    seen = 0

    def on_cycle(status: PollStatus, latest: Optional[Reading]) -> None:
        nonlocal seen
        seen += 1
        typer.echo()
        render_dashboard(status, latest, engine.window(time_range), time_range)
        if cycles is not None and seen >= cycles:
            done.set()

    engine.add_listener(on_cycle)
    engine.start()
    try:
        await done.wait()
    finally:
        await engine.aclose()


@app.command("snapshot")
def snapshot_command(
    ctx: typer.Context,
    time_range: TimeRange = typer.Option(
        TimeRange.last_hour,
        "--range",
        "-r",
        case_sensitive=False,
        help="Window of the data log.",
    ),
) -> None:
    """Fetch the readings once and print the current values and data log."""
    state = _get_state(ctx)
    engine = _build_engine(state.config)
    typer.echo(f"Fetching readings from {state.config.endpoint_url} ...")
    status = asyncio.run(_snapshot(engine))
    render_dashboard(status, engine.latest(), engine.window(time_range), time_range)
    if status.error and not engine.series():
        raise typer.Exit(code=1)


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    time_range: TimeRange = typer.Option(
        TimeRange.last_hour,
        "--range",
        "-r",
        case_sensitive=False,
        help="Window of the data log.",
    ),
    cycles: Optional[int] = typer.Option(
        None,
        "--cycles",
        min=1,
        help="Stop after this many poll cycles (runs until interrupted by default).",
    ),
) -> None:
    """Poll continuously and re-render after every cycle."""
    state = _get_state(ctx)
    engine = _build_engine(state.config)
    typer.echo(
        f"Watching {state.config.endpoint_url} every {state.config.poll_interval_ms} ms "
        "(Ctrl-C to stop) ..."
    )
    try:
        asyncio.run(_watch(engine, time_range, cycles))
    except KeyboardInterrupt:
        typer.echo("Stopped.")
