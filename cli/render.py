from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

import typer

from models.records import Reading
from services.poller import PollStatus
from services.status import GasStatus, classify
from services.windows import TimeRange

_STATUS_COLORS = {
    GasStatus.safe: typer.colors.GREEN,
    GasStatus.warning: typer.colors.YELLOW,
    GasStatus.danger: typer.colors.RED,
}

_RANGE_LABELS = {
    TimeRange.last_hour: "Last Hour",
    TimeRange.last_day: "Last Day",
    TimeRange.last_month: "Last Month",
    TimeRange.all: "All Data",
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S %Z")


def render_status(status: PollStatus) -> None:
    if status.error:
        typer.secho(status.error, fg=typer.colors.RED, err=True)
    if status.dropped_count:
        typer.secho(
            f"{status.dropped_count} malformed record(s) skipped.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def render_latest(reading: Optional[Reading]) -> None:
    echo_heading("Current Readings")
    if reading is None:
        typer.echo("No readings available yet.")
        return

    gas_status = classify(reading.gas_voltage)
    echo_key_values(
        [
            ("temperature", f"{reading.temperature:.1f}°C"),
            ("humidity", f"{reading.humidity:.1f}%"),
        ]
    )
    typer.echo(f"gas_level: {reading.gas_voltage:.2f}V ", nl=False)
    typer.secho(gas_status.value.upper(), fg=_STATUS_COLORS[gas_status], bold=True)
    echo_key_values([("last_updated", format_timestamp(reading.timestamp))])


def render_readings(readings: Sequence[Reading], time_range: TimeRange) -> None:
    echo_heading(f"Data Log ({_RANGE_LABELS[time_range]})")
    if not readings:
        typer.echo("No historical data available for the selected time range.")
        return

    typer.echo(f"{'timestamp':<24} {'temp (°C)':>9} {'hum (%)':>8} {'gas (V)':>8}  status")
    for reading in readings:
        gas_status = classify(reading.gas_voltage)
        typer.echo(
            f"{format_timestamp(reading.timestamp):<24} "
            f"{reading.temperature:>9.1f} {reading.humidity:>8.1f} {reading.gas_voltage:>8.2f}  ",
            nl=False,
        )
        typer.secho(gas_status.value.upper(), fg=_STATUS_COLORS[gas_status])


def render_dashboard(
    status: PollStatus,
    latest: Optional[Reading],
    readings: Sequence[Reading],
    time_range: TimeRange,
) -> None:
    render_status(status)
    render_latest(latest)
    typer.echo()
    render_readings(readings, time_range)
