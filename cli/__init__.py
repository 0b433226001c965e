"""Terminal views over the telemetry engine."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# ``cli.app`` stays a module attribute rather than the Typer instance, so
# ``monkeypatch.setattr("cli.app.HttpTelemetrySource", ...)`` swaps the
# telemetry source the commands build. Use ``cli.app:app`` for the script.

__all__ = []
