"""Gas level classification."""

from __future__ import annotations

from enum import Enum

DANGER_THRESHOLD = 1.0
WARNING_THRESHOLD = 0.5


class GasStatus(str, Enum):
    """Severity derived from the gas sensor voltage."""

    safe = "safe"
    warning = "warning"
    danger = "danger"


def classify(gas_voltage: float) -> GasStatus:
    if gas_voltage > DANGER_THRESHOLD:
        return GasStatus.danger
    if gas_voltage > WARNING_THRESHOLD:
        return GasStatus.warning
    return GasStatus.safe
