"""Typed battery telemetry models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BatteryStatus(str, Enum):
    CHARGING = "Charging"
    NOT_CHARGING = "NotCharging"


@dataclass(frozen=True)
class BatterySnapshot:
    capacity: int
    status: BatteryStatus

    @property
    def charging(self) -> bool:
        return self.status is BatteryStatus.CHARGING

    @classmethod
    def initial(cls) -> "BatterySnapshot":
        # Any real reading differs from this, so the first poll always renders.
        return cls(capacity=0, status=BatteryStatus.NOT_CHARGING)
