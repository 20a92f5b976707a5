"""Battery state readers for ruin."""

from .battery import (
    BatteryNotFoundError,
    PsutilBatteryReader,
    SysfsBatteryReader,
    build_battery_reader,
    find_battery_path,
)
from .models import BatterySnapshot, BatteryStatus

__all__ = [
    "BatteryNotFoundError",
    "BatterySnapshot",
    "BatteryStatus",
    "PsutilBatteryReader",
    "SysfsBatteryReader",
    "build_battery_reader",
    "find_battery_path",
]
