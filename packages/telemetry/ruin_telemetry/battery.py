"""Battery readers backed by sysfs with a psutil fallback."""

from __future__ import annotations

import logging
from pathlib import Path

import psutil

from .models import BatterySnapshot, BatteryStatus

POWER_SUPPLY_ROOT = Path("/sys/class/power_supply")

_log = logging.getLogger("ruin.battery")


class BatteryNotFoundError(RuntimeError):
    pass


def _clamp_capacity(value: float) -> int:
    return max(0, min(100, int(value)))


def _parse_status(raw: str) -> BatteryStatus:
    # "Full", "Discharging", "Not charging" and "Unknown" all count as not charging.
    if raw.strip() == "Charging":
        return BatteryStatus.CHARGING
    return BatteryStatus.NOT_CHARGING


def find_battery_path(root: Path | None = None) -> Path:
    root = root or POWER_SUPPLY_ROOT
    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise BatteryNotFoundError(f"cannot list {root}: {exc}") from exc

    for entry in entries:
        try:
            kind = (entry / "type").read_text(encoding="utf-8").strip()
        except OSError:
            continue
        if kind == "Battery" and (entry / "capacity").exists():
            return entry
    raise BatteryNotFoundError(f"no battery found under {root}")


class _BatteryReader:
    """Base reader that falls back to the last good snapshot on read errors."""

    def __init__(self) -> None:
        self._last = BatterySnapshot.initial()

    def read(self) -> BatterySnapshot:
        try:
            snapshot = self._read_once()
        except (OSError, ValueError) as exc:
            _log.warning("battery read failed, reusing last snapshot: %s", exc, extra={"event": "battery_read_error"})
            return self._last
        self._last = snapshot
        return snapshot

    def _read_once(self) -> BatterySnapshot:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


class SysfsBatteryReader(_BatteryReader):
    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)

    def _read_once(self) -> BatterySnapshot:
        capacity = (self.path / "capacity").read_text(encoding="utf-8").strip()
        status = (self.path / "status").read_text(encoding="utf-8")
        return BatterySnapshot(capacity=_clamp_capacity(float(capacity)), status=_parse_status(status))

    def describe(self) -> str:
        return str(self.path)


class PsutilBatteryReader(_BatteryReader):
    def _read_once(self) -> BatterySnapshot:
        battery = psutil.sensors_battery()
        if battery is None:
            raise OSError("psutil reports no battery")
        percent = _clamp_capacity(battery.percent)
        charging = bool(battery.power_plugged) and percent < 100
        return BatterySnapshot(
            capacity=percent,
            status=BatteryStatus.CHARGING if charging else BatteryStatus.NOT_CHARGING,
        )

    def describe(self) -> str:
        return "psutil.sensors_battery"


def build_battery_reader(root: Path | None = None) -> _BatteryReader:
    try:
        return SysfsBatteryReader(find_battery_path(root))
    except BatteryNotFoundError as exc:
        sysfs_error = exc

    try:
        battery = psutil.sensors_battery()
    except Exception:
        battery = None
    if battery is None:
        raise BatteryNotFoundError(f"Battery not found ({sysfs_error})")
    _log.info("sysfs battery unavailable, using psutil", extra={"event": "battery_psutil_fallback"})
    return PsutilBatteryReader()
