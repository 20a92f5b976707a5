"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]

COLOR_FIELDS = ("charging", "default", "low_battery", "background")


def _triple(name: str, value: Any) -> RGB:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{name} must be a list of three integers")
    out = []
    for channel in value:
        if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
            raise ValueError(f"{name} channels must be integers in 0..255")
        out.append(channel)
    return (out[0], out[1], out[2])


@dataclass(frozen=True)
class Colors:
    charging: RGB
    default: RGB
    low_battery: RGB
    background: RGB

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> "Colors":
        missing = [k for k in COLOR_FIELDS if k not in raw]
        if missing:
            raise ValueError(f"color scheme missing keys: {', '.join(missing)}")
        return cls(**{k: _triple(k, raw[k]) for k in COLOR_FIELDS})


DEFAULT_COLORS = Colors(
    charging=(255, 255, 0),
    default=(91, 194, 54),
    low_battery=(191, 19, 28),
    background=(40, 40, 40),
)


@dataclass(frozen=True)
class RenderSettings:
    canvas_width: int = 3840
    canvas_height: int = 2160
    accent: RGBA = (143, 188, 187, 255)
    low_battery_threshold: int = 30


DEFAULT_SETTINGS = RenderSettings()
