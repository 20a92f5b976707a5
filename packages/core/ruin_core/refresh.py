"""Battery change detection loop that re-renders the wallpaper on transitions."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

from PIL import Image

from ruin_renderer import Colors, RenderSettings, render
from ruin_renderer.models import DEFAULT_SETTINGS
from ruin_telemetry.models import BatterySnapshot

from .logging_setup import get_logger

_log = get_logger("refresh")


class BatteryReader(Protocol):
    def read(self) -> BatterySnapshot: ...


class Setter(Protocol):
    def apply(self, canvas: Image.Image) -> bool: ...


class RefreshLoop:
    def __init__(
        self,
        reader: BatteryReader,
        setter: Setter,
        colors: Colors,
        base: Image.Image,
        settings: RenderSettings = DEFAULT_SETTINGS,
        interval_s: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.reader = reader
        self.setter = setter
        self.colors = colors
        self.base = base
        self.settings = settings
        self.interval_s = interval_s
        self._sleep = sleep
        self.renders = 0
        self.failures = 0

    def step(self, previous: BatterySnapshot) -> BatterySnapshot:
        current = self.reader.read()
        if current == previous:
            return previous

        canvas = render(current, self.colors, self.base, self.settings)
        self.renders += 1
        if self.setter.apply(canvas):
            _log.info(
                "wallpaper updated capacity=%d status=%s",
                current.capacity,
                current.status.value,
                extra={"event": "wallpaper_updated"},
            )
        else:
            # Not retried until the battery state changes again.
            self.failures += 1
            _log.warning(
                "wallpaper apply failed capacity=%d status=%s",
                current.capacity,
                current.status.value,
                extra={"event": "wallpaper_apply_failed"},
            )
        return current

    def run(self, max_iterations: int | None = None) -> BatterySnapshot:
        previous = BatterySnapshot.initial()
        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            previous = self.step(previous)
            iterations += 1
            self._sleep(self.interval_s)
        return previous
