"""Battery gauge recoloring and full-screen compositing."""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image

from ruin_telemetry.models import BatterySnapshot

from .models import DEFAULT_SETTINGS, RGB, Colors, RenderSettings


def select_color(snapshot: BatterySnapshot, colors: Colors, threshold: int = 30) -> RGB:
    if snapshot.charging:
        return colors.charging
    if snapshot.capacity >= threshold:
        return colors.default
    return colors.low_battery


def fill_fraction(capacity: int) -> float:
    """Share of the image height, from the top, left out of the gauge."""
    return 1.0 - capacity / 100.0


def recolor(
    snapshot: BatterySnapshot,
    colors: Colors,
    base: Image.Image,
    settings: RenderSettings = DEFAULT_SETTINGS,
) -> Image.Image:
    """Classify every base pixel and return an opaque RGB image of the same size.

    Accent pixels below the fill line take the battery color, translucent
    pixels take the background color, everything else passes through.
    """
    width, height = base.size
    if width == 0 or height == 0:
        return Image.new("RGB", (width, height))

    rgba = base if base.mode == "RGBA" else base.convert("RGBA")
    pixels = np.asarray(rgba, dtype=np.uint8)
    out = pixels[:, :, :3].copy()

    # y > height * (1 - capacity / 100), scaled by 100 to stay in integers
    below = np.arange(height, dtype=np.int64) * 100 > height * (100 - snapshot.capacity)
    accent = np.all(pixels == np.asarray(settings.accent, dtype=np.uint8), axis=-1)
    gauge = accent & below[:, None]
    translucent = (pixels[:, :, 3] < 255) & ~gauge

    out[gauge] = select_color(snapshot, colors, settings.low_battery_threshold)
    out[translucent] = colors.background
    return Image.fromarray(out)


def overlay_offset(size: tuple[int, int], settings: RenderSettings = DEFAULT_SETTINGS) -> tuple[int, int]:
    width, height = size
    return ((settings.canvas_width - width) // 2, (settings.canvas_height - height) // 2)


def render(
    snapshot: BatterySnapshot,
    colors: Colors,
    base: Image.Image,
    settings: RenderSettings = DEFAULT_SETTINGS,
) -> Image.Image:
    canvas = Image.new("RGB", (settings.canvas_width, settings.canvas_height), colors.background)
    overlay = recolor(snapshot, colors, base, settings)
    if overlay.width and overlay.height:
        # paste clips anything that falls outside the canvas
        canvas.paste(overlay, overlay_offset(overlay.size, settings))
    return canvas


def canvas_to_png(canvas: Image.Image) -> bytes:
    buf = BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()
