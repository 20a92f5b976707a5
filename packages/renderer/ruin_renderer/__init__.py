"""Renderer package for battery gauge wallpapers."""

from .compose import canvas_to_png, fill_fraction, overlay_offset, recolor, render, select_color
from .models import DEFAULT_COLORS, DEFAULT_SETTINGS, Colors, RenderSettings
from .schemes import SCHEMES_FILE, list_schemes, load_colors, lookup

__all__ = [
    "Colors",
    "DEFAULT_COLORS",
    "DEFAULT_SETTINGS",
    "RenderSettings",
    "SCHEMES_FILE",
    "canvas_to_png",
    "fill_fraction",
    "list_schemes",
    "load_colors",
    "lookup",
    "overlay_offset",
    "recolor",
    "render",
    "select_color",
]
