"""Color scheme lookup from the per-profile YAML document."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .models import DEFAULT_COLORS, Colors

SCHEMES_FILE = "colorschemes.yaml"

_log = logging.getLogger("ruin.schemes")


def _read_document(path: Path) -> dict | None:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        _log.debug("color schemes unavailable at %s: %s", path, exc)
        return None
    return raw if isinstance(raw, dict) else None


def list_schemes(path: Path) -> list[str]:
    document = _read_document(path)
    if not document:
        return []
    return sorted(str(k) for k in document.keys())


def lookup(path: Path, name: str) -> Colors | None:
    document = _read_document(path)
    if document is None:
        return None
    entry = document.get(name)
    if not isinstance(entry, dict):
        return None
    try:
        return Colors.from_mapping(entry)
    except ValueError as exc:
        _log.warning("ignoring malformed color scheme %r: %s", name, exc)
        return None


def load_colors(path: Path, name: str) -> Colors:
    colors = lookup(path, name)
    if colors is None:
        _log.debug("using built-in colors for profile %r", name)
        return DEFAULT_COLORS
    _log.debug("loaded colors for profile %r from %s", name, path)
    return colors
