"""Persistent daemon settings schema and load/save helpers."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from ruin_renderer.models import RenderSettings


CONFIG_VERSION = 1
OS_RELEASE = Path("/etc/os-release")
FALLBACK_PROFILE = "linux"


@dataclass
class ProfileConfig:
    name: str | None = None


@dataclass
class RefreshConfig:
    interval_s: float = 5.0


@dataclass
class RenderConfig:
    canvas_width: int = 3840
    canvas_height: int = 2160
    accent: list[int] = field(default_factory=lambda: [143, 188, 187, 255])
    low_battery_threshold: int = 30


@dataclass
class WallpaperConfig:
    backend: str = "auto"
    command: str | None = None
    screens: list[int] = field(default_factory=list)


@dataclass
class SourceConfig:
    base_url: str = "https://ruin.shuttleapp.rs"
    timeout_s: int = 30


@dataclass
class LoggingConfig:
    keep_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    wallpaper: WallpaperConfig = field(default_factory=WallpaperConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def render_settings(self) -> RenderSettings:
        r = self.render
        return RenderSettings(
            canvas_width=r.canvas_width,
            canvas_height=r.canvas_height,
            accent=(r.accent[0], r.accent[1], r.accent[2], r.accent[3]),
            low_battery_threshold=r.low_battery_threshold,
        )


def config_root() -> Path:
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as exc:
        raise RuntimeError("Could not find home dir") from exc
    return home / ".config" / "ruin"


def config_path() -> Path:
    return config_root() / "config.json"


def images_dir() -> Path:
    return config_root() / "images"


def default_profile_name(os_release: Path | None = None) -> str:
    path = os_release or OS_RELEASE
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return FALLBACK_PROFILE
    for line in lines:
        key, sep, value = line.partition("=")
        if sep and key.strip() == "ID":
            value = value.strip().strip('"').strip("'")
            return value or FALLBACK_PROFILE
    return FALLBACK_PROFILE


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


MIN_INTERVAL_S = 1.0
MAX_INTERVAL_S = 3600.0


def clamp_interval(value: Any) -> float:
    try:
        interval = float(value)
    except (TypeError, ValueError):
        interval = RefreshConfig.interval_s
    if math.isnan(interval):
        interval = RefreshConfig.interval_s
    return max(MIN_INTERVAL_S, min(MAX_INTERVAL_S, interval))


def _normalize_refresh(cfg: AppConfig) -> None:
    cfg.refresh.interval_s = clamp_interval(cfg.refresh.interval_s)


def _normalize_render(cfg: AppConfig) -> None:
    defaults = RenderConfig()
    r = cfg.render
    try:
        r.canvas_width = max(1, int(r.canvas_width))
        r.canvas_height = max(1, int(r.canvas_height))
    except (TypeError, ValueError):
        r.canvas_width, r.canvas_height = defaults.canvas_width, defaults.canvas_height
    try:
        r.low_battery_threshold = max(0, min(100, int(r.low_battery_threshold)))
    except (TypeError, ValueError):
        r.low_battery_threshold = defaults.low_battery_threshold

    accent = r.accent
    if (
        not isinstance(accent, list)
        or len(accent) != 4
        or not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in accent)
    ):
        r.accent = defaults.accent


def _normalize_wallpaper(cfg: AppConfig) -> None:
    w = cfg.wallpaper
    if w.backend not in ("auto", "swww", "feh", "command"):
        w.backend = "auto"
    if w.backend == "command" and not w.command:
        w.backend = "auto"
    if not isinstance(w.screens, list):
        w.screens = []
    w.screens = [int(s) for s in w.screens if isinstance(s, int) and not isinstance(s, bool) and s >= 0]


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=CONFIG_VERSION,
        profile=_merge(ProfileConfig, raw.get("profile", {})),
        refresh=_merge(RefreshConfig, raw.get("refresh", {})),
        render=_merge(RenderConfig, raw.get("render", {})),
        wallpaper=_merge(WallpaperConfig, raw.get("wallpaper", {})),
        source=_merge(SourceConfig, raw.get("source", {})),
        logging=_merge(LoggingConfig, raw.get("logging", {})),
    )

    _normalize_refresh(cfg)
    _normalize_render(cfg)
    _normalize_wallpaper(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
