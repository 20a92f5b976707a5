"""Core daemon services: settings, logging, artwork source, wallpaper backends and refresh loop."""

from .config import AppConfig, config_root, default_profile_name, images_dir, load_config, save_config
from .images import ImageSource, ImageSourceError
from .refresh import RefreshLoop
from .wallpaper import CommandSetter, FehSetter, SwwwSetter, WallpaperSetter, select_setter, session_type

__all__ = [
    "AppConfig",
    "CommandSetter",
    "FehSetter",
    "ImageSource",
    "ImageSourceError",
    "RefreshLoop",
    "SwwwSetter",
    "WallpaperSetter",
    "config_root",
    "default_profile_name",
    "images_dir",
    "load_config",
    "save_config",
    "select_setter",
    "session_type",
]
