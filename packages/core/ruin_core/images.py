"""Base artwork source: local cache first, then fetch from the image server."""

from __future__ import annotations

import urllib.error
import urllib.parse
import urllib.request
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .config import SourceConfig
from .logging_setup import get_logger

_log = get_logger("images")


class ImageSourceError(RuntimeError):
    pass


def _decode(data: bytes | Path) -> Image.Image:
    source = BytesIO(data) if isinstance(data, bytes) else data
    with Image.open(source) as img:
        img.load()
        return img.convert("RGBA")


class ImageSource:
    def __init__(
        self,
        cache_dir: Path,
        base_url: str = SourceConfig.base_url,
        timeout_s: int = SourceConfig.timeout_s,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def cache_path(self, name: str) -> Path:
        return self.cache_dir / f"{name}.png"

    def url_for(self, name: str) -> str:
        return f"{self.base_url}/{urllib.parse.quote(name)}"

    def load(self, name: str) -> Image.Image:
        path = self.cache_path(name)
        if path.exists():
            try:
                return _decode(path)
            except (OSError, UnidentifiedImageError) as exc:
                _log.warning("cached image %s unreadable, refetching: %s", path, exc, extra={"event": "cache_corrupt"})
        return self.fetch(name)

    def fetch(self, name: str) -> Image.Image:
        url = self.url_for(name)
        _log.info("fetching image %s", url, extra={"event": "image_fetch"})
        try:
            with urllib.request.urlopen(url, timeout=self.timeout_s) as resp:
                payload = resp.read()
        except (urllib.error.URLError, OSError) as exc:
            raise ImageSourceError(f"Failed to fetch image from server: {exc}") from exc

        try:
            image = _decode(payload)
        except (OSError, UnidentifiedImageError) as exc:
            raise ImageSourceError(f"Failed to decode image from {url}: {exc}") from exc

        path = self.cache_path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            image.save(path, format="PNG")
        except OSError as exc:
            raise ImageSourceError(f"Failed to cache image at {path}: {exc}") from exc
        return image
