"""Desktop wallpaper backends selected by session type."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path

from PIL import Image

from ruin_renderer import canvas_to_png

from .logging_setup import get_logger

_log = get_logger("wallpaper")


def default_output_path() -> Path:
    return Path(tempfile.gettempdir()) / "ruin" / "wallpaper.png"


class WallpaperSetter:
    """Persists a rendered canvas and hands it to the desktop."""

    name = "base"

    def __init__(self, screens: Sequence[int] = (), output_path: Path | None = None, timeout_s: int = 30) -> None:
        self.screens = list(screens)
        self.output_path = output_path or default_output_path()
        self.timeout_s = timeout_s

    def apply(self, canvas: Image.Image) -> bool:
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_bytes(canvas_to_png(canvas))
            self._set(self.output_path)
        except (OSError, subprocess.SubprocessError) as exc:
            _log.error("failed to set wallpaper via %s: %s", self.name, exc, extra={"event": "apply_error"})
            return False
        return True

    def _set(self, path: Path) -> None:
        raise NotImplementedError

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        _log.debug("running %s", " ".join(cmd))
        return subprocess.run(cmd, check=True, timeout=self.timeout_s, capture_output=True, text=True, errors="replace")


class SwwwSetter(WallpaperSetter):
    """Wayland backend using the swww daemon."""

    name = "swww"

    def outputs(self) -> list[str]:
        result = self._run(["swww", "query"])
        names = []
        for line in result.stdout.splitlines():
            # older releases prefix each line with ": "
            line = line.strip().lstrip(":").strip()
            name, sep, _rest = line.partition(":")
            if sep and name:
                names.append(name.strip())
        return names

    def _selected_outputs(self) -> list[str]:
        if not self.screens:
            return []
        available = self.outputs()
        selected = []
        for index in self.screens:
            if 0 <= index < len(available):
                selected.append(available[index])
            else:
                _log.warning("screen %d out of range (%d outputs)", index, len(available))
        return selected

    def _set(self, path: Path) -> None:
        cmd = ["swww", "img", str(path)]
        outputs = self._selected_outputs()
        if self.screens and not outputs:
            raise OSError("none of the requested screens exist")
        if outputs:
            cmd += ["--outputs", ",".join(outputs)]
        self._run(cmd)


class FehSetter(WallpaperSetter):
    """X11 backend using feh."""

    name = "feh"

    def _set(self, path: Path) -> None:
        if self.screens:
            _log.debug("feh spans all X screens, ignoring screens=%s", self.screens)
        self._run(["feh", "--no-fehbg", "--bg-center", str(path)])


class CommandSetter(WallpaperSetter):
    """User supplied command template with ``{path}`` and ``{screens}`` placeholders."""

    name = "command"

    def __init__(self, template: str, screens: Sequence[int] = (), output_path: Path | None = None, timeout_s: int = 30) -> None:
        super().__init__(screens=screens, output_path=output_path, timeout_s=timeout_s)
        self.template = template

    def _set(self, path: Path) -> None:
        screens = ",".join(str(s) for s in self.screens)
        args = [part.replace("{path}", str(path)).replace("{screens}", screens) for part in shlex.split(self.template)]
        if not args:
            raise OSError("empty wallpaper command")
        self._run(args)


def session_type(env: Mapping[str, str] | None = None) -> str | None:
    env = os.environ if env is None else env
    kind = (env.get("XDG_SESSION_TYPE") or "").strip().lower()
    if kind in ("wayland", "x11"):
        return kind
    if env.get("WAYLAND_DISPLAY"):
        return "wayland"
    if env.get("DISPLAY"):
        return "x11"
    return None


def select_setter(
    backend: str = "auto",
    screens: Sequence[int] = (),
    command: str | None = None,
    env: Mapping[str, str] | None = None,
    output_path: Path | None = None,
) -> WallpaperSetter:
    if backend == "command":
        if not command:
            raise RuntimeError("wallpaper backend 'command' needs a command template")
        return CommandSetter(command, screens=screens, output_path=output_path)
    if backend == "swww":
        return SwwwSetter(screens=screens, output_path=output_path)
    if backend == "feh":
        return FehSetter(screens=screens, output_path=output_path)

    kind = session_type(env)
    if kind == "wayland":
        setter: WallpaperSetter = SwwwSetter(screens=screens, output_path=output_path)
    elif kind == "x11":
        setter = FehSetter(screens=screens, output_path=output_path)
    else:
        raise RuntimeError("No graphical session detected (XDG_SESSION_TYPE, WAYLAND_DISPLAY and DISPLAY are unset)")

    if shutil.which(setter.name) is None:
        _log.warning("%s not found in PATH, wallpaper updates will fail", setter.name)
    return setter
