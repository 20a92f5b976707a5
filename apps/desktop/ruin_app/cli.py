"""CLI entrypoints for the ruin wallpaper daemon, previews, and diagnostics."""

from __future__ import annotations

import argparse
import json
import platform
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path

from ruin_core import (
    AppConfig,
    ImageSource,
    RefreshLoop,
    config_root,
    default_profile_name,
    images_dir,
    load_config,
    select_setter,
    session_type,
)
from ruin_core.config import clamp_interval, config_path
from ruin_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from ruin_renderer import (
    SCHEMES_FILE,
    canvas_to_png,
    fill_fraction,
    list_schemes,
    load_colors,
    lookup,
    render,
    select_color,
)
from ruin_telemetry import BatterySnapshot, BatteryStatus, build_battery_reader

COMMANDS = ("run", "render", "battery", "doctor")


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _profile_name(args: argparse.Namespace, cfg: AppConfig) -> str:
    return getattr(args, "name", None) or cfg.profile.name or default_profile_name()


def _image_source(cfg: AppConfig) -> ImageSource:
    return ImageSource(images_dir(), base_url=cfg.source.base_url, timeout_s=cfg.source.timeout_s)


def build_loop(args: argparse.Namespace, cfg: AppConfig) -> RefreshLoop:
    name = _profile_name(args, cfg)
    screens = args.screens if args.screens is not None else cfg.wallpaper.screens
    interval = clamp_interval(args.time if args.time is not None else cfg.refresh.interval_s)
    backend = args.backend or cfg.wallpaper.backend

    base = _image_source(cfg).load(name)
    colors = load_colors(config_root() / SCHEMES_FILE, name)
    reader = build_battery_reader()
    setter = select_setter(backend, screens=screens, command=cfg.wallpaper.command)

    get_logger("app").info(
        "starting profile=%s backend=%s screens=%s interval=%.1fs battery=%s",
        name,
        setter.name,
        screens,
        interval,
        reader.describe(),
        extra={"event": "daemon_start"},
    )
    return RefreshLoop(
        reader=reader,
        setter=setter,
        colors=colors,
        base=base,
        settings=cfg.render_settings(),
        interval_s=interval,
    )


def cmd_run(args: argparse.Namespace) -> int:
    cfg = load_config()
    install_crash_hooks()
    try:
        loop = build_loop(args, cfg)
    except RuntimeError as exc:
        get_logger("app").critical("startup failed: %s", exc, extra={"event": "startup_failed"})
        print(f"ruin: {exc}", file=sys.stderr)
        return 1

    try:
        loop.run()
    except KeyboardInterrupt:
        get_logger("app").info("interrupted", extra={"event": "daemon_stop"})
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config()
    name = _profile_name(args, cfg)

    if args.capacity is None:
        snapshot = build_battery_reader().read()
        if args.charging:
            snapshot = BatterySnapshot(capacity=snapshot.capacity, status=BatteryStatus.CHARGING)
    else:
        snapshot = BatterySnapshot(
            capacity=max(0, min(100, args.capacity)),
            status=BatteryStatus.CHARGING if args.charging else BatteryStatus.NOT_CHARGING,
        )

    settings = cfg.render_settings()
    colors = load_colors(config_root() / SCHEMES_FILE, name)
    canvas = render(snapshot, colors, _image_source(cfg).load(name), settings)

    out = Path(args.out).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(canvas_to_png(canvas))

    _print_json(
        {
            "out": str(out),
            "profile": name,
            "capacity": snapshot.capacity,
            "status": snapshot.status.value,
            "fill_fraction": fill_fraction(snapshot.capacity),
            "color": list(select_color(snapshot, colors, settings.low_battery_threshold)),
            "size": list(canvas.size),
        }
    )
    return 0


def cmd_battery(_args: argparse.Namespace) -> int:
    reader = build_battery_reader()
    snapshot = reader.read()
    _print_json({"source": reader.describe(), "capacity": snapshot.capacity, "status": snapshot.status.value})
    return 0


def build_doctor_payload(cfg: AppConfig, name: str) -> dict:
    schemes_path = config_root() / SCHEMES_FILE
    source = _image_source(cfg)
    payload: dict = {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config_path": str(config_path()),
        "config": asdict(cfg),
        "profile": name,
        "session_type": session_type(),
        "image_cache": {"path": str(source.cache_path(name)), "cached": source.cache_path(name).exists()},
        "color_schemes": {
            "path": str(schemes_path),
            "available": list_schemes(schemes_path),
            "profile_found": lookup(schemes_path, name) is not None,
        },
    }

    try:
        payload["battery"] = {"source": build_battery_reader().describe()}
    except RuntimeError as exc:
        payload["battery"] = {"error": str(exc)}

    try:
        payload["wallpaper_backend"] = select_setter(
            cfg.wallpaper.backend, screens=cfg.wallpaper.screens, command=cfg.wallpaper.command
        ).name
    except RuntimeError as exc:
        payload["wallpaper_backend"] = None
        payload["wallpaper_error"] = str(exc)
    return payload


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    _print_json(build_doctor_payload(cfg, _profile_name(args, cfg)))
    return 0


def positive_seconds(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid interval: {raw!r}") from None
    if not value > 0:
        raise argparse.ArgumentTypeError(f"interval must be a positive number of seconds, got {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ruin", description="Battery gauge wallpaper daemon")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Watch the battery and update the wallpaper")
    run_cmd.add_argument("name", nargs="?", default=None, help="Profile name (defaults to the distro ID)")
    run_cmd.add_argument("-s", "--screens", nargs="*", type=int, default=None, help="Screen indices to update")
    run_cmd.add_argument("-t", "--time", type=positive_seconds, default=None, help="Poll interval in seconds")
    run_cmd.add_argument("--backend", choices=["auto", "swww", "feh", "command"], default=None)
    run_cmd.set_defaults(func=cmd_run)

    render_cmd = sub.add_parser("render", help="Render one wallpaper to a PNG file")
    render_cmd.add_argument("name", nargs="?", default=None, help="Profile name (defaults to the distro ID)")
    render_cmd.add_argument("--capacity", type=int, default=None, help="Battery percent (defaults to live reading)")
    render_cmd.add_argument("--charging", action="store_true", help="Render the charging state")
    render_cmd.add_argument("-o", "--out", required=True, help="Output PNG path")
    render_cmd.set_defaults(func=cmd_render)

    battery_cmd = sub.add_parser("battery", help="Print the current battery snapshot")
    battery_cmd.set_defaults(func=cmd_battery)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics")
    doctor_cmd.add_argument("name", nargs="?", default=None, help="Profile name to inspect")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def normalize_argv(argv: list[str]) -> list[str]:
    # Bare "ruin arch -t 10" keeps working as shorthand for "ruin run arch -t 10".
    if not argv or argv[0] not in COMMANDS + ("-h", "--help"):
        return ["run", *argv]
    return argv


def main(argv: list[str] | None = None) -> int:
    args_in = normalize_argv(sys.argv[1:] if argv is None else list(argv))
    parser = build_parser()
    args = parser.parse_args(args_in)
    try:
        cfg = load_config()
        configure_logging(keep_files=cfg.logging.keep_files, console=args.command == "run")
        return int(args.func(args))
    except RuntimeError as exc:
        print(f"ruin: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
