"""CLI entrypoints for rendering frames, preparing assets and inspecting sensors."""

from __future__ import annotations

import argparse
import json
import logging
import time
from dataclasses import asdict
from pathlib import Path

from sensorcore_core import AppConfig, load_config, load_history, load_layout
from sensorcore_core.config import system_font_dirs
from sensorcore_core.logging_setup import configure_logging, install_crash_hooks
from sensorcore_renderer import (
    AssetStore,
    DisplayConfig,
    FontTable,
    FrameCompositor,
    SensorValueHistory,
    default_cache_root,
    discover_fonts,
    encode_png,
    prepare_assets,
)
from sensorcore_telemetry import SensorHistory, TelemetryProvider


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _layout(args: argparse.Namespace, cfg: AppConfig) -> DisplayConfig:
    path = args.layout or cfg.render.layout_path
    if not path:
        raise SystemExit("No layout given: pass --layout or set render.layout_path in the config")
    return load_layout(Path(path).expanduser())


def _cache_root(args: argparse.Namespace, cfg: AppConfig) -> Path:
    raw = args.cache_dir or cfg.render.cache_dir
    return Path(raw).expanduser() if raw else default_cache_root()


def _font_table(args: argparse.Namespace, cfg: AppConfig) -> FontTable:
    dirs = list(args.font_dir or []) + (cfg.fonts.font_dirs or system_font_dirs())
    return discover_fonts(Path(d) for d in dirs)


def _live_history(samples: int = 1) -> SensorValueHistory:
    provider = TelemetryProvider()
    history = SensorHistory(max_frames=max(samples, 1))
    for _ in range(samples):
        history.push(provider.poll())
    return history.snapshot()


def _write_frame(
    out: Path,
    layout: DisplayConfig,
    history: SensorValueHistory,
    fonts: FontTable,
    assets: AssetStore,
) -> Path:
    image = FrameCompositor().render_image(layout, history, fonts, assets)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(encode_png(image))
    return out


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config()
    layout = _layout(args, cfg)
    history = load_history(Path(args.history)) if args.history else _live_history()
    assets = prepare_assets(layout, _cache_root(args, cfg))
    out = Path(args.out or cfg.render.output_path).expanduser()

    path = _write_frame(out, layout, history, _font_table(args, cfg), assets)
    _print_json({"success": True, "frame": str(path), "width": layout.resolution_width, "height": layout.resolution_height})
    return 0


def cmd_prepare_assets(args: argparse.Namespace) -> int:
    cfg = load_config()
    layout = _layout(args, cfg)
    assets = prepare_assets(layout, _cache_root(args, cfg))
    _print_json({"cache_dir": str(assets.root), "static_images": sorted(assets.static_images)})
    return 0


def cmd_sensors(_args: argparse.Namespace) -> int:
    provider = TelemetryProvider()
    time.sleep(0.2)
    _print_json([dict(asdict(v), sensor_type=v.sensor_type.value) for v in provider.poll()])
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    cfg = load_config()
    layout = _layout(args, cfg)
    fonts = _font_table(args, cfg)
    assets = prepare_assets(layout, _cache_root(args, cfg))
    out = Path(args.out or cfg.render.output_path).expanduser()
    poll_s = (args.poll_ms or cfg.history.poll_ms) / 1000.0

    provider = TelemetryProvider()
    history = SensorHistory(max_frames=cfg.history.max_frames)
    logger = logging.getLogger("sensorcore")

    frames = 0
    deadline = time.monotonic() + args.seconds
    while time.monotonic() < deadline:
        started = time.monotonic()
        history.push(provider.poll())
        _write_frame(out, layout, history.snapshot(), fonts, assets)
        frames += 1
        logger.debug(f"frame {frames} written to {out}", extra={"event": "frame_written"})
        time.sleep(max(0.0, poll_s - (time.monotonic() - started)))

    _print_json({"frames": frames, "frame": str(out), "history_frames": len(history)})
    return 0


def _add_render_options(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--layout", default=None, help="Path to the display layout JSON")
    cmd.add_argument("--cache-dir", default=None, help="Asset cache directory")
    cmd.add_argument("--font-dir", action="append", default=None, help="Extra font directory (repeatable)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sensorcore", description="SensorCore display frame renderer")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render", help="Render one frame to PNG")
    _add_render_options(render_cmd)
    render_cmd.add_argument("--history", default=None, help="Sensor history JSON; live sensors when omitted")
    render_cmd.add_argument("--out", default=None, help="Output PNG path")
    render_cmd.set_defaults(func=cmd_render)

    assets_cmd = sub.add_parser("prepare-assets", help="Scale and cache the layout's images")
    _add_render_options(assets_cmd)
    assets_cmd.set_defaults(func=cmd_prepare_assets)

    sensors_cmd = sub.add_parser("sensors", help="Print current sensor readings")
    sensors_cmd.set_defaults(func=cmd_sensors)

    watch_cmd = sub.add_parser("watch", help="Poll sensors and re-render the frame continuously")
    _add_render_options(watch_cmd)
    watch_cmd.add_argument("--out", default=None, help="Output PNG path")
    watch_cmd.add_argument("--seconds", type=int, default=30)
    watch_cmd.add_argument("--poll-ms", type=int, default=None)
    watch_cmd.set_defaults(func=cmd_watch)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(
        keep_files=cfg.diagnostics.keep_log_files,
        console=False,
        level=getattr(logging, cfg.diagnostics.log_level, logging.INFO),
    )
    install_crash_hooks()
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
