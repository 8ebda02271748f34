"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1


@dataclass
class RenderSettings:
    layout_path: str | None = None
    output_path: str = "frame.png"
    cache_dir: str | None = None


@dataclass
class FontSettings:
    font_dirs: list[str] = field(default_factory=list)
    default_family: str = "Roboto"


@dataclass
class HistorySettings:
    max_frames: int = 300
    poll_ms: int = 1000


@dataclass
class DiagnosticsSettings:
    keep_log_files: int = 7
    log_level: str = "INFO"


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    render: RenderSettings = field(default_factory=RenderSettings)
    fonts: FontSettings = field(default_factory=FontSettings)
    history: HistorySettings = field(default_factory=HistorySettings)
    diagnostics: DiagnosticsSettings = field(default_factory=DiagnosticsSettings)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "SensorCore"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "SensorCore"
    return Path.home() / ".config" / "sensorcore"


def config_path() -> Path:
    return config_root() / "config.json"


def system_font_dirs() -> list[str]:
    system = platform.system()
    if system == "Windows":
        return [str(Path(os.environ.get("WINDIR", "C:\\Windows")) / "Fonts")]
    if system == "Darwin":
        return ["/System/Library/Fonts", "/Library/Fonts", str(Path.home() / "Library" / "Fonts")]
    return ["/usr/share/fonts", "/usr/local/share/fonts", str(Path.home() / ".local" / "share" / "fonts")]


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_history(cfg: AppConfig) -> None:
    cfg.history.max_frames = max(1, min(10_000, int(cfg.history.max_frames)))
    cfg.history.poll_ms = max(100, min(60_000, int(cfg.history.poll_ms)))


def _normalize_fonts(cfg: AppConfig) -> None:
    if not isinstance(cfg.fonts.font_dirs, list):
        cfg.fonts.font_dirs = []
    cfg.fonts.font_dirs = [str(d) for d in cfg.fonts.font_dirs]


def _normalize_diagnostics(cfg: AppConfig) -> None:
    cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))
    level = str(cfg.diagnostics.log_level).upper()
    cfg.diagnostics.log_level = level if level in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()

    data = raw if isinstance(raw, dict) else {}
    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        render=_merge(RenderSettings, data.get("render", {})),
        fonts=_merge(FontSettings, data.get("fonts", {})),
        history=_merge(HistorySettings, data.get("history", {})),
        diagnostics=_merge(DiagnosticsSettings, data.get("diagnostics", {})),
    )

    _normalize_history(cfg)
    _normalize_fonts(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
