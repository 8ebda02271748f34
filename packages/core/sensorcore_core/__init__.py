"""Core app services for settings, layouts and logging."""

from .config import AppConfig, load_config, save_config
from .layout import (
    display_config_from_dict,
    display_config_to_dict,
    history_from_dict,
    history_to_dict,
    load_history,
    load_layout,
    save_layout,
)

__all__ = [
    "AppConfig",
    "display_config_from_dict",
    "display_config_to_dict",
    "history_from_dict",
    "history_to_dict",
    "load_config",
    "load_history",
    "load_layout",
    "save_config",
    "save_layout",
]
