"""Renderer package for SensorCore frame composition."""

from .assets import AssetStore, default_cache_root, prepare_assets
from .compositor import FrameCompositor
from .errors import MissingAssetError, MissingFontError, RenderError
from .fonts import FontTable, discover_fonts
from .models import (
    ConditionalImageConfig,
    DisplayConfig,
    ElementConfig,
    ElementType,
    FrameBuffer,
    GraphConfig,
    GraphType,
    SensorType,
    SensorValue,
    SensorValueHistory,
    StaticImageConfig,
    TextAlign,
    TextConfig,
    ValueModifier,
)
from .rgb565 import encode_png, image_to_rgb565_le, rgb888_bytes_to_rgb565_le

__all__ = [
    "AssetStore",
    "ConditionalImageConfig",
    "DisplayConfig",
    "ElementConfig",
    "ElementType",
    "FontTable",
    "FrameBuffer",
    "FrameCompositor",
    "GraphConfig",
    "GraphType",
    "MissingAssetError",
    "MissingFontError",
    "RenderError",
    "SensorType",
    "SensorValue",
    "SensorValueHistory",
    "StaticImageConfig",
    "TextAlign",
    "TextConfig",
    "ValueModifier",
    "default_cache_root",
    "discover_fonts",
    "encode_png",
    "image_to_rgb565_le",
    "prepare_assets",
    "rgb888_bytes_to_rgb565_le",
]
