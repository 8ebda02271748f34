"""Text element rendering.

Render pipeline:
    1. Substitute placeholders in the format template
    2. Draw the text on a transparent canvas
    3. Find the bounding box of the visible glyph pixels
    4. Crop the canvas to that box
    5. Place the crop on a tile of the element size according to the alignment
"""

from __future__ import annotations

from typing import Callable, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .colors import hex_to_rgba
from .models import SensorValueHistory, TextAlign, TextConfig, ValueModifier
from .overlay import overlay

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Glyph origin on the scratch canvas, keeps left bearings inside the canvas.
TEXT_ORIGIN = (25, 7)
NOT_AVAILABLE = "N/A"


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


_REDUCERS: dict[ValueModifier, Callable[[list[float]], float]] = {
    ValueModifier.MIN: min,
    ValueModifier.MAX: max,
    ValueModifier.AVG: _mean,
}


def aggregate(history: SensorValueHistory, sensor_id: str, modifier: ValueModifier) -> str:
    """Reduce every numeric reading of the sensor in the history, two decimals."""
    numbers = history.numeric_series(sensor_id)
    if not numbers:
        return NOT_AVAILABLE
    return f"{_REDUCERS[modifier](numbers):.2f}"


def substitute_placeholders(text_format: str, text_config: TextConfig, history: SensorValueHistory) -> str:
    sensor_id = text_config.sensor_id
    current = history.current(sensor_id)
    if current is None:
        value, unit = NOT_AVAILABLE, ""
    else:
        value, unit = current.value, current.unit

    text = text_format
    if "{value-avg}" in text:
        text = text.replace("{value-avg}", aggregate(history, sensor_id, ValueModifier.AVG))
    if "{value-min}" in text:
        text = text.replace("{value-min}", aggregate(history, sensor_id, ValueModifier.MIN))
    if "{value-max}" in text:
        text = text.replace("{value-max}", aggregate(history, sensor_id, ValueModifier.MAX))

    if "{value}" in text:
        if text_config.value_modifier != ValueModifier.NONE:
            value = aggregate(history, sensor_id, text_config.value_modifier)
        text = text.replace("{value}", value)
    return text.replace("{unit}", unit)


def get_bounding_box(image: Image.Image) -> tuple[int, int, int, int]:
    """Return ``(left, top, right, bottom)`` of all pixels that are not fully transparent.

    An image without visible pixels yields its full extent.
    """
    alpha = np.asarray(image.getchannel("A"))
    rows = np.flatnonzero(alpha.any(axis=1))
    cols = np.flatnonzero(alpha.any(axis=0))
    if rows.size == 0 or cols.size == 0:
        return 0, 0, image.width, image.height
    return int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1


def render(
    canvas_width: int,
    canvas_height: int,
    text_config: TextConfig,
    history: SensorValueHistory,
    font: Font,
) -> Image.Image:
    text = substitute_placeholders(text_config.format, text_config, history)

    canvas = Image.new("RGBA", (max(canvas_width, 1), max(canvas_height, 1)), (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    draw.text(TEXT_ORIGIN, text, font=font, fill=hex_to_rgba(text_config.font_color))

    glyphs = canvas.crop(get_bounding_box(canvas))

    width, height = text_config.width, text_config.height
    tile = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    y = max(0, (height - glyphs.height) // 2)
    if text_config.alignment == TextAlign.RIGHT:
        x = max(0, width - glyphs.width)
    elif text_config.alignment == TextAlign.CENTER:
        x = max(0, width - glyphs.width) // 2
    else:
        x = 0

    overlay(tile, glyphs, x, y)
    return tile
