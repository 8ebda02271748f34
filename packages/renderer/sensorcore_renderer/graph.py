"""Graph element rendering: line and filled-line charts of a sensor series."""

from __future__ import annotations

import math
from collections.abc import Sequence

from PIL import Image, ImageDraw

from .colors import hex_to_rgba
from .models import GraphConfig, GraphType
from .rgb565 import encode_png


def render(graph_config: GraphConfig) -> bytes:
    """Render the graph tile and return it PNG encoded."""
    return encode_png(render_image(graph_config))


def render_image(graph_config: GraphConfig) -> Image.Image:
    width = graph_config.width
    height = graph_config.height
    data = prepare_graph_data(width, graph_config.sensor_values)

    image = Image.new("RGBA", (width, height), hex_to_rgba(graph_config.background_color))
    draw = ImageDraw.Draw(image)
    if len(data) >= 2:
        rows = _to_rows(data, graph_config)
        color = hex_to_rgba(graph_config.graph_color)
        if graph_config.graph_type == GraphType.LINE_FILL:
            _fill_below(draw, rows, height, color)
        _draw_line(draw, rows, graph_config.graph_stroke_width, color)

    border_color = hex_to_rgba(graph_config.border_color)
    if border_color[3] != 0 and width > 0 and height > 0:
        draw.rectangle((0, 0, width - 1, height - 1), outline=border_color, width=1)
    return image


def prepare_graph_data(width: int, sensor_values: Sequence[float]) -> list[float]:
    """Align the newest-first series to exactly ``width`` samples, oldest first.

    Longer series keep their most recent values, shorter ones are left padded with 0.0.
    """
    if width <= 0:
        return []
    values = [float(v) for v in reversed(sensor_values) if math.isfinite(v)]
    values = values[-width:]
    return [0.0] * (width - len(values)) + values


def _bounds(data: list[float], graph_config: GraphConfig) -> tuple[float, float]:
    min_value = graph_config.min_sensor_value
    max_value = graph_config.max_sensor_value
    if min_value is None:
        min_value = min(data)
    if max_value is None:
        max_value = max(data)
    return float(min_value), float(max_value)


def _to_rows(data: list[float], graph_config: GraphConfig) -> list[int]:
    height = graph_config.height
    min_value, max_value = _bounds(data, graph_config)
    span = max_value - min_value

    rows = []
    for value in data:
        normalized = 0.5 if span == 0 else (value - min_value) / span
        rows.append(height - int(normalized * height))
    return rows


def _fill_below(draw: ImageDraw.ImageDraw, rows: list[int], height: int, color: tuple[int, int, int, int]) -> None:
    for x, y in enumerate(rows):
        top = max(y, 0)
        if top < height:
            draw.line([(x, top), (x, height - 1)], fill=color, width=1)


def _draw_line(draw: ImageDraw.ImageDraw, rows: list[int], stroke_width: int, color: tuple[int, int, int, int]) -> None:
    half = max(stroke_width, 1) // 2
    for x0 in range(len(rows) - 1):
        y0, y1 = rows[x0], rows[x0 + 1]
        for offset in range(-half, half + 1):
            draw.line([(x0 + offset, y0), (x0 + 1 + offset, y1)], fill=color, width=1)
