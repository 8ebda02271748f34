"""Frame compositor: renders every configured element and layers the tiles into one frame."""

from __future__ import annotations

import base64
import logging
from dataclasses import replace

from PIL import Image

from . import conditional_image, graph, text
from .assets import AssetStore
from .errors import MissingAssetError
from .fonts import FontTable
from .models import (
    ConditionalImageConfig,
    DisplayConfig,
    ElementConfig,
    FrameBuffer,
    GraphConfig,
    SensorValueHistory,
    StaticImageConfig,
    TextConfig,
)
from .overlay import overlay
from .rgb565 import decode_image, encode_png

logger = logging.getLogger("sensorcore.renderer")


class FrameCompositor:
    """Draws elements in declared order, later elements on top, and returns an RGBA8 frame."""

    def render(
        self,
        display_config: DisplayConfig,
        history: SensorValueHistory,
        font_table: FontTable,
        asset_store: AssetStore,
    ) -> FrameBuffer:
        image = self.render_image(display_config, history, font_table, asset_store)
        return FrameBuffer(width=image.width, height=image.height, pixel_format="RGBA8888", bytes=image.tobytes())

    def render_image(
        self,
        display_config: DisplayConfig,
        history: SensorValueHistory,
        font_table: FontTable,
        asset_store: AssetStore,
    ) -> Image.Image:
        width = display_config.resolution_width
        height = display_config.resolution_height
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid frame size {width}x{height}")

        frame = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        for element in display_config.elements:
            try:
                tile = self._render_element(element, frame.size, history, font_table, asset_store)
            except Exception as exc:
                logger.warning(
                    f"element {element.id} skipped: {exc}",
                    extra={"event": "element_failed", "element_id": element.id},
                )
                continue
            if tile is not None:
                overlay(frame, tile, element.x, element.y)
        return frame

    def preview_data_url(
        self,
        display_config: DisplayConfig,
        history: SensorValueHistory,
        font_table: FontTable,
        asset_store: AssetStore,
    ) -> str:
        image = self.render_image(display_config, history, font_table, asset_store)
        b64 = base64.b64encode(encode_png(image)).decode("ascii")
        return f"data:image/png;base64,{b64}"

    def _render_element(
        self,
        element: ElementConfig,
        frame_size: tuple[int, int],
        history: SensorValueHistory,
        font_table: FontTable,
        asset_store: AssetStore,
    ) -> Image.Image | None:
        payload = element.payload
        if isinstance(payload, TextConfig):
            font = font_table.font(payload.font_family, payload.font_size)
            return text.render(frame_size[0], frame_size[1], payload, history, font)

        if isinstance(payload, StaticImageConfig):
            image = asset_store.static_image(element.id)
            if image is None:
                raise MissingAssetError(f"no prepared static image for element {element.id}")
            return image

        if isinstance(payload, GraphConfig):
            values = tuple(history.numeric_series(payload.sensor_id))
            return decode_image(graph.render(replace(payload, sensor_values=values)))

        if isinstance(payload, ConditionalImageConfig):
            return self._render_conditional_image(element.id, payload, history, asset_store)

        return None

    def _render_conditional_image(
        self,
        element_id: str,
        payload: ConditionalImageConfig,
        history: SensorValueHistory,
        asset_store: AssetStore,
    ) -> Image.Image | None:
        sensor_value = history.current(payload.sensor_id)
        if sensor_value is None:
            logger.debug(
                f"sensor {payload.sensor_id} missing, element {element_id} skipped",
                extra={"event": "sensor_missing", "element_id": element_id},
            )
            return None

        data = conditional_image.select(
            element_id,
            sensor_value.sensor_type,
            replace(payload, sensor_value=sensor_value.value),
            asset_store,
        )
        if data is None:
            raise MissingAssetError(f"no conditional image matched for element {element_id}")
        return decode_image(data)
