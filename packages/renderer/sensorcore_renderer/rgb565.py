"""Frame encoders: PNG for tiles and previews, RGB565 little endian for panels."""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image


def rgb888_bytes_to_rgb565_le(rgb: bytes) -> bytes:
    if len(rgb) % 3 != 0:
        raise ValueError("RGB888 data length must be divisible by 3")
    arr = np.frombuffer(rgb, dtype=np.uint8).reshape((-1, 3))
    r = arr[:, 0].astype(np.uint16)
    g = arr[:, 1].astype(np.uint16)
    b = arr[:, 2].astype(np.uint16)
    rgb565 = ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)
    return rgb565.astype("<u2").tobytes()


def image_to_rgb565_le(image: Image.Image) -> bytes:
    if image.mode != "RGB":
        image = image.convert("RGB")
    return rgb888_bytes_to_rgb565_le(image.tobytes())


def encode_png(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def decode_image(data: bytes) -> Image.Image:
    with Image.open(BytesIO(data)) as image:
        return image.convert("RGBA")
