"""Source-over overlay clipped to the target image."""

from __future__ import annotations

from PIL import Image


def overlay(base: Image.Image, tile: Image.Image, x: int, y: int) -> None:
    left = max(x, 0)
    top = max(y, 0)
    right = min(x + tile.width, base.width)
    bottom = min(y + tile.height, base.height)
    if right <= left or bottom <= top:
        return
    if tile.mode != "RGBA":
        tile = tile.convert("RGBA")
    base.alpha_composite(tile, dest=(left, top), source=(left - x, top - y, right - x, bottom - y))
