"""Caller-owned font table: family name -> raw font bytes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from io import BytesIO
from pathlib import Path

from PIL import ImageFont

from .errors import MissingFontError

logger = logging.getLogger("sensorcore.renderer")

FONT_EXTENSIONS = (".ttf", ".otf")


class FontTable:
    """Builds sized FreeType fonts from raw font bytes, memoized per family and size."""

    def __init__(self, fonts: Mapping[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(fonts or {})
        self._cache: dict[tuple[str, int], ImageFont.FreeTypeFont] = {}

    def __contains__(self, family: object) -> bool:
        return family in self._data

    def __len__(self) -> int:
        return len(self._data)

    def add(self, family: str, data: bytes) -> None:
        self._data[family] = data
        for key in [k for k in self._cache if k[0] == family]:
            del self._cache[key]

    def font(self, family: str, size: int) -> ImageFont.FreeTypeFont:
        key = (family, size)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        data = self._data.get(family)
        if data is None:
            raise MissingFontError(f"font family not available: {family}")
        try:
            font = ImageFont.truetype(BytesIO(data), size)
        except OSError as exc:
            raise MissingFontError(f"font family {family} could not be loaded: {exc}") from exc
        self._cache[key] = font
        return font


def discover_fonts(dirs: Iterable[Path]) -> FontTable:
    """Scan directories recursively for TrueType/OpenType files, keyed by family name."""
    table = FontTable()
    for directory in dirs:
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            continue
        for path in sorted(directory.rglob("*")):
            if path.suffix.lower() not in FONT_EXTENSIONS or not path.is_file():
                continue
            data = path.read_bytes()
            try:
                family, style = ImageFont.truetype(BytesIO(data), 12).getname()
            except OSError:
                logger.debug(f"skipping unreadable font {path}")
                continue
            name = family or path.stem
            # Prefer the regular face when a family ships several styles.
            if name not in table or (style or "").lower() == "regular":
                table.add(name, data)
    logger.info(f"fonts discovered families={len(table)}", extra={"event": "fonts_discovered"})
    return table
