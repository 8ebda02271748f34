"""Asset preparation and the per-render asset store.

Static images are decoded and scaled once and kept in memory. Conditional image
galleries are scaled and written as PNG into a per-element cache folder, so the
selector can hand the bytes on without re-encoding.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from .models import ConditionalImageConfig, DisplayConfig, ElementType, StaticImageConfig

logger = logging.getLogger("sensorcore.renderer")

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp")


def default_cache_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "SensorCore" / "cache"
    if system == "Darwin":
        return Path.home() / "Library" / "Caches" / "SensorCore"
    return Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache")) / "sensorcore"


def element_cache_dir(root: Path, element_id: str, element_type: ElementType) -> Path:
    return root / element_type.value / element_id


def is_image(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


def list_images(folder: Path) -> list[Path]:
    if not folder.is_dir():
        return []
    return sorted((p for p in folder.iterdir() if is_image(p)), key=lambda p: p.name)


@dataclass
class AssetStore:
    root: Path
    static_images: dict[str, Image.Image] = field(default_factory=dict)

    def static_image(self, element_id: str) -> Image.Image | None:
        return self.static_images.get(element_id)

    def gallery_dir(self, element_id: str) -> Path:
        return element_cache_dir(self.root, element_id, ElementType.CONDITIONAL_IMAGE)


def _load_scaled(path: Path, width: int, height: int) -> Image.Image:
    with Image.open(path) as source:
        image = source.convert("RGBA")
    if image.size != (width, height):
        image = image.resize((width, height), Image.Resampling.LANCZOS)
    return image


def prepare_static_image(config: StaticImageConfig) -> Image.Image:
    return _load_scaled(Path(config.image_path).expanduser(), config.width, config.height)


def prepare_conditional_images(root: Path, element_id: str, config: ConditionalImageConfig) -> Path:
    """Scale every gallery image to the element size into a fresh cache folder."""
    target = element_cache_dir(root, element_id, ElementType.CONDITIONAL_IMAGE)
    if target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True, exist_ok=True)

    source_dir = Path(config.images_path).expanduser()
    if not source_dir.is_dir():
        logger.warning(
            f"conditional image folder missing: {source_dir}",
            extra={"event": "asset_missing", "element_id": element_id},
        )
        return target

    written: set[str] = set()
    for path in list_images(source_dir):
        if path.stem in written:
            logger.warning(
                f"duplicate gallery name {path.stem} for element {element_id}, {path.name} replaces the earlier file",
                extra={"event": "asset_duplicate", "element_id": element_id},
            )
        try:
            image = _load_scaled(path, config.width, config.height)
        except OSError as exc:
            logger.warning(f"skipping unreadable image {path}: {exc}", extra={"event": "asset_unreadable"})
            continue
        image.save(target / f"{path.stem}.png", format="PNG")
        written.add(path.stem)
    return target


def prepare_assets(display_config: DisplayConfig, root: Path | None = None) -> AssetStore:
    store = AssetStore(root=root or default_cache_root())
    store.root.mkdir(parents=True, exist_ok=True)

    for element in display_config.elements:
        payload = element.payload
        if isinstance(payload, StaticImageConfig):
            try:
                store.static_images[element.id] = prepare_static_image(payload)
            except OSError as exc:
                logger.warning(
                    f"static image unavailable for element {element.id}: {exc}",
                    extra={"event": "asset_missing", "element_id": element.id},
                )
        elif isinstance(payload, ConditionalImageConfig):
            prepare_conditional_images(store.root, element.id, payload)

    logger.info(
        f"assets prepared static={len(store.static_images)} root={store.root}",
        extra={"event": "assets_prepared"},
    )
    return store
