"""Conditional image selection.

Each conditional image element owns a small gallery of prepared images. Text
sensors pick the image whose file name is closest by edit distance to the
current value, number sensors pick the image whose numeric file name is
closest to the value mapped into the gallery's number range.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from .assets import AssetStore, list_images
from .models import ConditionalImageConfig, SensorType

logger = logging.getLogger("sensorcore.renderer")

_NUMBER_CHARS = frozenset("0123456789.-+")


def select(
    element_id: str,
    sensor_type: SensorType,
    config: ConditionalImageConfig,
    asset_store: AssetStore,
) -> bytes | None:
    """Return the raw bytes of the best matching gallery image, if any."""
    folder = asset_store.gallery_dir(element_id)
    if sensor_type == SensorType.TEXT:
        path = select_by_text(config.sensor_value, folder)
    else:
        try:
            sensor_value = float(config.sensor_value)
            if not math.isfinite(sensor_value):
                raise ValueError(config.sensor_value)
        except ValueError:
            logger.warning(
                f"non numeric value {config.sensor_value!r} for element {element_id}",
                extra={"event": "conditional_image_bad_value", "element_id": element_id},
            )
            return None
        path = select_by_number(config.min_sensor_value, config.max_sensor_value, sensor_value, folder)

    if path is None:
        return None
    return path.read_bytes()


def select_by_text(sensor_value: str, folder: Path) -> Path | None:
    images = list_images(folder)
    if not images:
        logger.error(f"No images found in folder {folder}", extra={"event": "conditional_image_empty"})
        return None

    best_path = None
    min_distance = None
    for path in images:
        distance = levenshtein_distance(sensor_value, path.stem)
        if min_distance is None or distance < min_distance:
            min_distance = distance
            best_path = path
    return best_path


def select_by_number(sensor_min: float, sensor_max: float, sensor_value: float, folder: Path) -> Path | None:
    """Map the sensor value from the sensor range into the range of image numbers and pick the nearest."""
    numbered = image_numbers_sorted(folder)
    if not numbered:
        logger.error(f"No images found in folder {folder}", extra={"event": "conditional_image_empty"})
        return None

    number_min = numbered[0][0]
    number_max = numbered[-1][0]
    if sensor_max == sensor_min:
        target = number_min
    else:
        target = (sensor_value - sensor_min) / (sensor_max - sensor_min) * (number_max - number_min) + number_min

    best_path = None
    min_distance = None
    for number, path in numbered:
        distance = abs(target - number)
        if min_distance is None or distance < min_distance:
            min_distance = distance
            best_path = path
    return best_path


def image_numbers_sorted(folder: Path) -> list[tuple[float, Path]]:
    numbered = []
    for path in list_images(folder):
        number = to_number(path.name)
        if number is not None:
            numbered.append((number, path))
    numbered.sort(key=lambda item: item[0])
    return numbered


def to_number(file_name: str) -> float | None:
    """Parse a gallery file name as a number: ``"1.png"`` -> 1.0, ``"-1,123.png"`` -> -1.123."""
    cleaned = "".join(c for c in file_name.replace(",", ".") if c in _NUMBER_CHARS).strip(".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def levenshtein_distance(s1: str, s2: str) -> int:
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    column = list(range(len(s1) + 1))
    for x in range(1, len(s2) + 1):
        column[0] = x
        last_diag = x - 1
        for y in range(1, len(s1) + 1):
            old_diag = column[y]
            cost = 0 if s1[y - 1] == s2[x - 1] else 1
            column[y] = min(column[y] + 1, column[y - 1] + 1, last_diag + cost)
            last_diag = old_diag
    return column[len(s1)]
