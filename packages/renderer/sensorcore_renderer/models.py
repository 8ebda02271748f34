"""Typed renderer models: display layout, element payloads and sensor history."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union


class ElementType(str, Enum):
    TEXT = "text"
    STATIC_IMAGE = "static-image"
    GRAPH = "graph"
    CONDITIONAL_IMAGE = "conditional-image"


class TextAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ValueModifier(str, Enum):
    NONE = "none"
    MIN = "min"
    MAX = "max"
    AVG = "avg"


class GraphType(str, Enum):
    LINE = "line"
    LINE_FILL = "line-fill"


class SensorType(str, Enum):
    TEXT = "text"
    NUMBER = "number"


@dataclass(frozen=True)
class TextConfig:
    sensor_id: str
    format: str = "{value} {unit}"
    value_modifier: ValueModifier = ValueModifier.NONE
    font_family: str = "Roboto"
    font_size: int = 20
    font_color: str = "#FFFFFFFF"
    width: int = 100
    height: int = 20
    alignment: TextAlign = TextAlign.LEFT


@dataclass(frozen=True)
class StaticImageConfig:
    image_path: str
    width: int
    height: int


@dataclass(frozen=True)
class GraphConfig:
    sensor_id: str
    width: int
    height: int
    sensor_values: tuple[float, ...] = ()
    min_sensor_value: float | None = None
    max_sensor_value: float | None = None
    graph_type: GraphType = GraphType.LINE
    graph_color: str = "#FFFFFFFF"
    graph_stroke_width: int = 1
    background_color: str = "#00000000"
    border_color: str = "#00000000"


@dataclass(frozen=True)
class ConditionalImageConfig:
    sensor_id: str
    images_path: str
    min_sensor_value: float
    max_sensor_value: float
    width: int
    height: int
    sensor_value: str = ""


ElementPayload = Union[TextConfig, StaticImageConfig, GraphConfig, ConditionalImageConfig]

_PAYLOAD_TYPES: dict[type, ElementType] = {
    TextConfig: ElementType.TEXT,
    StaticImageConfig: ElementType.STATIC_IMAGE,
    GraphConfig: ElementType.GRAPH,
    ConditionalImageConfig: ElementType.CONDITIONAL_IMAGE,
}


@dataclass(frozen=True)
class ElementConfig:
    """One display element; its type is whatever its payload is."""

    id: str
    payload: ElementPayload
    x: int = 0
    y: int = 0
    name: str = ""

    def __post_init__(self) -> None:
        if type(self.payload) not in _PAYLOAD_TYPES:
            raise TypeError(f"unsupported element payload: {type(self.payload).__name__}")

    @property
    def element_type(self) -> ElementType:
        return _PAYLOAD_TYPES[type(self.payload)]


@dataclass(frozen=True)
class DisplayConfig:
    resolution_width: int
    resolution_height: int
    elements: tuple[ElementConfig, ...] = ()


@dataclass(frozen=True)
class SensorValue:
    id: str
    value: str
    unit: str = ""
    label: str = ""
    sensor_type: SensorType = SensorType.NUMBER

    def __str__(self) -> str:
        return f"id: {self.id}, value: {self.value}, label: {self.label} type: {self.sensor_type.value}"


@dataclass(frozen=True)
class SensorValueHistory:
    """Recorded sensor frames, newest frame first."""

    frames: tuple[tuple[SensorValue, ...], ...] = ()

    def current(self, sensor_id: str) -> SensorValue | None:
        if not self.frames:
            return None
        for value in self.frames[0]:
            if value.id == sensor_id:
                return value
        return None

    def series(self, sensor_id: str) -> list[SensorValue]:
        return [value for frame in self.frames for value in frame if value.id == sensor_id]

    def numeric_series(self, sensor_id: str) -> list[float]:
        numbers: list[float] = []
        for value in self.series(sensor_id):
            if value.sensor_type != SensorType.NUMBER:
                continue
            try:
                number = float(value.value)
            except ValueError:
                continue
            if math.isfinite(number):
                numbers.append(number)
        return numbers


@dataclass(frozen=True)
class FrameBuffer:
    width: int
    height: int
    pixel_format: str
    bytes: bytes
