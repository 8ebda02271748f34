"""JSON envelope for display layouts and sensor histories."""

from __future__ import annotations

import json
from dataclasses import asdict, fields
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from sensorcore_renderer.models import (
    ConditionalImageConfig,
    DisplayConfig,
    ElementConfig,
    ElementType,
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

E = TypeVar("E", bound=Enum)

_PAYLOAD_KEYS: dict[ElementType, tuple[str, type]] = {
    ElementType.TEXT: ("text_config", TextConfig),
    ElementType.STATIC_IMAGE: ("image_config", StaticImageConfig),
    ElementType.GRAPH: ("graph_config", GraphConfig),
    ElementType.CONDITIONAL_IMAGE: ("conditional_image_config", ConditionalImageConfig),
}

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "value_modifier": ValueModifier,
    "alignment": TextAlign,
    "graph_type": GraphType,
}


def _norm(value: str) -> str:
    return value.replace("-", "").replace("_", "").lower()


def parse_enum(enum_type: type[E], raw: Any) -> E:
    """Accept ``"line-fill"``, ``"LineFill"`` and ``"LINE_FILL"`` alike."""
    if isinstance(raw, enum_type):
        return raw
    wanted = _norm(str(raw))
    for member in enum_type:
        if _norm(member.value) == wanted or _norm(member.name) == wanted:
            return member
    raise ValueError(f"Unknown {enum_type.__name__}: {raw!r}")


def _payload_from_dict(payload_type: type, raw: dict[str, Any]):
    known = {f.name for f in fields(payload_type)}
    kwargs: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            continue
        if key in _ENUM_FIELDS:
            value = parse_enum(_ENUM_FIELDS[key], value)
        elif key == "sensor_values":
            value = tuple(float(v) for v in value)
        kwargs[key] = value
    try:
        return payload_type(**kwargs)
    except TypeError as exc:
        raise ValueError(f"Invalid {payload_type.__name__}: {exc}") from exc


def element_from_dict(raw: dict[str, Any]) -> ElementConfig:
    if not raw.get("id"):
        raise ValueError("Element without id")
    element_type = parse_enum(ElementType, raw.get("element_type", ""))
    key, payload_type = _PAYLOAD_KEYS[element_type]
    payload_raw = raw.get(key)
    if not isinstance(payload_raw, dict):
        raise ValueError(f"Element {raw.get('id')!r} of type {element_type.value} has no {key}")
    return ElementConfig(
        id=str(raw["id"]),
        name=str(raw.get("name", "")),
        x=int(raw.get("x", 0)),
        y=int(raw.get("y", 0)),
        payload=_payload_from_dict(payload_type, payload_raw),
    )


def display_config_from_dict(raw: dict[str, Any]) -> DisplayConfig:
    width = int(raw.get("resolution_width", 0))
    height = int(raw.get("resolution_height", 0))
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid resolution {width}x{height}")
    elements = tuple(element_from_dict(e) for e in raw.get("elements", []))
    ids = [e.id for e in elements]
    if len(ids) != len(set(ids)):
        raise ValueError("Element ids must be unique")
    return DisplayConfig(resolution_width=width, resolution_height=height, elements=elements)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def display_config_to_dict(cfg: DisplayConfig) -> dict[str, Any]:
    elements = []
    for element in cfg.elements:
        key, _payload_type = _PAYLOAD_KEYS[element.element_type]
        elements.append(
            {
                "id": element.id,
                "name": element.name,
                "x": element.x,
                "y": element.y,
                "element_type": element.element_type.value,
                key: _jsonable(asdict(element.payload)),
            }
        )
    return {
        "resolution_width": cfg.resolution_width,
        "resolution_height": cfg.resolution_height,
        "elements": elements,
    }


def sensor_value_from_dict(raw: dict[str, Any]) -> SensorValue:
    return SensorValue(
        id=str(raw["id"]),
        value=str(raw.get("value", "")),
        unit=str(raw.get("unit", "")),
        label=str(raw.get("label", "")),
        sensor_type=parse_enum(SensorType, raw.get("sensor_type", SensorType.NUMBER)),
    )


def history_from_dict(raw: dict[str, Any] | list[Any]) -> SensorValueHistory:
    frames = raw.get("frames", []) if isinstance(raw, dict) else raw
    return SensorValueHistory(frames=tuple(tuple(sensor_value_from_dict(v) for v in frame) for frame in frames))


def history_to_dict(history: SensorValueHistory) -> dict[str, Any]:
    return {"frames": [[_jsonable(asdict(v)) for v in frame] for frame in history.frames]}


def load_layout(path: Path) -> DisplayConfig:
    return display_config_from_dict(json.loads(Path(path).read_text(encoding="utf-8")))


def save_layout(cfg: DisplayConfig, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(display_config_to_dict(cfg), indent=2), encoding="utf-8")
    return path


def load_history(path: Path) -> SensorValueHistory:
    return history_from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
