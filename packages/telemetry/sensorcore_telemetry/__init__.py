"""System sensor providers and history recording for SensorCore."""

from .history import SensorHistory
from .provider import TelemetryProvider

__all__ = [
    "SensorHistory",
    "TelemetryProvider",
]
