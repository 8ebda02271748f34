"""Bounded sensor history recorder."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable

from sensorcore_renderer.models import SensorValue, SensorValueHistory


class SensorHistory:
    """Keeps the last ``max_frames`` sensor frames, newest first.

    Recording and snapshotting may happen on different threads; a render call
    only ever sees an immutable snapshot.
    """

    def __init__(self, max_frames: int = 300) -> None:
        if max_frames < 1:
            raise ValueError("max_frames must be at least 1")
        self.max_frames = max_frames
        self._frames: deque[tuple[SensorValue, ...]] = deque(maxlen=max_frames)
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._frames)

    def push(self, values: Iterable[SensorValue]) -> None:
        with self._lock:
            self._frames.appendleft(tuple(values))

    def clear(self) -> None:
        with self._lock:
            self._frames.clear()

    def snapshot(self) -> SensorValueHistory:
        with self._lock:
            return SensorValueHistory(frames=tuple(self._frames))
