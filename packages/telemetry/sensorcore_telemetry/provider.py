"""Cross-platform sensor provider with graceful GPU fallbacks."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime

import psutil

from sensorcore_renderer.models import SensorType, SensorValue

logger = logging.getLogger("sensorcore.telemetry")


def _number(sensor_id: str, value: float, unit: str, label: str) -> SensorValue:
    return SensorValue(id=sensor_id, value=f"{value:.2f}", unit=unit, label=label, sensor_type=SensorType.NUMBER)


def _text(sensor_id: str, value: str, label: str) -> SensorValue:
    return SensorValue(id=sensor_id, value=value, unit="", label=label, sensor_type=SensorType.TEXT)


class _GpuAdapter:
    def poll(self) -> list[SensorValue]:
        return []


class _NvmlGpuAdapter(_GpuAdapter):
    def __init__(self) -> None:
        import pynvml  # type: ignore

        self._nvml = pynvml
        pynvml.nvmlInit()

    def poll(self) -> list[SensorValue]:
        nvml = self._nvml
        if nvml.nvmlDeviceGetCount() < 1:
            return []

        h = nvml.nvmlDeviceGetHandleByIndex(0)
        util = nvml.nvmlDeviceGetUtilizationRates(h)
        temp = nvml.nvmlDeviceGetTemperature(h, nvml.NVML_TEMPERATURE_GPU)
        values = [
            _number("gpu_usage", float(util.gpu), "%", "GPU usage"),
            _number("gpu_temperature", float(temp), "°C", "GPU temperature"),
        ]
        try:
            values.append(_number("gpu_fan", float(nvml.nvmlDeviceGetFanSpeed(h)), "%", "GPU fan"))
        except nvml.NVMLError:
            pass
        return values


def _build_gpu_adapter() -> _GpuAdapter:
    try:
        return _NvmlGpuAdapter()
    except Exception as exc:
        logger.info(f"no NVML GPU sensors: {exc}", extra={"event": "gpu_unavailable"})
        return _GpuAdapter()


def _cpu_temp_c() -> float | None:
    try:
        temps = psutil.sensors_temperatures()
    except (AttributeError, OSError):
        return None
    if not temps:
        return None

    for name in ("coretemp", "cpu_thermal", "k10temp", "acpitz"):
        entries = temps.get(name)
        if entries and entries[0].current is not None:
            return float(entries[0].current)

    for _name, entries in temps.items():
        if entries and entries[0].current is not None:
            return float(entries[0].current)
    return None


@dataclass
class _CounterSnapshot:
    ts: float
    net_sent: int
    net_recv: int
    disk_read: int
    disk_write: int


class TelemetryProvider:
    """Single polling provider returning one frame of normalized sensor readings."""

    def __init__(self, disk_path: str = "/") -> None:
        now = time.monotonic()
        net = psutil.net_io_counters()
        disk = psutil.disk_io_counters()
        self._prev = _CounterSnapshot(
            ts=now,
            net_sent=(net.bytes_sent if net else 0),
            net_recv=(net.bytes_recv if net else 0),
            disk_read=(disk.read_bytes if disk else 0),
            disk_write=(disk.write_bytes if disk else 0),
        )
        self._disk_path = disk_path
        self._gpu = _build_gpu_adapter()
        psutil.cpu_percent(interval=None)

    def poll(self) -> list[SensorValue]:
        now_monotonic = time.monotonic()
        elapsed = max(now_monotonic - self._prev.ts, 1e-6)
        values: list[SensorValue] = []

        values.append(_number("cpu_usage", float(psutil.cpu_percent(interval=None)), "%", "CPU usage"))
        freq = psutil.cpu_freq()
        if freq:
            values.append(_number("cpu_frequency", float(freq.current), "MHz", "CPU frequency"))
        temp = _cpu_temp_c()
        if temp is not None:
            values.append(_number("cpu_temperature", temp, "°C", "CPU temperature"))

        vm = psutil.virtual_memory()
        values.append(_number("memory_used", vm.used / (1024**3), "GB", "Memory used"))
        values.append(_number("memory_total", vm.total / (1024**3), "GB", "Memory total"))
        values.append(_number("memory_usage", float(vm.percent), "%", "Memory usage"))

        du = psutil.disk_usage(self._disk_path)
        values.append(_number("disk_used", du.used / (1024**3), "GB", "Disk used"))
        values.append(_number("disk_usage", float(du.percent), "%", "Disk usage"))

        dio = psutil.disk_io_counters()
        if dio:
            read_mb_s = max(dio.read_bytes - self._prev.disk_read, 0) / elapsed / (1024 * 1024)
            write_mb_s = max(dio.write_bytes - self._prev.disk_write, 0) / elapsed / (1024 * 1024)
            disk_read, disk_write = dio.read_bytes, dio.write_bytes
        else:
            read_mb_s = write_mb_s = 0.0
            disk_read, disk_write = self._prev.disk_read, self._prev.disk_write
        values.append(_number("disk_read", read_mb_s, "MB/s", "Disk read"))
        values.append(_number("disk_write", write_mb_s, "MB/s", "Disk write"))

        net = psutil.net_io_counters()
        if net:
            up_mb_s = max(net.bytes_sent - self._prev.net_sent, 0) / elapsed / (1024 * 1024)
            down_mb_s = max(net.bytes_recv - self._prev.net_recv, 0) / elapsed / (1024 * 1024)
            net_sent, net_recv = net.bytes_sent, net.bytes_recv
        else:
            up_mb_s = down_mb_s = 0.0
            net_sent, net_recv = self._prev.net_sent, self._prev.net_recv
        values.append(_number("network_up", up_mb_s, "MB/s", "Network upload"))
        values.append(_number("network_down", down_mb_s, "MB/s", "Network download"))

        values.extend(self._gpu.poll())

        now_local = datetime.now().astimezone()
        values.append(_text("clock_time", now_local.strftime("%H:%M:%S"), "Time"))
        values.append(_text("clock_date", now_local.strftime("%Y-%m-%d"), "Date"))

        self._prev = _CounterSnapshot(
            ts=now_monotonic,
            net_sent=net_sent,
            net_recv=net_recv,
            disk_read=disk_read,
            disk_write=disk_write,
        )
        return values
