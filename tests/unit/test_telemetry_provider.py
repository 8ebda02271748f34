import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from sensorcore_renderer.models import SensorType
from sensorcore_telemetry.provider import TelemetryProvider


class TelemetryProviderTests(unittest.TestCase):
    def test_poll_returns_sensor_frame(self):
        provider = TelemetryProvider()
        values = {v.id: v for v in provider.poll()}
        self.assertIn("cpu_usage", values)
        self.assertEqual(values["cpu_usage"].sensor_type, SensorType.NUMBER)
        self.assertGreaterEqual(float(values["cpu_usage"].value), 0.0)
        self.assertGreater(float(values["memory_total"].value), 0.0)
        self.assertEqual(values["clock_time"].sensor_type, SensorType.TEXT)


if __name__ == "__main__":
    unittest.main()
