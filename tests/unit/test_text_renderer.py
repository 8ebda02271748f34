import sys
import unittest
from pathlib import Path

from PIL import Image, ImageFont

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from sensorcore_renderer import text
from sensorcore_renderer.models import (
    SensorType,
    SensorValue,
    SensorValueHistory,
    TextAlign,
    TextConfig,
    ValueModifier,
)


def _history() -> SensorValueHistory:
    return SensorValueHistory(
        frames=(
            (SensorValue(id="cpu", value="3", unit="%"),),
            (SensorValue(id="cpu", value="2", unit="%"),),
            (SensorValue(id="cpu", value="x", unit="%", sensor_type=SensorType.TEXT),),
            (SensorValue(id="cpu", value="1", unit="%"),),
        )
    )


def _font():
    return ImageFont.load_default(size=20)


class PlaceholderTests(unittest.TestCase):
    def test_aggregates_ignore_text_samples(self):
        cfg = TextConfig(sensor_id="cpu", format="{value-avg}|{value-min}|{value-max}")
        out = text.substitute_placeholders(cfg.format, cfg, _history())
        self.assertEqual(out, "2.00|1.00|3.00")

    def test_value_and_unit_from_newest_frame(self):
        cfg = TextConfig(sensor_id="cpu", format="CPU {value}{unit}")
        self.assertEqual(text.substitute_placeholders(cfg.format, cfg, _history()), "CPU 3%")

    def test_value_modifier(self):
        cfg = TextConfig(sensor_id="cpu", format="{value}", value_modifier=ValueModifier.MIN)
        self.assertEqual(text.substitute_placeholders(cfg.format, cfg, _history()), "1.00")

    def test_value_modifier_avg_and_max(self):
        avg = TextConfig(sensor_id="cpu", format="{value}{unit}", value_modifier=ValueModifier.AVG)
        self.assertEqual(text.substitute_placeholders(avg.format, avg, _history()), "2.00%")
        high = TextConfig(sensor_id="cpu", format="{value}", value_modifier=ValueModifier.MAX)
        self.assertEqual(text.substitute_placeholders(high.format, high, _history()), "3.00")

    def test_missing_sensor_renders_placeholder_text(self):
        cfg = TextConfig(sensor_id="gpu", format="{value}{unit} {value-avg} {value-min} {value-max}")
        out = text.substitute_placeholders(cfg.format, cfg, _history())
        self.assertEqual(out, "N/A N/A N/A N/A")
        self.assertNotIn("{", out)

    def test_text_only_sensor_has_no_aggregate(self):
        history = SensorValueHistory(frames=((SensorValue(id="state", value="ok", sensor_type=SensorType.TEXT),),))
        cfg = TextConfig(sensor_id="state", format="{value} {value-avg}")
        self.assertEqual(text.substitute_placeholders(cfg.format, cfg, history), "ok N/A")


class BoundingBoxTests(unittest.TestCase):
    def test_tight_box(self):
        img = Image.new("RGBA", (20, 12), (0, 0, 0, 0))
        for x in range(5, 10):
            for y in range(3, 7):
                img.putpixel((x, y), (255, 255, 255, 10))
        self.assertEqual(text.get_bounding_box(img), (5, 3, 10, 7))

    def test_empty_image_uses_full_extent(self):
        img = Image.new("RGBA", (20, 12), (0, 0, 0, 0))
        self.assertEqual(text.get_bounding_box(img), (0, 0, 20, 12))


class RenderTests(unittest.TestCase):
    def _render(self, alignment: TextAlign) -> Image.Image:
        cfg = TextConfig(sensor_id="cpu", format="{value}{unit}", width=200, height=40, alignment=alignment)
        return text.render(400, 100, cfg, _history(), _font())

    def test_tile_has_element_size(self):
        tile = self._render(TextAlign.LEFT)
        self.assertEqual(tile.size, (200, 40))
        self.assertEqual(tile.mode, "RGBA")

    def test_left_alignment_touches_left_edge(self):
        left, _top, _right, _bottom = text.get_bounding_box(self._render(TextAlign.LEFT))
        self.assertEqual(left, 0)

    def test_right_alignment_touches_right_edge(self):
        _left, _top, right, _bottom = text.get_bounding_box(self._render(TextAlign.RIGHT))
        self.assertEqual(right, 200)

    def test_center_alignment(self):
        left, _top, right, _bottom = text.get_bounding_box(self._render(TextAlign.CENTER))
        self.assertEqual(left, (200 - (right - left)) // 2)

    def test_empty_text_gives_transparent_tile(self):
        cfg = TextConfig(sensor_id="cpu", format="", width=30, height=10)
        tile = text.render(100, 50, cfg, _history(), _font())
        self.assertEqual(tile.size, (30, 10))
        self.assertIsNone(tile.getbbox())


if __name__ == "__main__":
    unittest.main()
