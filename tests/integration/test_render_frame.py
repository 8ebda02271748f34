import argparse
import json
import sys
import tempfile
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "apps" / "desktop"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from sensorcore_app.cli import cmd_render


class RenderFrameTests(unittest.TestCase):
    def test_render_layout_and_history_to_png(self):
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            gallery = tmp_path / "gallery"
            gallery.mkdir()
            Image.new("RGBA", (6, 6), (0, 255, 0, 255)).save(gallery / "ok.png")
            Image.new("RGBA", (6, 6), (255, 0, 0, 255)).save(gallery / "error.png")

            layout = {
                "resolution_width": 64,
                "resolution_height": 32,
                "elements": [
                    {
                        "id": "graph",
                        "element_type": "graph",
                        "graph_config": {
                            "sensor_id": "cpu",
                            "width": 40,
                            "height": 20,
                            "background_color": "#000000FF",
                            "border_color": "#FFFFFFFF",
                        },
                    },
                    {
                        "id": "state",
                        "x": 50,
                        "y": 2,
                        "element_type": "conditional-image",
                        "conditional_image_config": {
                            "sensor_id": "state",
                            "images_path": str(gallery),
                            "min_sensor_value": 0,
                            "max_sensor_value": 1,
                            "width": 6,
                            "height": 6,
                        },
                    },
                ],
            }
            history = {
                "frames": [
                    [{"id": "cpu", "value": "40"}, {"id": "state", "value": "okay", "sensor_type": "text"}],
                    [{"id": "cpu", "value": "20"}],
                ]
            }
            layout_path = tmp_path / "layout.json"
            history_path = tmp_path / "history.json"
            layout_path.write_text(json.dumps(layout), encoding="utf-8")
            history_path.write_text(json.dumps(history), encoding="utf-8")
            out = tmp_path / "out" / "frame.png"

            args = argparse.Namespace(
                layout=str(layout_path),
                history=str(history_path),
                out=str(out),
                cache_dir=str(tmp_path / "cache"),
                font_dir=[str(tmp_path)],
            )
            self.assertEqual(cmd_render(args), 0)

            with Image.open(out) as frame:
                frame = frame.convert("RGBA")
                self.assertEqual(frame.size, (64, 32))
                self.assertEqual(frame.getpixel((0, 0)), (255, 255, 255, 255))
                self.assertEqual(frame.getpixel((52, 4)), (0, 255, 0, 255))
                self.assertEqual(frame.getpixel((60, 30)), (0, 0, 0, 0))


if __name__ == "__main__":
    unittest.main()
