import sys
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from sensorcore_renderer.rgb565 import decode_image, encode_png, image_to_rgb565_le, rgb888_bytes_to_rgb565_le


class RGB565Tests(unittest.TestCase):
    def test_single_red_pixel(self):
        data = bytes([255, 0, 0])
        rgb565 = rgb888_bytes_to_rgb565_le(data)
        self.assertEqual(rgb565, bytes([0x00, 0xF8]))

    def test_rejects_partial_pixels(self):
        with self.assertRaises(ValueError):
            rgb888_bytes_to_rgb565_le(b"\x00\x01")

    def test_rgba_frame_conversion_size(self):
        img = Image.new("RGBA", (10, 10), (10, 20, 30, 255))
        out = image_to_rgb565_le(img)
        self.assertEqual(len(out), 200)

    def test_png_encoding_keeps_pixels(self):
        img = Image.new("RGBA", (3, 2), (1, 2, 3, 4))
        decoded = decode_image(encode_png(img))
        self.assertEqual(decoded.size, (3, 2))
        self.assertEqual(decoded.getpixel((2, 1)), (1, 2, 3, 4))


if __name__ == "__main__":
    unittest.main()
