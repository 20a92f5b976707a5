import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from ruin_renderer.models import DEFAULT_COLORS, Colors
from ruin_renderer.schemes import list_schemes, load_colors, lookup

SCHEMES = """\
arch:
  charging: [1, 2, 3]
  default: [4, 5, 6]
  low_battery: [7, 8, 9]
  background: [10, 11, 12]
broken:
  charging: [1, 2]
  default: [4, 5, 6]
  low_battery: [7, 8, 9]
  background: [10, 11, 12]
"""


class SchemeTests(unittest.TestCase):
    def test_lookup_profile(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "colorschemes.yaml"
            path.write_text(SCHEMES, encoding="utf-8")
            colors = lookup(path, "arch")
            self.assertEqual(colors, Colors((1, 2, 3), (4, 5, 6), (7, 8, 9), (10, 11, 12)))
            self.assertEqual(list_schemes(path), ["arch", "broken"])

    def test_missing_file_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "colorschemes.yaml"
            self.assertIsNone(lookup(path, "arch"))
            self.assertEqual(load_colors(path, "arch"), DEFAULT_COLORS)
            self.assertEqual(list_schemes(path), [])

    def test_missing_key_and_malformed_entry_fall_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "colorschemes.yaml"
            path.write_text(SCHEMES, encoding="utf-8")
            self.assertEqual(load_colors(path, "nixos"), DEFAULT_COLORS)
            self.assertEqual(load_colors(path, "broken"), DEFAULT_COLORS)

    def test_unparsable_document_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "colorschemes.yaml"
            path.write_text("arch: [unclosed\n  - : :", encoding="utf-8")
            self.assertEqual(load_colors(path, "arch"), DEFAULT_COLORS)

    def test_default_colors(self):
        self.assertEqual(DEFAULT_COLORS.charging, (255, 255, 0))
        self.assertEqual(DEFAULT_COLORS.default, (91, 194, 54))
        self.assertEqual(DEFAULT_COLORS.low_battery, (191, 19, 28))
        self.assertEqual(DEFAULT_COLORS.background, (40, 40, 40))

    def test_from_mapping_rejects_out_of_range(self):
        with self.assertRaises(ValueError):
            Colors.from_mapping(
                {"charging": [256, 0, 0], "default": [0, 0, 0], "low_battery": [0, 0, 0], "background": [0, 0, 0]}
            )


if __name__ == "__main__":
    unittest.main()
