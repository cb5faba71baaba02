"""
Unit tests for color handling and palette extraction.
"""

import sys
from pathlib import Path
import numpy as np
import unittest
from PIL import Image

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from block_palette.color import (
    Color, FUZZ_TOLERANCE, MAX_PALETTE_SIZE, MIN_ALPHA,
    color_to_rgba, rgba_match, rgba_to_color,
)
from block_palette.ingestion import Frame, ImageSource
from block_palette.palette import MAX_FRAME_DEPTH, PaletteExtractor, extract_palette


def grid_image(width: int, height: int, step: int = 60) -> np.ndarray:
    """All-opaque image where every pixel differs from the others by >= step."""
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            rgba[y, x] = [x * step, y * step, 100, 255]
    return rgba


def solid_image(color, width: int = 2, height: int = 2) -> np.ndarray:
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    rgba[:, :] = color
    return rgba


class CountingFrame:
    """Frame double that records pixel reads."""

    def __init__(self, rgba: np.ndarray, log: list, index: int):
        self._rgba = rgba
        self._log = log
        self._index = index

    def to_array(self) -> np.ndarray:
        self._log.append(self._index)
        return self._rgba


class CountingSource:
    """Source double honoring the ImageSource contract."""

    def __init__(self, arrays):
        self.reads = []
        self._frames = [CountingFrame(a, self.reads, i) for i, a in enumerate(arrays)]

    @property
    def width(self) -> int:
        return self._frames[0]._rgba.shape[1]

    @property
    def height(self) -> int:
        return self._frames[0]._rgba.shape[0]

    def resize(self, width=None, height=None):
        raise AssertionError("small sources must not be resized")

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> CountingFrame:
        return self._frames[index]


class TestColor(unittest.TestCase):
    """Tests for the Color type and fuzzy matching."""

    def test_constants(self):
        """Test alpha threshold and palette cap values."""
        assert MIN_ALPHA == 128
        assert MAX_PALETTE_SIZE == 256 ** 3 + 128
        assert FUZZ_TOLERANCE[0] == 17.0
        assert abs(FUZZ_TOLERANCE[3] - 5.1) < 1e-9

    def test_pack_unpack(self):
        """Test 0xRRGGBBAA packing."""
        assert color_to_rgba(0x11223344) == Color(0x11, 0x22, 0x33, 0x44)
        assert rgba_to_color(Color(0x11, 0x22, 0x33, 0x44)) == 0x11223344
        assert Color(255, 0, 16, 128).hex == "ff001080"

    def test_match_within_band(self):
        """Test differences up to the tolerance match."""
        assert rgba_match((100, 100, 100, 255), (117, 83, 117, 250))

    def test_match_is_per_channel(self):
        """Test one channel outside its band breaks the match."""
        assert not rgba_match((100, 100, 100, 255), (118, 100, 100, 255))
        assert not rgba_match((100, 100, 100, 255), (100, 100, 100, 249))


class TestPaletteExtractor(unittest.TestCase):
    """Tests for palette extraction."""

    def test_distinct_colors(self):
        """Test 4x4 image with 16 distinct colors."""
        source = ImageSource.from_array(grid_image(4, 4))
        palette = extract_palette(source)

        assert len(palette) == 16
        # Row-major discovery order
        assert palette[0] == Color(0, 0, 100, 255)
        assert palette[1] == Color(60, 0, 100, 255)
        assert palette[4] == Color(0, 60, 100, 255)

    def test_fuzzy_duplicates_collapse(self):
        """Test two pixels within tolerance yield one entry."""
        rgba = np.zeros((1, 2, 4), dtype=np.uint8)
        rgba[0, 0] = [100, 100, 100, 255]
        rgba[0, 1] = [117, 83, 117, 250]

        palette = extract_palette(ImageSource.from_array(rgba))
        assert palette == [Color(100, 100, 100, 255)]

    def test_outside_tolerance_kept(self):
        """Test a pixel 18 away on one channel is a new color."""
        rgba = np.zeros((1, 2, 4), dtype=np.uint8)
        rgba[0, 0] = [100, 100, 100, 255]
        rgba[0, 1] = [100, 118, 100, 255]

        palette = extract_palette(ImageSource.from_array(rgba))
        assert len(palette) == 2

    def test_alpha_gate(self):
        """Test alpha <= 128 never enters the palette."""
        rgba = np.zeros((1, 4, 4), dtype=np.uint8)
        rgba[0, 0] = [10, 10, 10, 0]
        rgba[0, 1] = [80, 80, 80, 127]
        rgba[0, 2] = [160, 160, 160, 128]
        rgba[0, 3] = [240, 240, 240, 129]

        palette = extract_palette(ImageSource.from_array(rgba))
        assert palette == [Color(240, 240, 240, 129)]

    def test_fully_transparent(self):
        """Test a transparent image gives an empty palette."""
        palette = extract_palette(ImageSource.from_array(np.zeros((8, 8, 4), dtype=np.uint8)))
        assert palette == []

    def test_cap_truncates(self):
        """Test palette growth stops at the cap without raising."""
        extractor = PaletteExtractor(max_palette_size=3)
        source = ImageSource.from_array(grid_image(4, 4))

        with self.assertLogs("block_palette.palette", level="WARNING") as logs:
            palette = extractor.extract(source)

        assert len(palette) == 3
        assert extractor.truncated
        assert any("truncated" in line for line in logs.output)

    def test_cap_not_hit(self):
        """Test the truncation flag stays off under the cap."""
        extractor = PaletteExtractor(max_palette_size=16)
        palette = extractor.extract(ImageSource.from_array(grid_image(4, 4)))
        assert len(palette) == 16
        assert not extractor.truncated

    def test_reverse_frame_order(self):
        """Test later frames are scanned first."""
        source = ImageSource.from_arrays([
            solid_image([255, 0, 0, 255]),
            solid_image([0, 0, 255, 255]),
        ])
        palette = extract_palette(source)
        assert palette == [Color(0, 0, 255, 255), Color(255, 0, 0, 255)]

    def test_cross_frame_duplicate_keeps_last_frame(self):
        """Test the fuzzy duplicate from the last frame wins."""
        source = ImageSource.from_arrays([
            solid_image([100, 100, 100, 255]),
            solid_image([110, 100, 100, 255]),
        ])
        palette = extract_palette(source)
        assert palette == [Color(110, 100, 100, 255)]

    def test_frame_depth_bound(self):
        """Test at most MAX_FRAME_DEPTH frames are read."""
        arrays = [solid_image([i * 20, 0, 0, 255]) for i in range(12)]
        source = CountingSource(arrays)

        palette = PaletteExtractor().extract(source)

        assert len(source.reads) == MAX_FRAME_DEPTH
        assert sorted(source.reads) == list(range(MAX_FRAME_DEPTH))
        assert source.reads[0] == MAX_FRAME_DEPTH - 1
        assert len(palette) == MAX_FRAME_DEPTH
        assert palette[0] == Color(180, 0, 0, 255)

    def test_resize_width_only(self):
        """Test a 300x100 source shrinks to width 256."""
        source = ImageSource.from_array(solid_image([50, 60, 70, 255], 300, 100))

        with self.assertLogs("block_palette.palette", level="INFO") as logs:
            palette = extract_palette(source)

        assert source.size == (256, 85)
        assert palette == [Color(50, 60, 70, 255)]
        assert any("Resizing input width" in line for line in logs.output)
        assert not any("Resizing input height" in line for line in logs.output)

    def test_resize_height(self):
        """Test a tall source shrinks to height 256."""
        source = ImageSource.from_array(solid_image([50, 60, 70, 255], 100, 400))
        extract_palette(source)
        assert source.size == (64, 256)

    def test_resize_both_checks(self):
        """Test height then width are fitted one after the other."""
        source = ImageSource.from_array(solid_image([50, 60, 70, 255], 600, 300))
        extract_palette(source)
        assert source.size == (256, 128)

    def test_resize_all_frames(self):
        """Test the resize applies to every frame."""
        source = ImageSource.from_arrays([
            solid_image([255, 0, 0, 255], 512, 64),
            solid_image([0, 255, 0, 255], 512, 64),
        ])
        extract_palette(source)
        assert [f.size for f in source] == [(256, 32), (256, 32)]

    def test_small_source_untouched(self):
        """Test sources inside the boundary keep their size."""
        source = ImageSource.from_array(grid_image(4, 4))
        extract_palette(source)
        assert source.size == (4, 4)

    def test_degenerate_source(self):
        """Test zero-size sources are rejected before any resize."""
        source = ImageSource([Frame(Image.new("RGBA", (0, 300)))])
        with self.assertRaises(ValueError):
            extract_palette(source)

    def test_cap_invariant_random(self):
        """Test random noise never exceeds the cap and stays fuzzy-unique."""
        rng = np.random.default_rng(7)
        rgba = rng.integers(0, 256, size=(24, 24, 4), dtype=np.uint8)

        palette = PaletteExtractor(max_palette_size=50).extract(ImageSource.from_array(rgba))

        assert len(palette) <= 50
        assert all(c.a > MIN_ALPHA for c in palette)
        for i, first in enumerate(palette):
            for second in palette[i + 1:]:
                assert not rgba_match(first, second)


if __name__ == "__main__":
    unittest.main(verbosity=2)
