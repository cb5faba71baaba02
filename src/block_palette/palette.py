"""
Palette Extraction Module

Builds an ordered, de-duplicated list of colors from a still or animated
image:

1. Large sources are shrunk to the 256x256 boundary (nearest neighbor)
2. At most MAX_FRAME_DEPTH frames are scanned, last frame first
3. Colors at or below MIN_ALPHA are ignored
4. A color is admitted only if it fuzzy-matches nothing already admitted
5. Growth stops at MAX_PALETTE_SIZE (truncation is logged, never raised)

The resize step mutates the source passed in. Clone it first if the
original pixels are still needed afterwards.
"""

import logging
from typing import List, Sequence
import numpy as np
from numba import njit

from .color import Color, FUZZ_TOLERANCE, MAX_PALETTE_SIZE, MIN_ALPHA

logger = logging.getLogger(__name__)


# Maximum width
BOUNDARY_X = 256

# Maximum height
BOUNDARY_Y = 256

# Maximum number of animation frames scanned into a palette
MAX_FRAME_DEPTH = 10


@njit(cache=True)
def _scan_pixels(
    pixels: np.ndarray,
    palette: np.ndarray,
    count: int,
    min_alpha: int,
    tolerance: np.ndarray,
    limit: int
):
    """
    Admit the colors of one frame into a palette buffer.

    Args:
        pixels: uint8 array of shape (H, W, 4)
        palette: int32 buffer of shape (capacity, 4), first `count` rows used
        count: Number of colors already admitted
        min_alpha: Colors need alpha strictly above this value
        tolerance: float64 array of 4 per-channel tolerances
        limit: Maximum palette size

    Returns:
        (count, truncated) after scanning the frame
    """
    height = pixels.shape[0]
    width = pixels.shape[1]

    for y in range(height):
        for x in range(width):
            a = np.int32(pixels[y, x, 3])
            if a <= min_alpha:
                continue

            r = np.int32(pixels[y, x, 0])
            g = np.int32(pixels[y, x, 1])
            b = np.int32(pixels[y, x, 2])

            matched = False
            for i in range(count):
                if (abs(palette[i, 0] - r) <= tolerance[0]
                        and abs(palette[i, 1] - g) <= tolerance[1]
                        and abs(palette[i, 2] - b) <= tolerance[2]
                        and abs(palette[i, 3] - a) <= tolerance[3]):
                    matched = True
                    break

            if matched:
                continue

            if count >= limit:
                return count, True

            palette[count, 0] = r
            palette[count, 1] = g
            palette[count, 2] = b
            palette[count, 3] = a
            count += 1

    return count, False


class PaletteExtractor:
    """
    Extracts a fuzzy-unique palette from an ImageSource.

    Usage:
        extractor = PaletteExtractor()
        colors = extractor.extract(source)
    """

    def __init__(
        self,
        max_frame_depth: int = MAX_FRAME_DEPTH,
        max_palette_size: int = MAX_PALETTE_SIZE,
        min_alpha: int = MIN_ALPHA,
        tolerance: Sequence[float] = FUZZ_TOLERANCE,
        boundary: Sequence[int] = (BOUNDARY_X, BOUNDARY_Y)
    ):
        """
        Initialize the extractor.

        Args:
            max_frame_depth: Maximum number of frames to scan
            max_palette_size: Maximum number of colors to keep
            min_alpha: Colors need alpha strictly above this value
            tolerance: Per-channel (R, G, B, A) fuzzy match tolerance
            boundary: (max_width, max_height) before the source is shrunk
        """
        if max_frame_depth < 1:
            raise ValueError("max_frame_depth must be at least 1")
        if max_palette_size < 0:
            raise ValueError("max_palette_size cannot be negative")
        if len(tolerance) != 4:
            raise ValueError("tolerance needs one value per RGBA channel")

        self.max_frame_depth = max_frame_depth
        self.max_palette_size = max_palette_size
        self.min_alpha = min_alpha
        self.tolerance = np.asarray(tolerance, dtype=np.float64)
        self.boundary_x, self.boundary_y = boundary
        self.truncated = False

    def fit_to_boundary(self, source) -> None:
        """
        Shrink the source in place when it exceeds the boundary.

        Height and width are checked one after the other, each resize
        keeping the aspect ratio of the current size.
        """
        if source.height > self.boundary_y:
            logger.info(
                "Resizing input height %d -> %d", source.height, self.boundary_y
            )
            source.resize(height=self.boundary_y)

        if source.width > self.boundary_x:
            logger.info(
                "Resizing input width %d -> %d", source.width, self.boundary_x
            )
            source.resize(width=self.boundary_x)

    def extract(self, source) -> List[Color]:
        """
        Extract the palette of a source.

        Args:
            source: ImageSource (or anything honoring its contract)

        Returns:
            Colors in first-discovery order
        """
        if len(source) == 0:
            raise ValueError("Image source has no frames")
        if source.width <= 0 or source.height <= 0:
            raise ValueError(
                f"Image source has degenerate size {source.width}x{source.height}"
            )

        self.truncated = False
        self.fit_to_boundary(source)

        frame_count = min(len(source), self.max_frame_depth)

        # Frames are visited last to first, so their pixels are decoded
        # once each in that order
        frames = [
            np.ascontiguousarray(source[index].to_array(), dtype=np.uint8)
            for index in range(frame_count - 1, -1, -1)
        ]

        total_pixels = sum(f.shape[0] * f.shape[1] for f in frames)
        capacity = min(total_pixels, self.max_palette_size)
        palette = np.zeros((capacity, 4), dtype=np.int32)
        count = 0

        for pixels in frames:
            count, truncated = _scan_pixels(
                pixels,
                palette,
                count,
                self.min_alpha,
                self.tolerance,
                self.max_palette_size
            )
            if truncated:
                self.truncated = True
                logger.warning("Palette size has been truncated.")
                break

        logger.debug(
            "Extracted %d colors from %d of %d frames",
            count, frame_count, len(source)
        )

        return [Color(*(int(c) for c in row)) for row in palette[:count]]


def extract_palette(source, **kwargs) -> List[Color]:
    """
    Extract a palette with default settings.

    Args:
        source: ImageSource to scan (resized in place if too large)
        **kwargs: Arguments passed to PaletteExtractor

    Returns:
        Colors in first-discovery order
    """
    return PaletteExtractor(**kwargs).extract(source)
