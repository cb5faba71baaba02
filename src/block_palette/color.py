"""
Color Module

Handles:
- The immutable RGBA Color type used throughout the pipeline
- Packing and unpacking of 0xRRGGBBAA color values
- Per-channel "fuzzy" color equality used for palette de-duplication

Fuzzy matching is an independent tolerance band per channel, not a
Euclidean distance: two colors match only if every channel is within
its own tolerance.
"""

from typing import NamedTuple, Sequence, Tuple


# Minimum pixel alpha a color needs to exceed to enter a palette
MIN_ALPHA = round(255 * 0.5)

# RGB permutations plus the acceptable alpha range
MAX_PALETTE_SIZE = int(256 ** 3 + MIN_ALPHA)

# Per-channel tolerance for (R, G, B, A)
FUZZ_TOLERANCE: Tuple[float, float, float, float] = (
    255 / 15,
    255 / 15,
    255 / 15,
    255 / 50,
)


class Color(NamedTuple):
    """An RGBA color, each channel 0-255."""

    r: int
    g: int
    b: int
    a: int = 255

    @property
    def hex(self) -> str:
        """Lowercase rrggbbaa string."""
        return f"{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


def color_to_rgba(value: int) -> Color:
    """
    Decode a packed 0xRRGGBBAA integer into a Color.

    Args:
        value: Packed 32-bit color

    Returns:
        Color tuple
    """
    return Color(
        (value >> 24) & 0xFF,
        (value >> 16) & 0xFF,
        (value >> 8) & 0xFF,
        value & 0xFF,
    )


def rgba_to_color(color: Sequence[int]) -> int:
    """Pack an (r, g, b, a) sequence into a 0xRRGGBBAA integer."""
    r, g, b, a = color
    return ((r & 0xFF) << 24) | ((g & 0xFF) << 16) | ((b & 0xFF) << 8) | (a & 0xFF)


def rgba_match(
    color1: Sequence[int],
    color2: Sequence[int],
    tolerance: Sequence[float] = FUZZ_TOLERANCE
) -> bool:
    """
    Check whether two colors are equal within a per-channel tolerance.

    Args:
        color1: First RGBA color
        color2: Second RGBA color
        tolerance: Maximum absolute difference per channel

    Returns:
        True if every channel is within its tolerance
    """
    return all(
        abs(int(c1) - int(c2)) <= tol
        for c1, c2, tol in zip(color1, color2, tolerance)
    )
