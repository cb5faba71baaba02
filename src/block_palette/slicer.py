"""
Frame Slicing Module

Cuts every frame of a source into a grid of tiles. Each tile gets a
logical (x, y, z) position: x counts columns, y counts rows within the
column, and z is the frame index.

Scan order: frame, then column (x), then row (y). Tiles on the right and
bottom edges are cropped to the pixels that remain.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .ingestion import Frame

logger = logging.getLogger(__name__)


DEFAULT_SLICE_SIZE = 16

Position = Tuple[int, int, int]


def slice_names(x: int, y: int, z: int) -> Dict[str, str]:
    """Localized display names for a tile position."""
    return {
        "en_US": f"X{x} Y{y} Z{z}",
        "en_GB": f"X{x} Y{y} Zed{z}",
    }


@dataclass(frozen=True)
class Slice:
    """
    A cropped sub-image tagged with its grid position.

    Attributes:
        image: Copied pixel region (at most tile_size x tile_size)
        position: (tile_x, tile_y, frame_index)
        names: Locale -> display name
    """

    image: Frame
    position: Position
    names: Dict[str, str] = field(default_factory=dict)

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    @property
    def z(self) -> int:
        return self.position[2]


class Slicer:
    """
    Tiles frames into fixed-size slices.

    Usage:
        slicer = Slicer(tile_size=16)
        slices = slicer.slice(source)
    """

    def __init__(self, tile_size: int = DEFAULT_SLICE_SIZE):
        """
        Initialize the slicer.

        Args:
            tile_size: Edge length of a tile in pixels (must be > 0)
        """
        if tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {tile_size}")
        self.tile_size = tile_size

    def slice(self, source) -> List[Slice]:
        """
        Slice every frame of a source.

        Args:
            source: ImageSource (or any sequence of frames)

        Returns:
            Slices in frame, column, row order
        """
        frames = list(source)
        if not frames:
            raise ValueError("Image source has no frames")

        for index, frame in enumerate(frames):
            if frame.width <= 0 or frame.height <= 0:
                raise ValueError(
                    f"Frame {index} has degenerate size {frame.width}x{frame.height}"
                )

        slices: List[Slice] = []
        size = self.tile_size

        for z, frame in enumerate(frames):
            tile_x = 0
            for px in range(0, frame.width, size):
                tile_y = 0
                for py in range(0, frame.height, size):
                    texture = frame.crop(px, py, size, size)
                    slices.append(
                        Slice(texture, (tile_x, tile_y, z), slice_names(tile_x, tile_y, z))
                    )
                    tile_y += 1
                tile_x += 1

        logger.debug(
            "Sliced %d frames into %d tiles of %dpx", len(frames), len(slices), size
        )

        return slices


def slice_frames(source, tile_size: int = DEFAULT_SLICE_SIZE) -> List[Slice]:
    """Slice a source with a one-off Slicer."""
    return Slicer(tile_size).slice(source)
