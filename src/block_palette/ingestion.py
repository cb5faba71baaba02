"""
Image Ingestion Module

This module handles:
- Decoding still and animated images into RGBA frames
- Strict nearest-neighbor resizing (no color blurring)
- Cropping and copying sub-images for tiling
- Pixel iteration with packed 0xRRGGBBAA color values
"""

import io
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union
import numpy as np
from PIL import Image, ImageSequence

from .color import Color, color_to_rgba, rgba_to_color


ImageInput = Union[str, Path, bytes, bytearray]


class Frame:
    """
    A single RGBA raster.

    Wraps a Pillow image so the rest of the pipeline never has to care
    about source modes (P, LA, RGB...).
    """

    def __init__(self, image: Image.Image):
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        self._image = image

    @classmethod
    def from_array(cls, rgba_array: np.ndarray) -> "Frame":
        """
        Create a frame from an RGBA array of shape (H, W, 4).
        """
        if rgba_array.ndim != 3 or rgba_array.shape[2] != 4:
            raise ValueError("Color array must have shape (H, W, 4)")
        return cls(Image.fromarray(rgba_array.astype(np.uint8)))

    @classmethod
    def solid(cls, color: Color, size: int) -> "Frame":
        """Create a size x size frame filled with one color."""
        return cls(Image.new("RGBA", (size, size), tuple(color)))

    @property
    def image(self) -> Image.Image:
        """Get the underlying Pillow image."""
        return self._image

    @property
    def size(self) -> Tuple[int, int]:
        """Get frame size as (width, height)."""
        return self._image.size

    @property
    def width(self) -> int:
        return self._image.size[0]

    @property
    def height(self) -> int:
        return self._image.size[1]

    def clone(self) -> "Frame":
        return Frame(self._image.copy())

    def resize(self, width: int, height: int) -> "Frame":
        """
        Resize in place using NEAREST NEIGHBOR interpolation.

        Returns:
            self for method chaining
        """
        self._image = self._image.resize((width, height), Image.Resampling.NEAREST)
        return self

    def crop(self, x: int, y: int, width: int, height: int) -> "Frame":
        """
        Copy a rectangular region into a new frame.

        The region is clipped to the frame bounds, so tiles running past
        the right or bottom edge come back smaller instead of padded.
        """
        right = min(x + width, self.width)
        bottom = min(y + height, self.height)
        if x < 0 or y < 0 or right <= x or bottom <= y:
            raise ValueError(
                f"Crop region ({x}, {y}, {width}, {height}) is outside "
                f"frame of size {self.size}"
            )
        return Frame(self._image.crop((x, y, right, bottom)))

    def to_array(self) -> np.ndarray:
        """Get the RGBA pixels as a uint8 array of shape (H, W, 4)."""
        return np.array(self._image, dtype=np.uint8)

    def iterate_with_colors(self) -> Iterator[Tuple[int, int, int]]:
        """
        Iterate over every pixel in row-major order.

        Yields:
            (x, y, value) where value is the packed 0xRRGGBBAA color
        """
        pixels = self.to_array()
        height, width = pixels.shape[:2]
        for y in range(height):
            for x in range(width):
                yield x, y, rgba_to_color(Color(*(int(c) for c in pixels[y, x])))

    def get_pixel(self, x: int, y: int) -> Color:
        """Get the RGBA color at (x, y)."""
        return Color(*self._image.getpixel((x, y)))

    def to_png(self) -> bytes:
        """Encode the frame as PNG bytes."""
        buffer = io.BytesIO()
        self._image.save(buffer, format="PNG")
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"Frame(width={self.width}, height={self.height})"


class ImageSource:
    """
    Ordered sequence of frames decoded from a still or animated image.

    A still image is a one-frame source. Dimension queries refer to the
    first frame; resizing applies to every frame in place.
    """

    def __init__(self, frames: Sequence[Frame], animated: Optional[bool] = None):
        if not frames:
            raise ValueError("Image source must contain at least one frame")
        self._frames: List[Frame] = list(frames)
        self._animated = len(self._frames) > 1 if animated is None else animated

    @classmethod
    def open(cls, source: ImageInput, max_frames: Optional[int] = None) -> "ImageSource":
        """
        Decode an image from a path or raw bytes.

        Animated formats (GIF, APNG, WebP) yield one frame per animation
        frame in playback order. Decode errors from Pillow propagate
        unchanged.

        Args:
            source: File path or encoded image bytes
            max_frames: Optional cap on decoded frames

        Returns:
            New ImageSource
        """
        if isinstance(source, (bytes, bytearray)):
            img = Image.open(io.BytesIO(bytes(source)))
        else:
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"Image not found: {path}")
            img = Image.open(path)

        with img:
            animated = bool(getattr(img, "is_animated", False))
            frames = []
            for frame in ImageSequence.Iterator(img):
                if max_frames is not None and len(frames) >= max_frames:
                    break
                frames.append(Frame(frame.convert("RGBA")))

        return cls(frames, animated=animated)

    @classmethod
    def from_array(cls, rgba_array: np.ndarray) -> "ImageSource":
        """Create a still source from an RGBA array of shape (H, W, 4)."""
        return cls([Frame.from_array(rgba_array)], animated=False)

    @classmethod
    def from_arrays(cls, rgba_arrays: Sequence[np.ndarray]) -> "ImageSource":
        """Create an animated source, one RGBA array per frame."""
        return cls([Frame.from_array(a) for a in rgba_arrays], animated=True)

    @property
    def frames(self) -> List[Frame]:
        return self._frames

    @property
    def is_animated(self) -> bool:
        return self._animated

    @property
    def size(self) -> Tuple[int, int]:
        """Get size of the first frame as (width, height)."""
        return self._frames[0].size

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    def resize(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> "ImageSource":
        """
        Resize every frame in place using NEAREST NEIGHBOR interpolation.

        A missing dimension is derived from the other one to keep the
        aspect ratio of the first frame.

        Args:
            width: Target width (None = automatic)
            height: Target height (None = automatic)

        Returns:
            self for method chaining
        """
        orig_w, orig_h = self.size

        if width is None and height is None:
            return self
        if width is None:
            width = int(orig_w * height / orig_h)
        elif height is None:
            height = int(orig_h * width / orig_w)

        width = max(1, width)
        height = max(1, height)

        for frame in self._frames:
            frame.resize(width, height)

        return self

    def clone(self) -> "ImageSource":
        """Deep copy of all frames."""
        return ImageSource([f.clone() for f in self._frames], animated=self._animated)

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, index: int) -> Frame:
        return self._frames[index]

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __repr__(self) -> str:
        return (
            f"ImageSource(frames={len(self._frames)}, width={self.width}, "
            f"height={self.height}, animated={self._animated})"
        )


__all__ = ["Frame", "ImageSource", "ImageInput", "color_to_rgba"]
