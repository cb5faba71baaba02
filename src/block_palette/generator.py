"""
Main BlockPaletteGenerator Class

This is the primary interface for the block palette pipeline.
It orchestrates:
1. Image loading (still or animated)
2. Palette extraction
3. Frame slicing
4. Block descriptor building
5. Export to a Bedrock add-on

Example Usage:
    generator = BlockPaletteGenerator(namespace="my_pack")
    generator.load_image("sprite.gif")
    generator.extract_palette()
    generator.slice(16)
    generator.export_addon("my_pack.mcaddon")
"""

from pathlib import Path
from typing import List, Optional, Union
import numpy as np

from .blocks import BlockDescriptor, BlockModelBuilder, DEFAULT_NAMESPACE
from .color import Color
from .exporters import AddonExporter, DEFAULT_TEXTURE_SIZE
from .ingestion import ImageInput, ImageSource
from .materials import DEFAULT_MATERIAL_ID
from .palette import MAX_FRAME_DEPTH, PaletteExtractor
from .slicer import Slice, Slicer


class BlockPaletteGenerator:
    """
    High-level interface for converting an image into a block pack.

    Attributes:
        namespace: Identifier namespace of generated blocks
        material: Material identifier applied to every block
        texture_size: Edge length of solid color textures
        description: Pack description
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        material: str = DEFAULT_MATERIAL_ID,
        texture_size: int = DEFAULT_TEXTURE_SIZE,
        description: str = "Generated pixel art palette",
        max_frame_depth: int = MAX_FRAME_DEPTH,
        mer_source: Optional[ImageInput] = None,
        normal_source: Optional[ImageInput] = None
    ):
        """
        Initialize the BlockPaletteGenerator.

        Args:
            namespace: Identifier namespace ([a-z0-9_]+)
            material: Material identifier ("default", "rough_metal")
            texture_size: Solid color texture size (16, 32, 64, 128, 256)
            description: Pack description shown in game
            max_frame_depth: Maximum animation frames scanned for colors
            mer_source: Optional MER map written into every texture set
            normal_source: Optional normal map written into every texture set
        """
        self.namespace = namespace
        self.material = material
        self.texture_size = texture_size
        self.description = description
        self.max_frame_depth = max_frame_depth

        self._builder = BlockModelBuilder(namespace, material)
        self._exporter = AddonExporter(
            namespace,
            description,
            texture_size,
            material,
            mer_source=mer_source,
            normal_source=normal_source
        )
        self._source: Optional[ImageSource] = None
        self._palette: List[Color] = []
        self._slices: List[Slice] = []
        self._palette_truncated = False

    def load_image(self, source: ImageInput) -> "BlockPaletteGenerator":
        """
        Load a still or animated image.

        Args:
            source: File path or encoded image bytes

        Returns:
            self for method chaining
        """
        return self.load_source(ImageSource.open(source))

    def load_array(self, rgba_array: np.ndarray) -> "BlockPaletteGenerator":
        """
        Load image data from an RGBA array of shape (H, W, 4).

        Returns:
            self for method chaining
        """
        return self.load_source(ImageSource.from_array(rgba_array))

    def load_source(self, source: ImageSource) -> "BlockPaletteGenerator":
        """Use an already decoded source. Previous results are discarded."""
        self._source = source
        self._palette = []
        self._slices = []
        self._palette_truncated = False
        return self

    def _require_source(self) -> ImageSource:
        if self._source is None:
            raise RuntimeError("No image loaded. Call load_image() first.")
        return self._source

    def extract_palette(self) -> "BlockPaletteGenerator":
        """
        Extract the color palette.

        Runs on a clone, so the loaded image keeps its size for slicing.

        Returns:
            self for method chaining
        """
        source = self._require_source().clone()
        extractor = PaletteExtractor(max_frame_depth=self.max_frame_depth)
        self._palette = extractor.extract(source)
        self._palette_truncated = extractor.truncated
        return self

    def slice(self, tile_size: int) -> "BlockPaletteGenerator":
        """
        Cut every frame into tile_size x tile_size slices.

        Returns:
            self for method chaining
        """
        self._slices = Slicer(tile_size).slice(self._require_source())
        return self

    def build_blocks(self) -> List[BlockDescriptor]:
        """Build descriptors for the current palette and slices."""
        return self._builder.build(colors=self._palette, slices=self._slices)

    def export_addon(self, output_path: Union[str, Path]) -> Path:
        """
        Export the current blocks to an .mcaddon file.

        Args:
            output_path: Output file path

        Returns:
            The written path
        """
        blocks = self._check_blocks()
        return self._exporter.export(blocks, output_path)

    def export_bytes(self) -> bytes:
        """Export the current blocks as in-memory .mcaddon bytes."""
        return self._exporter.export_bytes(self._check_blocks())

    def _check_blocks(self) -> List[BlockDescriptor]:
        blocks = self.build_blocks()
        if not blocks:
            raise RuntimeError(
                "Nothing to export. Call extract_palette() or slice() first."
            )
        return blocks

    @property
    def source(self) -> Optional[ImageSource]:
        return self._source

    @property
    def palette(self) -> List[Color]:
        """Get the extracted palette."""
        return list(self._palette)

    @property
    def slices(self) -> List[Slice]:
        """Get the extracted slices."""
        return list(self._slices)

    @property
    def palette_truncated(self) -> bool:
        return self._palette_truncated

    def preview(self) -> dict:
        """
        Get a preview of the current state.

        Returns:
            Dictionary with current state information
        """
        info = {
            "image_loaded": self._source is not None,
            "color_count": len(self._palette),
            "slice_count": len(self._slices),
            "palette_truncated": self._palette_truncated,
        }

        if self._source is not None:
            info["image_size"] = self._source.size
            info["frame_count"] = len(self._source)
            info["animated"] = self._source.is_animated

        return info
