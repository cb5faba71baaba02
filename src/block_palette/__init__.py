"""
Block Palette Generator
=======================

Converts still or animated images into Bedrock block palettes.

This package turns an image into discrete block descriptors and packs them
into a downloadable add-on (.mcaddon).

Key Features:
- Fuzzy, order-preserving palette extraction with an alpha gate
- Nearest-neighbor shrinking of large sources to 256x256
- Animated sources: up to 10 frames scanned for colors
- Frame slicing into fixed-size tiles with stable (x, y, z) positions
- Numba JIT compiled palette scan

Example Usage:
    from block_palette import BlockPaletteGenerator

    generator = BlockPaletteGenerator(namespace="my_pack")
    generator.load_image("sprite.gif")
    generator.extract_palette()
    generator.slice(16)
    generator.export_addon("my_pack.mcaddon")
"""

__version__ = "1.0.0"
__author__ = "Block Palette Team"

from .color import Color, color_to_rgba, rgba_match
from .ingestion import Frame, ImageSource
from .palette import PaletteExtractor, extract_palette
from .slicer import Slice, Slicer, slice_frames
from .materials import Material, MaterialKind, get_material
from .blocks import BlockDescriptor, BlockModelBuilder
from .exporters import AddonExporter
from .generator import BlockPaletteGenerator

__all__ = [
    "BlockPaletteGenerator",
    "Color",
    "color_to_rgba",
    "rgba_match",
    "Frame",
    "ImageSource",
    "PaletteExtractor",
    "extract_palette",
    "Slice",
    "Slicer",
    "slice_frames",
    "Material",
    "MaterialKind",
    "get_material",
    "BlockDescriptor",
    "BlockModelBuilder",
    "AddonExporter",
]
