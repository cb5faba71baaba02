"""
Block Descriptor Module

Maps palette colors and frame slices to the block descriptors consumed by
the package exporter. The mapping is pure: no I/O and no shared state.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from .color import Color
from .ingestion import Frame
from .materials import DEFAULT_MATERIAL_ID, Material, MaterialKind, get_material
from .slicer import Slice


DEFAULT_NAMESPACE = "pixel_palette"

_NAMESPACE_PATTERN = re.compile(r"^[a-z0-9_]+$")


@dataclass(frozen=True)
class BlockDescriptor:
    """
    One block of the generated package.

    Attributes:
        identifier: Namespaced block id ("namespace:name")
        display_names: Locale -> display name
        components: Block component bag
        texture_name: Key of the block texture in the resource pack
        texture: Pixels for slice blocks; None for solid color blocks
        source: The Color or Slice this block was built from
    """

    identifier: str
    display_names: Dict[str, str]
    components: Dict[str, Any]
    texture_name: str
    texture: Optional[Frame] = None
    source: Union[Color, Slice, None] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        """Identifier without its namespace."""
        return self.identifier.split(":", 1)[-1]

    @property
    def color(self) -> Optional[Color]:
        return self.source if isinstance(self.source, Color) else None


def validate_namespace(namespace: str) -> str:
    """
    Check that a namespace is usable in block identifiers.

    Raises:
        ValueError: If the namespace has characters outside [a-z0-9_]
    """
    if not _NAMESPACE_PATTERN.match(namespace or ""):
        raise ValueError(
            f"Invalid namespace '{namespace}': use lowercase letters, digits and '_'"
        )
    return namespace


class BlockModelBuilder:
    """
    Builds block descriptors from colors and slices.

    Usage:
        builder = BlockModelBuilder("my_pack", "rough_metal")
        blocks = builder.build(colors=palette, slices=slices)
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        material: Union[str, MaterialKind, Material] = DEFAULT_MATERIAL_ID
    ):
        self.namespace = validate_namespace(namespace)
        self.material = get_material(material)

    def from_color(self, color: Color) -> BlockDescriptor:
        """Build the solid block for one palette color."""
        color = Color(*color)
        name = f"color_{color.hex}"
        texture_name = f"{self.namespace}_{name}"
        label = color.hex.upper()

        components = self.material.components(texture_name)
        components["minecraft:map_color"] = f"#{label[:6]}"

        return BlockDescriptor(
            identifier=f"{self.namespace}:{name}",
            display_names={
                "en_US": f"Color #{label}",
                "en_GB": f"Colour #{label}",
            },
            components=components,
            texture_name=texture_name,
            texture=None,
            source=color,
        )

    def from_slice(self, tile: Slice) -> BlockDescriptor:
        """Build the textured block for one slice."""
        x, y, z = tile.position
        name = f"slice_{x}_{y}_{z}"
        texture_name = f"{self.namespace}_{name}"

        return BlockDescriptor(
            identifier=f"{self.namespace}:{name}",
            display_names=dict(tile.names),
            components=self.material.components(texture_name),
            texture_name=texture_name,
            texture=tile.image.clone(),
            source=tile,
        )

    def build(
        self,
        colors: Iterable[Color] = (),
        slices: Iterable[Slice] = ()
    ) -> List[BlockDescriptor]:
        """
        Build descriptors for colors, then slices.

        Args:
            colors: Palette colors
            slices: Frame slices

        Returns:
            Descriptors in input order
        """
        blocks = [self.from_color(c) for c in colors]
        blocks.extend(self.from_slice(s) for s in slices)
        return blocks
