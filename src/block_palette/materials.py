"""
Block material variants.

The set of materials is closed, so variants are rows in a table keyed by
MaterialKind instead of subclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


class MaterialKind(Enum):
    """Available block materials."""
    DEFAULT = "default"
    ROUGH_METAL = "rough_metal"


@dataclass(frozen=True)
class Material:
    """
    Rendering properties shared by every block of one material.

    emissive/metalness/roughness are 0-255 channel values for the MER
    texture set.
    """

    identifier: str
    display_names: Dict[str, str]
    emissive: int = 0
    metalness: int = 0
    roughness: int = 255
    render_method: str = "opaque"

    def material_instance(self, texture_name: str) -> Dict[str, Any]:
        """Build the material_instances component value for one texture."""
        return {
            "*": {
                "texture": texture_name,
                "render_method": self.render_method,
            }
        }

    def components(self, texture_name: str) -> Dict[str, Any]:
        """Component bag for a block of this material."""
        return {
            "minecraft:material_instances": self.material_instance(texture_name),
        }

    @property
    def mer(self):
        """(metalness, emissive, roughness) triple."""
        return (self.metalness, self.emissive, self.roughness)


MATERIALS: Dict[MaterialKind, Material] = {
    MaterialKind.DEFAULT: Material(
        identifier="default",
        display_names={"en_US": "Default", "en_GB": "Default"},
    ),
    MaterialKind.ROUGH_METAL: Material(
        identifier="rough_metal",
        display_names={"en_US": "Rough Metallic", "en_GB": "Rough Metallic"},
        metalness=round(255 * 0.9),
        roughness=round(255 * 0.75),
    ),
}


DEFAULT_MATERIAL_ID = MaterialKind.DEFAULT.value


def get_material(kind: Union[str, MaterialKind, Material]) -> Material:
    """
    Look up a material by kind or identifier.

    Raises:
        ValueError: If the identifier is unknown
    """
    if isinstance(kind, Material):
        return kind
    if isinstance(kind, str):
        try:
            kind = MaterialKind(kind)
        except ValueError:
            known = ", ".join(k.value for k in MaterialKind)
            raise ValueError(f"Unknown material '{kind}' (expected one of: {known})") from None
    return MATERIALS[kind]
