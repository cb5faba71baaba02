"""
Bedrock .mcaddon Exporter

An .mcaddon is a zip holding a behavior pack and a resource pack:

- {ns}_BP/manifest.json
- {ns}_BP/blocks/<block>.json              one per block
- {ns}_RP/manifest.json
- {ns}_RP/blocks.json
- {ns}_RP/textures/terrain_texture.json    texture key -> png path
- {ns}_RP/textures/blocks/<texture>.png
- {ns}_RP/textures/blocks/<texture>.texture_set.json   MER values or layers
- {ns}_RP/textures/blocks/<texture>_mer.png, <texture>_normal.png   optional
- {ns}_RP/texts/<locale>.lang, languages.json

Manifest UUIDs are derived from the namespace, so rebuilding a pack with
the same namespace replaces the previous install instead of duplicating it.
"""

import io
import json
import logging
import uuid
import zipfile
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from ..blocks import BlockDescriptor, DEFAULT_NAMESPACE, validate_namespace
from ..ingestion import Frame, ImageInput, ImageSource
from ..materials import DEFAULT_MATERIAL_ID, get_material

logger = logging.getLogger(__name__)


BLOCK_FORMAT_VERSION = "1.20.30"
TEXTURE_SET_FORMAT_VERSION = "1.16.100"
MIN_ENGINE_VERSION = [1, 20, 30]
PACK_VERSION = [1, 0, 0]
LOCALES = ("en_US", "en_GB")

DEFAULT_TEXTURE_SIZE = 16
PACK_SIZES = (16, 32, 64, 128, 256)


def _pack_uuid(namespace: str, role: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"block_palette/{namespace}/{role}"))


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2)


def load_layer(source: Union[ImageInput, Frame, None]) -> Optional[Frame]:
    """
    Decode an optional texture-set layer (MER or normal map).

    Only the first frame of an animated source is used.
    """
    if source is None or isinstance(source, Frame):
        return source
    return ImageSource.open(source, max_frames=1)[0]


class AddonExporter:
    """
    Serialize block descriptors into an .mcaddon archive.

    Usage:
        exporter = AddonExporter(namespace="my_pack")
        exporter.export(blocks, "my_pack.mcaddon")
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        description: str = "Generated pixel art palette",
        texture_size: int = DEFAULT_TEXTURE_SIZE,
        material=DEFAULT_MATERIAL_ID,
        mer_source: Union[ImageInput, Frame, None] = None,
        normal_source: Union[ImageInput, Frame, None] = None
    ):
        """
        Initialize the exporter.

        Args:
            namespace: Pack namespace (also the folder prefix)
            description: Pack description shown in game
            texture_size: Edge length of solid color textures
            material: Material whose MER values are used without a MER map
            mer_source: Optional metalness/emissive/roughness map (path or bytes)
            normal_source: Optional normal map (path or bytes)
        """
        if texture_size not in PACK_SIZES:
            raise ValueError(
                f"texture_size must be one of {PACK_SIZES}, got {texture_size}"
            )
        self.namespace = validate_namespace(namespace)
        self.description = description
        self.texture_size = texture_size
        self.material = get_material(material)
        self.mer_map = load_layer(mer_source)
        self.normal_map = load_layer(normal_source)

    @property
    def bp_dir(self) -> str:
        return f"{self.namespace}_BP"

    @property
    def rp_dir(self) -> str:
        return f"{self.namespace}_RP"

    def _manifests(self) -> Dict[str, Dict[str, Any]]:
        rp_header = _pack_uuid(self.namespace, "rp")
        bp = {
            "format_version": 2,
            "header": {
                "name": self.namespace,
                "description": self.description,
                "uuid": _pack_uuid(self.namespace, "bp"),
                "version": PACK_VERSION,
                "min_engine_version": MIN_ENGINE_VERSION,
            },
            "modules": [{
                "type": "data",
                "uuid": _pack_uuid(self.namespace, "bp-data"),
                "version": PACK_VERSION,
            }],
            "dependencies": [{"uuid": rp_header, "version": PACK_VERSION}],
        }
        rp = {
            "format_version": 2,
            "header": {
                "name": self.namespace,
                "description": self.description,
                "uuid": rp_header,
                "version": PACK_VERSION,
                "min_engine_version": MIN_ENGINE_VERSION,
            },
            "modules": [{
                "type": "resources",
                "uuid": _pack_uuid(self.namespace, "rp-resources"),
                "version": PACK_VERSION,
            }],
            "capabilities": ["pbr"],
        }
        return {"bp": bp, "rp": rp}

    def _texture(self, block: BlockDescriptor) -> Frame:
        if block.texture is not None:
            return block.texture
        if block.color is None:
            raise ValueError(f"Block {block.identifier} has no texture or color")
        return Frame.solid(block.color, self.texture_size)

    def _block_definition(self, block: BlockDescriptor) -> Dict[str, Any]:
        return {
            "format_version": BLOCK_FORMAT_VERSION,
            "minecraft:block": {
                "description": {
                    "identifier": block.identifier,
                    "menu_category": {"category": "construction"},
                },
                "components": block.components,
            },
        }

    def _layers(self, block: BlockDescriptor, texture: Frame) -> Dict[str, Frame]:
        """Layer maps for one block, resized to match its color texture."""
        layers = {}
        for suffix, layer in (("mer", self.mer_map), ("normal", self.normal_map)):
            if layer is not None:
                layers[f"{block.texture_name}_{suffix}"] = layer.clone().resize(
                    texture.width, texture.height
                )
        return layers

    def _texture_set(self, texture_name: str) -> Dict[str, Any]:
        texture_set: Dict[str, Any] = {"color": texture_name}
        if self.mer_map is not None:
            texture_set["metalness_emissive_roughness"] = f"{texture_name}_mer"
        else:
            texture_set["metalness_emissive_roughness"] = list(self.material.mer)
        if self.normal_map is not None:
            texture_set["normal"] = f"{texture_name}_normal"
        return {
            "format_version": TEXTURE_SET_FORMAT_VERSION,
            "minecraft:texture_set": texture_set,
        }

    def _lang(self, blocks: Sequence[BlockDescriptor], locale: str) -> str:
        lines = [f"pack.name={self.namespace}", f"pack.description={self.description}"]
        for block in blocks:
            name = block.display_names.get(locale) or block.display_names.get("en_US", block.name)
            lines.append(f"tile.{block.identifier}.name={name}")
        return "\n".join(lines) + "\n"

    def write(self, blocks: Sequence[BlockDescriptor], archive: zipfile.ZipFile):
        """
        Write all pack entries into an open zip archive.

        Args:
            blocks: Block descriptors
            archive: Writable ZipFile
        """
        identifiers = [b.identifier for b in blocks]
        if len(set(identifiers)) != len(identifiers):
            raise ValueError("Block identifiers must be unique within a pack")

        manifests = self._manifests()
        archive.writestr(f"{self.bp_dir}/manifest.json", _dump(manifests["bp"]))
        archive.writestr(f"{self.rp_dir}/manifest.json", _dump(manifests["rp"]))

        terrain: Dict[str, Any] = {}
        rp_blocks: Dict[str, Any] = {"format_version": [1, 1, 0]}

        for block in blocks:
            archive.writestr(
                f"{self.bp_dir}/blocks/{block.name}.json",
                _dump(self._block_definition(block))
            )

            texture = self._texture(block)
            texture_path = f"textures/blocks/{block.texture_name}"
            archive.writestr(f"{self.rp_dir}/{texture_path}.png", texture.to_png())
            for layer_name, layer in self._layers(block, texture).items():
                archive.writestr(
                    f"{self.rp_dir}/textures/blocks/{layer_name}.png", layer.to_png()
                )
            archive.writestr(
                f"{self.rp_dir}/{texture_path}.texture_set.json",
                _dump(self._texture_set(block.texture_name))
            )

            terrain[block.texture_name] = {"textures": texture_path}
            rp_blocks[block.identifier] = {"sound": "stone"}

        archive.writestr(
            f"{self.rp_dir}/textures/terrain_texture.json",
            _dump({
                "resource_pack_name": self.namespace,
                "texture_name": "atlas.terrain",
                "padding": 8,
                "num_mip_levels": 4,
                "texture_data": terrain,
            })
        )
        archive.writestr(f"{self.rp_dir}/blocks.json", _dump(rp_blocks))

        for locale in LOCALES:
            archive.writestr(f"{self.rp_dir}/texts/{locale}.lang", self._lang(blocks, locale))
        archive.writestr(f"{self.rp_dir}/texts/languages.json", _dump(list(LOCALES)))

        logger.info("Wrote %d blocks into pack '%s'", len(blocks), self.namespace)

    def export_bytes(self, blocks: Sequence[BlockDescriptor]) -> bytes:
        """
        Build the archive in memory.

        Returns:
            The .mcaddon zip as bytes
        """
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            self.write(blocks, archive)
        return buffer.getvalue()

    def export(self, blocks: Sequence[BlockDescriptor], output_path: Union[str, Path]) -> Path:
        """
        Write the archive to disk.

        Args:
            blocks: Block descriptors
            output_path: Output file path (.mcaddon)

        Returns:
            The written path
        """
        output_path = Path(output_path)
        with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as archive:
            self.write(blocks, archive)
        return output_path

