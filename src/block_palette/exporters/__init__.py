"""
Export modules for generated block packages.

Supported formats:
- Bedrock add-on (.mcaddon) - behavior pack + resource pack in one zip
"""

from .addon_exporter import AddonExporter, DEFAULT_TEXTURE_SIZE, PACK_SIZES

__all__ = ["AddonExporter", "DEFAULT_TEXTURE_SIZE", "PACK_SIZES"]
