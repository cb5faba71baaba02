"""
Command-Line Interface for Block Palette

Usage:
    blockpal input.png -o palette.mcaddon
    blockpal input.gif --namespace my_pack --size 32 -o my_pack.mcaddon
    blockpal mural.png --slices 16 --no-palette -o mural.mcaddon

"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import __version__
from .blocks import DEFAULT_NAMESPACE
from .exporters import DEFAULT_TEXTURE_SIZE, PACK_SIZES
from .generator import BlockPaletteGenerator
from .materials import MaterialKind
from .palette import MAX_FRAME_DEPTH
from .slicer import DEFAULT_SLICE_SIZE


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="blockpal",
        description="Block Palette - Convert images into Bedrock block palettes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  blockpal sprite.png -o palette.mcaddon
      One solid block per color of sprite.png

  blockpal anim.gif --namespace anim --size 32 -o anim.mcaddon
      Palette of the first {MAX_FRAME_DEPTH} frames, 32px color textures

  blockpal mural.png --slices {DEFAULT_SLICE_SIZE} --no-palette -o mural.mcaddon
      Cut mural.png into {DEFAULT_SLICE_SIZE}x{DEFAULT_SLICE_SIZE} textured blocks

  blockpal ore.png --mer ore_mer.png --normal ore_normal.png -o ore.mcaddon
      Add MER and normal map layers to every texture set
        """
    )

    parser.add_argument(
        "input",
        help="Input image file (PNG, GIF, ...)"
    )

    parser.add_argument(
        "-o", "--output",
        help="Output .mcaddon path (default: <namespace>.mcaddon next to input)"
    )

    parser.add_argument(
        "-n", "--namespace",
        default=DEFAULT_NAMESPACE,
        help=f"Block identifier namespace (default: {DEFAULT_NAMESPACE})"
    )

    parser.add_argument(
        "--description",
        default="Generated pixel art palette",
        help="Pack description"
    )

    parser.add_argument(
        "-s", "--size",
        type=int,
        choices=PACK_SIZES,
        default=DEFAULT_TEXTURE_SIZE,
        help=f"Color texture size (default: {DEFAULT_TEXTURE_SIZE})"
    )

    parser.add_argument(
        "-m", "--material",
        choices=[k.value for k in MaterialKind],
        default=MaterialKind.DEFAULT.value,
        help="Block material (default: default)"
    )

    parser.add_argument(
        "--slices",
        type=int,
        metavar="TILE_SIZE",
        help="Also cut the image into textured tiles of this size"
    )

    parser.add_argument(
        "--mer",
        metavar="IMAGE",
        help="Metalness/emissive/roughness map for every texture set"
    )

    parser.add_argument(
        "--normal",
        metavar="IMAGE",
        help="Normal map for every texture set"
    )

    parser.add_argument(
        "--no-palette",
        action="store_true",
        help="Skip palette extraction (use with --slices)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def process_single(args) -> int:
    """Process a single image file."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    if args.no_palette and args.slices is None:
        print("Error: --no-palette requires --slices", file=sys.stderr)
        return 1

    for layer in (args.mer, args.normal):
        if layer is not None and not Path(layer).exists():
            print(f"Error: Layer file not found: {layer}", file=sys.stderr)
            return 1

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = input_path.with_name(f"{args.namespace}.mcaddon")

    start_time = time.time()

    try:
        generator = BlockPaletteGenerator(
            namespace=args.namespace,
            material=args.material,
            texture_size=args.size,
            description=args.description,
            mer_source=args.mer,
            normal_source=args.normal
        )

        if args.verbose:
            print(f"Loading: {input_path}")

        generator.load_image(input_path)

        if not args.no_palette:
            generator.extract_palette()
            if args.verbose:
                print(f"Palette colors: {len(generator.palette)}")
                if generator.palette_truncated:
                    print("Palette was truncated")

        if args.slices is not None:
            generator.slice(args.slices)
            if args.verbose:
                print(f"Slices: {len(generator.slices)}")

        generator.export_addon(output_path)

        elapsed = time.time() - start_time
        print(f"Exported: {output_path}")
        if args.verbose:
            print(f"\nCompleted in {elapsed:.2f}s")

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    return process_single(args)


if __name__ == "__main__":
    sys.exit(main())
