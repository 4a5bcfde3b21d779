"""
Command-Line Interface for Heightmap Terrain

Usage:
    heightmap-terrain heightmap.png
    heightmap-terrain heightmap.png -r 512 -s 25 --stats
    heightmap-terrain --default -r 128
    heightmap-terrain --grid 10

"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional
import time
import numpy as np

from . import __version__
from .biome import BiomeClassifier
from .config import (
    DEFAULT_HEIGHT_SCALE,
    DEFAULT_RESOLUTION,
    MAX_HEIGHT_SCALE,
    MAX_RESOLUTION,
    MIN_HEIGHT_SCALE,
    MIN_RESOLUTION,
    TerrainConfig,
)
from .generator import TerrainGenerator
from .ingestion import RESAMPLING_FILTERS
from .mesh import GeometryBuffer
from .procedural import generate_regular_grid


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="heightmap-terrain",
        description="Heightmap Terrain - Convert 2D images to 3D terrain meshes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  heightmap-terrain heightmap.png
      Build a {DEFAULT_RESOLUTION}x{DEFAULT_RESOLUTION} terrain and print a summary

  heightmap-terrain photo.jpg -r 512 -s 25 --stats
      Higher resolution, taller relief, per-biome vertex counts

  heightmap-terrain --default
      Build the placeholder hills terrain

  heightmap-terrain --grid 10
      Build a flat checkerboard test grid

Typical ranges: resolution {MIN_RESOLUTION}-{MAX_RESOLUTION}, height scale {MIN_HEIGHT_SCALE:g}-{MAX_HEIGHT_SCALE:g}
        """
    )

    # Input
    parser.add_argument(
        "input",
        nargs="?",
        help="Input heightmap image"
    )

    parser.add_argument(
        "--default",
        action="store_true",
        help="Generate the placeholder hills terrain instead of reading an image"
    )

    parser.add_argument(
        "--grid",
        type=int,
        metavar="SIZE",
        help="Generate a flat SIZE x SIZE checkerboard test grid"
    )

    # Pipeline settings
    parser.add_argument(
        "-r", "--resolution",
        type=int,
        default=DEFAULT_RESOLUTION,
        help=f"Grid vertices per side (default: {DEFAULT_RESOLUTION})"
    )

    parser.add_argument(
        "-s", "--height-scale",
        type=float,
        default=DEFAULT_HEIGHT_SCALE,
        help=f"Vertical scale factor (default: {DEFAULT_HEIGHT_SCALE:g})"
    )

    parser.add_argument(
        "--resample",
        choices=sorted(RESAMPLING_FILTERS),
        default="bilinear",
        help="Resampling filter for the source image (default: bilinear)"
    )

    parser.add_argument(
        "--config",
        help="JSON file with pipeline constants"
    )

    parser.add_argument(
        "--linear-colors",
        action="store_true",
        help="Emit linear instead of sRGB vertex colors"
    )

    # Misc
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output with pipeline logging"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print per-biome vertex counts and height range"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def load_config(args) -> TerrainConfig:
    """Build the pipeline config from --config and flags."""
    if args.config:
        with open(args.config) as f:
            config = TerrainConfig.from_dict(json.load(f))
    else:
        config = TerrainConfig()

    if args.linear_colors:
        config = config.with_overrides(linear_colors=True)
    return config


def print_geometry(geometry: GeometryBuffer):
    """Print vertex/face counts and the height range."""
    heights = geometry.heights()
    print("Terrain Geometry:")
    print(f"  Vertices: {geometry.vertex_count}")
    print(f"  Faces: {geometry.triangle_count}")
    print(f"  Height range: {heights.min():.3f} .. {heights.max():.3f}")


def print_biomes(field: np.ndarray, config: TerrainConfig):
    """Print how many vertices fall into each biome band."""
    classifier = BiomeClassifier(config.biome_bands)
    counts = np.bincount(
        classifier.classify_array(field).ravel(), minlength=len(classifier.bands)
    )
    total = counts.sum()

    print("\nBiome Distribution:")
    for band, count in zip(classifier.bands, counts):
        print(f"  {band.biome.value:<11} {count:>8} ({100.0 * count / total:.1f}%)")


def process_image(args, config: TerrainConfig) -> int:
    """Process a single heightmap image."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    generator = TerrainGenerator(
        resolution=args.resolution,
        height_scale=args.height_scale,
        config=config,
        resample=args.resample
    )
    generator.load_image(input_path).generate()

    stats = generator.statistics
    info = generator.preview()
    print(f"Image: {input_path} {info['image_size']}")
    print(f"  Contrast: {stats.contrast:.3f}")
    print(f"  Avg brightness: {stats.normalized_mean:.3f}")
    print(f"  Smoothed: {'yes' if info['smoothed'] else 'no'}")
    print()
    print_geometry(generator.geometry)

    if args.stats:
        print_biomes(generator.heightfield, config)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    if not args.input and not args.default and args.grid is None:
        print("Error: No input file specified", file=sys.stderr)
        return 1

    start_time = time.time()

    try:
        config = load_config(args)

        if args.grid is not None:
            print_geometry(generate_regular_grid(args.grid))
        elif args.default:
            generator = TerrainGenerator(
                resolution=args.resolution,
                height_scale=args.height_scale,
                config=config
            )
            print_geometry(generator.generate_default().geometry)
        else:
            status = process_image(args, config)
            if status:
                return status

        if args.verbose:
            print(f"\nCompleted in {time.time() - start_time:.2f}s")

        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
