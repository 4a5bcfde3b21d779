#!/usr/bin/env python3
"""
Heightmap Terrain Demo Script

This script demonstrates the full terrain pipeline by:
1. Creating synthetic test heightmaps (no external images needed)
2. Running the heightmap-to-mesh pipeline on each
3. Printing image analysis, geometry and biome statistics
4. Timing the pipeline at several resolutions

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import numpy as np
import time

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from heightmap_terrain import TerrainGenerator, BiomeClassifier, synthesize


def create_test_heightmap_island(size: int = 128) -> np.ndarray:
    """
    Create a smooth radial island: bright peak, dark sea.

    Returns:
        RGB array of shape (size, size, 3)
    """
    rows, cols = np.indices((size, size))
    center = (size - 1) / 2
    dist = np.sqrt((rows - center) ** 2 + (cols - center) ** 2) / center

    height = np.clip(1.0 - dist, 0.0, 1.0) ** 1.5
    values = (60 + height * 160).astype(np.uint8)
    return np.stack([values] * 3, axis=-1)


def create_test_heightmap_terraces(size: int = 128) -> np.ndarray:
    """
    Create a posterized image with four hard brightness steps.

    High contrast, so the pipeline smooths it.

    Returns:
        RGB array of shape (size, size, 3)
    """
    cols = np.tile(np.arange(size), (size, 1))
    steps = (cols * 4 // size) * 85
    values = steps.astype(np.uint8)
    return np.stack([values] * 3, axis=-1)


def create_test_heightmap_photo(size: int = 128) -> np.ndarray:
    """
    Create a colorful pseudo-photo of overlapping color blobs.

    Returns:
        RGB array of shape (size, size, 3)
    """
    rng = np.random.default_rng(2024)
    rows, cols = np.indices((size, size))
    image = np.zeros((size, size, 3), dtype=np.float64)

    for _ in range(12):
        cy, cx = rng.uniform(0, size, 2)
        radius = rng.uniform(size / 10, size / 3)
        color = rng.uniform(0, 255, 3)
        weight = np.exp(-((rows - cy) ** 2 + (cols - cx) ** 2) / (2 * radius ** 2))
        image += weight[..., None] * color

    return np.clip(image, 0, 255).astype(np.uint8)


def print_biome_distribution(field: np.ndarray):
    """Print vertex share per biome band."""
    classifier = BiomeClassifier()
    counts = np.bincount(classifier.classify_array(field).ravel(), minlength=len(classifier.bands))
    for band, count in zip(classifier.bands, counts):
        print(f"    {band.biome.value:<11} {100.0 * count / counts.sum():5.1f}%")


def run_demo():
    """Run the demonstration."""
    print("=" * 60)
    print("Heightmap Terrain - Demo")
    print("=" * 60)

    test_images = [
        ("island", create_test_heightmap_island(128)),
        ("terraces", create_test_heightmap_terraces(128)),
        ("photo", create_test_heightmap_photo(128)),
    ]

    total_start = time.time()

    for name, image in test_images:
        print(f"\n--- Processing: {name} ---")
        print(f"Input size: {image.shape[1]}x{image.shape[0]} pixels")

        start = time.time()
        generator = TerrainGenerator(resolution=128, height_scale=10)
        generator.load_array(image).generate()
        elapsed = time.time() - start

        stats = generator.statistics
        info = generator.preview()
        print(f"  Contrast: {stats.contrast:.3f}")
        print(f"  Avg brightness: {stats.normalized_mean:.3f}")
        print(f"  Smoothed: {info['smoothed']}")
        print(f"  Vertices: {generator.vertex_count}")
        print(f"  Triangles: {generator.triangle_count}")
        print(f"  Time: {elapsed * 1000:.1f}ms")
        print("  Biomes:")
        print_biome_distribution(generator.heightfield)

    total_time = time.time() - total_start

    print("\n" + "=" * 60)
    print(f"Demo complete! Total time: {total_time:.2f}s")
    print("=" * 60)

    return 0


def benchmark_pipeline():
    """Benchmark synthesize() at the viewer's resolutions."""
    print("\n--- Pipeline Benchmark ---\n")

    for size in (128, 256, 384, 512):
        pixels = create_test_heightmap_photo(size).reshape(-1, 3)

        start = time.time()
        geometry = synthesize(pixels, size, 10.0)
        elapsed = time.time() - start

        print(f"Resolution: {size}x{size}")
        print(f"  {elapsed * 1000:.1f}ms, {geometry.vertex_count} verts, "
              f"{geometry.triangle_count} tris")
        print()


if __name__ == "__main__":
    run_demo()

    # Uncomment to run benchmark
    # benchmark_pipeline()
