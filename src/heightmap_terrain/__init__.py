"""
Heightmap Terrain
=================

A deterministic pipeline for turning 2D raster images into 3D terrain meshes.

This package converts decoded RGB pixels into a triangulated elevation
surface with per-vertex biome colors, ready to hand to any renderer.

Key Features:
- BT.709 luminance extraction and min/max normalization
- Contrast-driven box-blur smoothing for posterized sources
- Regular-grid triangulation with Numba JIT index generation
- Hard-edged biome bands (water, beach, vegetation, rock, snow)
- Flat position, color, UV and index buffers

Example Usage:
    from heightmap_terrain import TerrainGenerator

    generator = TerrainGenerator(resolution=256, height_scale=10)
    generator.load_image("heightmap.png")
    generator.generate()
    geometry = generator.geometry
"""

__version__ = "1.0.0"
__author__ = "Heightmap Terrain Team"

from .errors import TerrainError, InputShapeError, ParameterError
from .config import TerrainConfig, DEFAULT_CONFIG
from .heightfield import ImageStatistics, extract_luminance, compute_statistics, normalize
from .smoothing import AdaptiveSmoother, box_blur
from .biome import BiomeType, BiomeBand, BiomeClassifier, DEFAULT_BIOME_BANDS
from .mesh import GeometryBuffer, MeshSynthesizer, grid_indices
from .pipeline import synthesize, process_heightfield, build_mesh
from .ingestion import PixelSampler
from .procedural import generate_default_terrain, generate_regular_grid
from .generator import TerrainGenerator

__all__ = [
    "TerrainGenerator",
    "synthesize",
    "process_heightfield",
    "build_mesh",
    "PixelSampler",
    "TerrainConfig",
    "DEFAULT_CONFIG",
    "ImageStatistics",
    "extract_luminance",
    "compute_statistics",
    "normalize",
    "AdaptiveSmoother",
    "box_blur",
    "BiomeType",
    "BiomeBand",
    "BiomeClassifier",
    "DEFAULT_BIOME_BANDS",
    "GeometryBuffer",
    "MeshSynthesizer",
    "grid_indices",
    "generate_default_terrain",
    "generate_regular_grid",
    "TerrainError",
    "InputShapeError",
    "ParameterError",
]
