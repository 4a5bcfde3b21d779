"""
Procedural terrain that needs no source image.

- generate_default_terrain: gentle sine/cosine hills shown before a
  heightmap has been loaded
- generate_regular_grid: flat checkerboard grid for checking the
  triangulation and UV layout
"""

from typing import Optional
import numpy as np

from .biome import BiomeClassifier
from .color import hex_to_rgb
from .config import DEFAULT_CONFIG, DEFAULT_RESOLUTION, TerrainConfig
from .errors import ParameterError
from .mesh import GeometryBuffer, freeze, grid_coordinates, grid_indices
from .pipeline import validate_resolution

WAVE_FREQUENCY = 0.05
CHECKER_COLORS = (0x00FF00, 0x0000FF)


def generate_default_terrain(
    resolution: int = DEFAULT_RESOLUTION,
    amplitude: float = 8.0,
    config: Optional[TerrainConfig] = None
) -> GeometryBuffer:
    """
    Placeholder terrain of rolling hills.

    y = sin(0.05 * x) * cos(0.05 * z) * amplitude + vertical_offset

    Vertex colors classify the wave mapped onto [0, 1].

    Args:
        resolution: Vertices per side (>= 2)
        amplitude: Peak height of the hills above/below the offset
        config: Grid size, offset and biome bands

    Returns:
        GeometryBuffer
    """
    config = config or DEFAULT_CONFIG
    resolution = validate_resolution(resolution)
    if not amplitude > 0:
        raise ParameterError(f"Amplitude must be positive: {amplitude}")

    world_x, world_z, uvs = grid_coordinates(resolution, config.terrain_size)
    wave = np.sin(world_x * WAVE_FREQUENCY) * np.cos(world_z * WAVE_FREQUENCY)

    positions = np.stack(
        [world_x, wave * amplitude + config.vertical_offset, world_z], axis=-1
    )

    classifier = BiomeClassifier(config.biome_bands, linear_colors=config.linear_colors)
    colors = classifier.colors(np.clip((wave + 1.0) / 2.0, 0.0, 1.0))

    return freeze(positions, colors, uvs, grid_indices(resolution))


def generate_regular_grid(size: int = 10) -> GeometryBuffer:
    """
    Flat unit-spaced grid with checkerboard vertex colors.

    Vertex (x, z) sits at (x - size/2, 0, z - size/2) and is green when
    x + z is even, blue otherwise.

    Args:
        size: Vertices per side (>= 2)

    Returns:
        GeometryBuffer
    """
    size = validate_resolution(size)

    axis = np.arange(size, dtype=np.float64)
    xs, zs = np.meshgrid(axis, axis)
    positions = np.stack([xs - size / 2, np.zeros_like(xs), zs - size / 2], axis=-1)

    tex = axis / (size - 1)
    u, v = np.meshgrid(tex, tex)
    uvs = np.column_stack([u.ravel(), v.ravel()])

    checker = np.array([hex_to_rgb(c) for c in CHECKER_COLORS], dtype=np.float32)
    parity = (xs.astype(np.int64) + zs.astype(np.int64)) % 2
    colors = checker[parity]

    return freeze(positions, colors, uvs, grid_indices(size))
