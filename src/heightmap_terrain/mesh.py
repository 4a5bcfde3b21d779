"""
Terrain Mesh Synthesis with Numba JIT Compilation

Lays a normalized height field over a regular grid of world-space
vertices and triangulates it.

Grid layout for resolution R:
- Vertex (col=x, row=z) has index z * R + x
- X and Z span ``terrain_size`` world units, centred on R/2
- Y is elevation * height_scale + vertical_offset
- Each grid quad becomes two triangles:
  (topLeft, bottomLeft, topRight) and (topRight, bottomLeft, bottomRight)

The winding order decides which side the renderer treats as the front
face and must not change. Vertex normals are left to the renderer.
"""

from typing import NamedTuple, Optional, Tuple
import logging
import numpy as np
from numba import njit

from .biome import BiomeClassifier

logger = logging.getLogger(__name__)


class GeometryBuffer(NamedTuple):
    """Flat, read-only geometry arrays ready for a renderer."""
    positions: np.ndarray  # (R*R*3,) float32 x, y, z
    colors: np.ndarray     # (R*R*3,) float32 r, g, b in [0, 1]
    uvs: np.ndarray        # (R*R*2,) float32 u, v in [0, 1]
    indices: np.ndarray    # (6*(R-1)^2,) uint32 triangle list

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def heights(self) -> np.ndarray:
        """Y component of every vertex."""
        return self.positions[1::3]


def freeze(
    positions: np.ndarray,
    colors: np.ndarray,
    uvs: np.ndarray,
    indices: np.ndarray
) -> GeometryBuffer:
    """Flatten, cast and lock arrays into a GeometryBuffer."""
    arrays = (
        np.ascontiguousarray(positions, dtype=np.float32).ravel(),
        np.ascontiguousarray(colors, dtype=np.float32).ravel(),
        np.ascontiguousarray(uvs, dtype=np.float32).ravel(),
        np.ascontiguousarray(indices, dtype=np.uint32).ravel(),
    )
    for array in arrays:
        array.flags.writeable = False
    return GeometryBuffer(*arrays)


@njit(cache=True)
def grid_indices(resolution: int) -> np.ndarray:
    """
    Triangle indices for a resolution x resolution vertex grid.

    Args:
        resolution: Vertices per side (>= 2)

    Returns:
        uint32 array of length 6 * (resolution - 1)^2
    """
    quads = (resolution - 1) * (resolution - 1)
    indices = np.empty(quads * 6, dtype=np.uint32)

    i = 0
    for z in range(resolution - 1):
        for x in range(resolution - 1):
            top_left = z * resolution + x
            top_right = top_left + 1
            bottom_left = top_left + resolution
            bottom_right = bottom_left + 1

            # First triangle
            indices[i] = top_left
            indices[i + 1] = bottom_left
            indices[i + 2] = top_right
            # Second triangle
            indices[i + 3] = top_right
            indices[i + 4] = bottom_left
            indices[i + 5] = bottom_right
            i += 6

    return indices


def grid_coordinates(
    resolution: int,
    terrain_size: float
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    World X/Z coordinates and UVs of every grid vertex.

    Args:
        resolution: Vertices per side (>= 2)
        terrain_size: World units spanned by the grid

    Returns:
        Tuple of (world_x, world_z, uvs) where world_x and world_z have
        shape (R, R) indexed [row, col] and uvs has shape (R*R, 2)
    """
    step = terrain_size / (resolution - 1)
    cols = np.arange(resolution, dtype=np.float64)

    axis = (cols - resolution / 2) * step
    world_x, world_z = np.meshgrid(axis, axis)

    tex = cols / (resolution - 1)
    u, v = np.meshgrid(tex, tex)
    uvs = np.column_stack([u.ravel(), v.ravel()])

    return world_x, world_z, uvs


class MeshSynthesizer:
    """
    Converts a normalized height field into terrain geometry.

    Attributes:
        terrain_size: World units spanned by the grid along X and Z
        vertical_offset: Constant added to every vertex Y
        classifier: Biome classifier used for vertex colors
    """

    def __init__(
        self,
        terrain_size: float = 100.0,
        vertical_offset: float = 5.0,
        classifier: Optional[BiomeClassifier] = None
    ):
        self.terrain_size = terrain_size
        self.vertical_offset = vertical_offset
        self.classifier = classifier or BiomeClassifier()

    def synthesize(self, field: np.ndarray, height_scale: float) -> GeometryBuffer:
        """
        Build geometry from a square height field.

        Colors are classified from the normalized field itself, so biome
        bands do not move when height_scale changes.

        Args:
            field: (R, R) normalized heights in [0, 1]
            height_scale: Positive vertical scale factor

        Returns:
            GeometryBuffer with R*R vertices and 2*(R-1)^2 triangles
        """
        heights = np.asarray(field, dtype=np.float64)
        resolution = heights.shape[0]
        logger.debug("Generating %dx%d terrain geometry", resolution, resolution)

        world_x, world_z, uvs = grid_coordinates(resolution, self.terrain_size)
        world_y = heights * height_scale + self.vertical_offset

        positions = np.stack([world_x, world_y, world_z], axis=-1)
        colors = self.classifier.colors(heights)

        geometry = freeze(positions, colors, uvs, grid_indices(resolution))
        logger.info(
            "Generated terrain with %d vertices and %d faces",
            geometry.vertex_count, geometry.triangle_count
        )
        return geometry
