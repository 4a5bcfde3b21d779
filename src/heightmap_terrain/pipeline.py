"""
Heightmap-to-Mesh Pipeline

The single canonical path from decoded pixels to terrain geometry:

    pixels -> luminance -> statistics -> normalize -> adaptive smoothing
           -> mesh synthesis (+ biome colors) -> GeometryBuffer

Every call is a pure function of (pixels, resolution, height_scale,
config). Nothing is cached between calls.

Example Usage:
    from heightmap_terrain import synthesize

    geometry = synthesize(pixels, resolution=256, height_scale=10)
    geometry.positions  # flat float32 x, y, z
"""

from typing import Optional, Tuple
import logging
import math
import numbers
import numpy as np

from .biome import BiomeClassifier
from .config import DEFAULT_CONFIG, TerrainConfig
from .errors import InputShapeError, ParameterError
from .heightfield import ImageStatistics, compute_statistics, extract_luminance, normalize
from .mesh import GeometryBuffer, MeshSynthesizer
from .smoothing import AdaptiveSmoother

logger = logging.getLogger(__name__)


def validate_resolution(resolution) -> int:
    """
    Check that a grid resolution can form at least one quad.

    Raises:
        InputShapeError: if resolution is not an integer >= 2
    """
    if isinstance(resolution, bool) or not isinstance(resolution, numbers.Integral):
        raise InputShapeError(f"Resolution must be an integer, got {resolution!r}")
    if resolution < 2:
        raise InputShapeError(f"Resolution must be at least 2, got {resolution}")
    return int(resolution)


def validate_height_scale(height_scale) -> float:
    """
    Check that a height scale is a finite positive number.

    Raises:
        ParameterError: otherwise
    """
    if isinstance(height_scale, bool) or not isinstance(height_scale, numbers.Real):
        raise ParameterError(f"Height scale must be a number, got {height_scale!r}")
    if not math.isfinite(height_scale) or height_scale <= 0:
        raise ParameterError(f"Height scale must be positive: {height_scale}")
    return float(height_scale)


def coerce_pixels(pixels, resolution: int) -> np.ndarray:
    """
    Validate pixel samples and reshape them to an (R, R, 3) grid.

    Accepts a flat sequence of R*R RGB(A) triples, an (R, R, 3|4) image
    array, or a flat run of R*R*3 channel values. Alpha is dropped.

    Raises:
        InputShapeError: on a count, channel or range mismatch
    """
    resolution = validate_resolution(resolution)
    expected = resolution * resolution

    try:
        array = np.asarray(pixels, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InputShapeError(f"Pixels must be numeric RGB triples: {e}") from e

    if array.ndim == 1 and array.size == expected * 3:
        array = array.reshape(expected, 3)
    elif array.ndim == 3:
        array = array.reshape(-1, array.shape[-1])

    if array.ndim != 2 or array.shape[1] not in (3, 4):
        raise InputShapeError(
            f"Pixels must be RGB triples, got array of shape {np.shape(pixels)}"
        )
    if array.shape[0] != expected:
        raise InputShapeError(
            f"Expected {expected} pixels for a {resolution}x{resolution} grid, "
            f"got {array.shape[0]}"
        )

    rgb = array[:, :3]
    if not np.all(np.isfinite(rgb)) or rgb.min() < 0 or rgb.max() > 255:
        raise InputShapeError("Pixel channels must lie within [0, 255]")

    return rgb.reshape(resolution, resolution, 3)


def process_heightfield(
    pixels,
    resolution: int,
    config: Optional[TerrainConfig] = None
) -> Tuple[np.ndarray, ImageStatistics]:
    """
    Run the image stages of the pipeline.

    Args:
        pixels: R*R RGB triples, row-major
        resolution: Grid side length R
        config: Pipeline constants (defaults to DEFAULT_CONFIG)

    Returns:
        Tuple of ((R, R) float64 height field in [0, 1], ImageStatistics)
    """
    config = config or DEFAULT_CONFIG
    rgb = coerce_pixels(pixels, resolution)

    luminance = extract_luminance(rgb)
    stats = compute_statistics(luminance)
    field = normalize(luminance, stats)

    smoother = AdaptiveSmoother(config.smoothing_threshold, config.smoothing_radius)
    field = smoother.smooth(field, stats.contrast)

    return field, stats


def build_mesh(
    field: np.ndarray,
    height_scale: float,
    config: Optional[TerrainConfig] = None
) -> GeometryBuffer:
    """
    Turn a normalized (R, R) height field into geometry.

    Raises:
        InputShapeError: if the field is not square or smaller than 2x2
        ParameterError: for a non-positive height_scale
    """
    config = config or DEFAULT_CONFIG
    height_scale = validate_height_scale(height_scale)

    heights = np.asarray(field, dtype=np.float64)
    if heights.ndim != 2 or heights.shape[0] != heights.shape[1]:
        raise InputShapeError(f"Height field must be square, got shape {heights.shape}")
    validate_resolution(heights.shape[0])

    classifier = BiomeClassifier(config.biome_bands, linear_colors=config.linear_colors)
    synthesizer = MeshSynthesizer(
        terrain_size=config.terrain_size,
        vertical_offset=config.vertical_offset,
        classifier=classifier
    )
    return synthesizer.synthesize(np.clip(heights, 0.0, 1.0), height_scale)


def synthesize(
    pixels,
    resolution: int,
    height_scale: float,
    config: Optional[TerrainConfig] = None
) -> GeometryBuffer:
    """
    Convert decoded pixel samples into terrain geometry.

    Args:
        pixels: R*R RGB triples (channels 0-255), row-major
        resolution: Grid side length R (>= 2)
        height_scale: Positive vertical scale factor
        config: Pipeline constants (defaults to DEFAULT_CONFIG)

    Returns:
        GeometryBuffer with R*R vertices and 2*(R-1)^2 triangles

    Raises:
        InputShapeError: wrong pixel count or resolution < 2
        ParameterError: non-positive height_scale
    """
    config = config or DEFAULT_CONFIG
    config.validate()
    resolution = validate_resolution(resolution)
    height_scale = validate_height_scale(height_scale)

    logger.info(
        "Processing heightmap at %dx%d resolution, height scale %g",
        resolution, resolution, height_scale
    )
    field, _ = process_heightfield(pixels, resolution, config)
    return build_mesh(field, height_scale, config)
