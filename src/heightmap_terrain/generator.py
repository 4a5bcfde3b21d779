"""
Main TerrainGenerator Class

This is the primary interface for the heightmap terrain pipeline.
It orchestrates:
1. Image loading and resampling
2. Luminance extraction and normalization
3. Adaptive smoothing
4. Mesh generation with biome colors

Example Usage:
    generator = TerrainGenerator(resolution=256, height_scale=10)
    generator.load_image("heightmap.png")
    generator.generate()
    generator.geometry.positions
"""

from pathlib import Path
from typing import Optional, Union
import numpy as np

from .config import DEFAULT_CONFIG, DEFAULT_HEIGHT_SCALE, DEFAULT_RESOLUTION, TerrainConfig
from .heightfield import ImageStatistics
from .ingestion import PixelSampler
from .mesh import GeometryBuffer
from .pipeline import build_mesh, process_heightfield, validate_height_scale
from .procedural import generate_default_terrain


class TerrainGenerator:
    """
    High-level interface for heightmap-to-terrain conversion.

    Each generate() call runs the whole pipeline from the loaded pixels;
    the previous geometry is simply replaced.

    Attributes:
        resolution: Grid side length R
        height_scale: Vertical scale factor
        config: Pipeline constants
    """

    def __init__(
        self,
        resolution: int = DEFAULT_RESOLUTION,
        height_scale: float = DEFAULT_HEIGHT_SCALE,
        config: Optional[TerrainConfig] = None,
        resample: str = "bilinear"
    ):
        """
        Initialize the TerrainGenerator.

        Args:
            resolution: Grid side length R (>= 2)
            height_scale: Positive vertical scale factor
            config: Pipeline constants (defaults to DEFAULT_CONFIG)
            resample: Resampling filter used when loading images
        """
        self.config = config or DEFAULT_CONFIG
        self.config.validate()
        self.height_scale = validate_height_scale(height_scale)

        self._sampler = PixelSampler(resolution, resample)
        self._field: Optional[np.ndarray] = None
        self._stats: Optional[ImageStatistics] = None
        self._geometry: Optional[GeometryBuffer] = None

    @property
    def resolution(self) -> int:
        return self._sampler.resolution

    def load_image(self, image_path: Union[str, Path]) -> "TerrainGenerator":
        """
        Load a heightmap image.

        Args:
            image_path: Path to the image (any format Pillow can decode)

        Returns:
            self for method chaining
        """
        self._sampler.load(image_path)
        self._reset()
        return self

    def load_array(self, image: np.ndarray) -> "TerrainGenerator":
        """
        Load image data from a numpy array.

        Args:
            image: uint8 array of shape (H, W), (H, W, 3) or (H, W, 4)

        Returns:
            self for method chaining
        """
        self._sampler.load_from_array(image)
        self._reset()
        return self

    def set_height_scale(self, height_scale: float) -> "TerrainGenerator":
        """
        Change the vertical scale. Takes effect on the next generate().

        Returns:
            self for method chaining
        """
        self.height_scale = validate_height_scale(height_scale)
        return self

    def generate(self) -> "TerrainGenerator":
        """
        Run the pipeline on the loaded image.

        Returns:
            self for method chaining
        """
        if not self._sampler.has_image:
            raise RuntimeError("No image loaded. Call load_image() first.")

        if self._field is None:
            self._field, self._stats = process_heightfield(
                self._sampler.pixels, self.resolution, self.config
            )

        self._geometry = build_mesh(self._field, self.height_scale, self.config)
        return self

    def generate_default(self, amplitude: float = 8.0) -> "TerrainGenerator":
        """
        Replace the geometry with the placeholder hills terrain.

        Returns:
            self for method chaining
        """
        self._reset()
        self._geometry = generate_default_terrain(self.resolution, amplitude, self.config)
        return self

    def _reset(self):
        self._field = None
        self._stats = None
        self._geometry = None

    @property
    def geometry(self) -> Optional[GeometryBuffer]:
        """Get the current geometry."""
        return self._geometry

    @property
    def heightfield(self) -> Optional[np.ndarray]:
        """Get a copy of the normalized, smoothed height field."""
        if self._field is None:
            return None
        return self._field.copy()

    @property
    def statistics(self) -> Optional[ImageStatistics]:
        """Get the brightness statistics of the loaded image."""
        return self._stats

    @property
    def vertex_count(self) -> int:
        """Get the number of mesh vertices."""
        if self._geometry is None:
            return 0
        return self._geometry.vertex_count

    @property
    def triangle_count(self) -> int:
        """Get the number of mesh triangles."""
        if self._geometry is None:
            return 0
        return self._geometry.triangle_count

    def preview(self) -> dict:
        """
        Get a preview of the current state.

        Returns:
            Dictionary with current state information
        """
        info = {
            "image_loaded": self._sampler.has_image,
            "generated": self._geometry is not None,
            "resolution": self.resolution,
            "height_scale": self.height_scale,
        }

        if self._sampler.has_image:
            info["image_size"] = self._sampler.original_size

        if self._stats:
            info["contrast"] = self._stats.contrast
            info["avg_brightness"] = self._stats.normalized_mean
            info["smoothed"] = self._stats.contrast > self.config.smoothing_threshold

        if self._geometry:
            info["vertex_count"] = self._geometry.vertex_count
            info["triangle_count"] = self._geometry.triangle_count

        return info
