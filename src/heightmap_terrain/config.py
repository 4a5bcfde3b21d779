"""Configuration for terrain synthesis."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple
import math
import numbers

from .biome import BiomeBand, DEFAULT_BIOME_BANDS, validate_bands
from .errors import ParameterError


# Ranges offered by the interactive viewer. Advisory only.
DEFAULT_RESOLUTION = 256
MIN_RESOLUTION = 128
MAX_RESOLUTION = 512
RESOLUTION_STEP = 64

DEFAULT_HEIGHT_SCALE = 10.0
MIN_HEIGHT_SCALE = 1.0
MAX_HEIGHT_SCALE = 50.0


@dataclass(frozen=True)
class TerrainConfig:
    """Fixed constants of the heightmap-to-mesh pipeline."""
    # World units spanned by the full grid along X and Z
    terrain_size: float = 100.0

    # Lift above the renderer's reference ground plane
    vertical_offset: float = 5.0

    # Contrast above which the box blur is applied
    smoothing_threshold: float = 0.7

    # Box blur half-width (1 = 3x3 window)
    smoothing_radius: int = 1

    # Elevation-to-color bands
    biome_bands: Tuple[BiomeBand, ...] = field(default_factory=lambda: DEFAULT_BIOME_BANDS)

    # Emit linear instead of sRGB vertex colors
    linear_colors: bool = False

    def validate(self) -> None:
        """Validate the configuration."""
        if not math.isfinite(self.terrain_size) or self.terrain_size <= 0:
            raise ParameterError(f"terrain_size must be positive: {self.terrain_size}")
        if not math.isfinite(self.vertical_offset):
            raise ParameterError(f"vertical_offset must be finite: {self.vertical_offset}")
        if not 0 <= self.smoothing_threshold <= 1:
            raise ParameterError(
                f"smoothing_threshold must be within [0, 1]: {self.smoothing_threshold}"
            )
        radius = self.smoothing_radius
        if isinstance(radius, bool) or not isinstance(radius, numbers.Integral):
            raise ParameterError(f"smoothing_radius must be an integer: {radius!r}")
        if radius < 0:
            raise ParameterError(f"smoothing_radius must be >= 0: {radius}")
        validate_bands(self.biome_bands)

    def with_overrides(self, **changes: Any) -> "TerrainConfig":
        """Return a validated copy with some fields replaced."""
        if "biome_bands" in changes:
            changes["biome_bands"] = tuple(changes["biome_bands"])
        config = replace(self, **changes)
        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "terrain_size": self.terrain_size,
            "vertical_offset": self.vertical_offset,
            "smoothing_threshold": self.smoothing_threshold,
            "smoothing_radius": self.smoothing_radius,
            "biome_bands": [band.to_dict() for band in self.biome_bands],
            "linear_colors": self.linear_colors,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TerrainConfig":
        """Build a validated config, falling back to defaults for missing keys."""
        bands = data.get("biome_bands")
        config = cls(
            terrain_size=float(data.get("terrain_size", 100.0)),
            vertical_offset=float(data.get("vertical_offset", 5.0)),
            smoothing_threshold=float(data.get("smoothing_threshold", 0.7)),
            smoothing_radius=data.get("smoothing_radius", 1),
            biome_bands=(
                tuple(BiomeBand.from_dict(b) for b in bands)
                if bands is not None else DEFAULT_BIOME_BANDS
            ),
            linear_colors=bool(data.get("linear_colors", False)),
        )
        config.validate()
        return config


DEFAULT_CONFIG = TerrainConfig()
