"""Biome classification from normalized terrain elevation.

Each vertex is assigned one of a small, ordered set of hard-edged color
bands (water, beach, vegetation, rock, snow). Bands are half-open
``[lower, upper)`` except the last one, which also contains its upper
bound. There is no blending between neighbouring bands.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple
import numpy as np

from .color import RGB, hex_to_rgb, srgb_to_linear
from .errors import ParameterError


class BiomeType(Enum):
    """Terrain classes, lowest to highest."""
    WATER = "water"
    BEACH = "beach"
    VEGETATION = "vegetation"
    ROCK = "rock"
    SNOW = "snow"


@dataclass(frozen=True)
class BiomeBand:
    """A contiguous elevation interval painted with one color."""
    biome: BiomeType
    lower: float
    upper: float
    color: int  # 0xRRGGBB, sRGB

    @property
    def rgb(self) -> RGB:
        """Band color as float sRGB channels."""
        return hex_to_rgb(self.color)

    def to_dict(self) -> dict:
        return {
            "biome": self.biome.value,
            "lower": self.lower,
            "upper": self.upper,
            "color": f"#{self.color:06x}",
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BiomeBand":
        color = data["color"]
        if isinstance(color, str):
            color = int(color.lstrip("#"), 16)
        return cls(
            biome=BiomeType(data["biome"]),
            lower=float(data["lower"]),
            upper=float(data["upper"]),
            color=int(color),
        )


DEFAULT_BIOME_BANDS: Tuple[BiomeBand, ...] = (
    BiomeBand(BiomeType.WATER, 0.0, 0.2, 0x1E40AF),       # deep blue
    BiomeBand(BiomeType.BEACH, 0.2, 0.4, 0xFBBF24),       # amber
    BiomeBand(BiomeType.VEGETATION, 0.4, 0.7, 0x16A34A),  # green
    BiomeBand(BiomeType.ROCK, 0.7, 0.9, 0x6B7280),        # gray
    BiomeBand(BiomeType.SNOW, 0.9, 1.0, 0xFFFFFF),        # white
)


def validate_bands(bands: Sequence[BiomeBand]) -> None:
    """
    Check that bands tile [0, 1] in ascending order without gaps.

    Raises:
        ParameterError: if the bands are empty, unordered or leave gaps
    """
    if not bands:
        raise ParameterError("At least one biome band is required")
    if bands[0].lower != 0.0:
        raise ParameterError(f"First biome band must start at 0, got {bands[0].lower}")
    if bands[-1].upper != 1.0:
        raise ParameterError(f"Last biome band must end at 1, got {bands[-1].upper}")

    for band in bands:
        if not band.lower < band.upper:
            raise ParameterError(
                f"Biome band {band.biome.value} is empty: [{band.lower}, {band.upper})"
            )
        if not 0 <= band.color <= 0xFFFFFF:
            raise ParameterError(f"Biome band {band.biome.value} has invalid color {band.color}")

    for prev, band in zip(bands, bands[1:]):
        if prev.upper != band.lower:
            raise ParameterError(
                f"Biome bands {prev.biome.value} and {band.biome.value} are not contiguous"
            )


class BiomeClassifier:
    """Maps normalized elevation in [0, 1] to a biome band and its color.

    Inputs are expected to be pre-clamped by the caller; values below 0
    fall into the first band and values above 1 into the last.
    """

    def __init__(
        self,
        bands: Optional[Sequence[BiomeBand]] = None,
        linear_colors: bool = False
    ):
        """Initialize the classifier.

        Args:
            bands: Ordered bands covering [0, 1] (defaults to the five terrain bands)
            linear_colors: Emit colors converted from sRGB to linear space
        """
        self.bands = tuple(bands) if bands is not None else DEFAULT_BIOME_BANDS
        validate_bands(self.bands)
        self.linear_colors = linear_colors

        # Upper edges of every band but the last; a value equal to an edge
        # belongs to the band above it.
        self._edges = np.array([band.upper for band in self.bands[:-1]], dtype=np.float64)

        palette = np.array([band.rgb for band in self.bands], dtype=np.float64)
        if linear_colors:
            palette = srgb_to_linear(palette)
        self._palette = palette.astype(np.float32)

    def band_index(self, height: float) -> int:
        """Index of the band containing ``height``."""
        for i, band in enumerate(self.bands[:-1]):
            if height < band.upper:
                return i
        return len(self.bands) - 1

    def classify(self, height: float) -> BiomeType:
        """Classify a single normalized height."""
        return self.bands[self.band_index(height)].biome

    def color(self, height: float) -> RGB:
        """Color for a single normalized height."""
        r, g, b = self._palette[self.band_index(height)]
        return (float(r), float(g), float(b))

    def classify_array(self, heights: np.ndarray) -> np.ndarray:
        """
        Band indices for an array of normalized heights.

        Args:
            heights: Array of any shape

        Returns:
            int array of the same shape
        """
        return np.searchsorted(self._edges, np.asarray(heights, dtype=np.float64), side="right")

    def colors(self, heights: np.ndarray) -> np.ndarray:
        """
        Per-element colors for an array of normalized heights.

        Returns:
            float32 array of shape heights.shape + (3,)
        """
        return self._palette[self.classify_array(heights)]

    @property
    def palette(self) -> np.ndarray:
        """Band colors as an (n_bands, 3) float32 array."""
        return self._palette.copy()
