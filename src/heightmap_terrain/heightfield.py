"""
Height Field Module

Turns decoded pixel colors into a normalized elevation grid:
1. Luminance extraction (ITU-R BT.709 weights)
2. Brightness statistics (min, max, mean, contrast)
3. Min/max normalization to [0, 1]

Height fields are plain float64 numpy arrays of shape (R, R), row-major,
so that ``field.ravel()[row * R + col]`` addresses a grid cell. float64 is
kept throughout so values that land exactly on a biome boundary stay there.
"""

from dataclasses import dataclass
import logging
import math
import numpy as np

logger = logging.getLogger(__name__)

# BT.709 luma coefficients
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)


def extract_luminance(pixels: np.ndarray) -> np.ndarray:
    """
    Convert RGB triples to grayscale.

    Formula: luminance = 0.2126*R + 0.7152*G + 0.0722*B

    Args:
        pixels: Array of shape (..., 3) with channel values 0-255

    Returns:
        float64 array of shape pixels.shape[:-1] with values 0-255
    """
    rgb = np.asarray(pixels, dtype=np.float64)
    return (
        LUMA_WEIGHTS[0] * rgb[..., 0]
        + LUMA_WEIGHTS[1] * rgb[..., 1]
        + LUMA_WEIGHTS[2] * rgb[..., 2]
    )


@dataclass(frozen=True)
class ImageStatistics:
    """Brightness summary of a raw luminance field (0-255 scale)."""
    min: float
    max: float
    mean: float

    @property
    def contrast(self) -> float:
        """Brightness spread as a fraction of the full 8-bit range."""
        return (self.max - self.min) / 255.0

    @property
    def normalized_mean(self) -> float:
        """Average brightness in [0, 1]."""
        return self.mean / 255.0

    @property
    def is_flat(self) -> bool:
        """True when every sample has the same brightness."""
        return self.max == self.min


def compute_statistics(luminance: np.ndarray) -> ImageStatistics:
    """
    Compute brightness statistics of a luminance field.

    The mean uses an exactly rounded sum, so the result does not depend
    on the order the samples are visited in.

    Args:
        luminance: Raw luminance values (0-255), any shape, non-empty

    Returns:
        ImageStatistics
    """
    values = np.asarray(luminance, dtype=np.float64).ravel()
    if values.size == 0:
        raise ValueError("Cannot compute statistics of an empty field")

    stats = ImageStatistics(
        min=float(values.min()),
        max=float(values.max()),
        mean=math.fsum(values.tolist()) / values.size,
    )
    logger.info(
        "Image analysis: contrast=%.3f, avg brightness=%.3f",
        stats.contrast, stats.normalized_mean
    )
    return stats


def normalize(luminance: np.ndarray, stats: ImageStatistics) -> np.ndarray:
    """
    Rescale a luminance field so it spans exactly [0, 1].

    normalized = clamp((v - min) / (max - min), 0, 1)

    A flat image (max == min) has no range to stretch; it becomes a
    field of zeros instead of NaNs.

    Args:
        luminance: Raw luminance values (0-255)
        stats: Statistics computed from the same field

    Returns:
        New float64 array of the same shape with values in [0, 1]
    """
    values = np.asarray(luminance, dtype=np.float64)

    if stats.is_flat:
        logger.info("Uniform brightness, producing flat terrain")
        return np.zeros_like(values)

    logger.debug("Normalizing height data to full range")
    normalized = (values - stats.min) / (stats.max - stats.min)
    return np.clip(normalized, 0.0, 1.0)
