"""
Adaptive Smoothing Module

High-contrast sources (posterized images, flat color bands, photos that
were never meant to be heightmaps) produce harsh terrain steps. When the
brightness contrast exceeds a threshold, a single box-blur pass is
applied to the normalized height field.

The blur window is clipped at the field boundary: edge cells average only
the neighbours that exist, with no wrapping, mirroring or zero padding.
"""

import logging
import numpy as np
from scipy import ndimage

logger = logging.getLogger(__name__)


def box_blur(field: np.ndarray, radius: int = 1) -> np.ndarray:
    """
    Mean filter over a (2*radius+1) square window, clipped at the edges.

    Args:
        field: 2D float array
        radius: Chebyshev radius of the window (1 = 3x3)

    Returns:
        New float64 array of the same shape
    """
    values = np.asarray(field, dtype=np.float64)
    if radius <= 0:
        return values.copy()

    kernel = np.ones((2 * radius + 1, 2 * radius + 1), dtype=np.float64)

    # Zero padding contributes nothing to the sum; dividing by the number
    # of in-bounds cells turns it into a clipped-window mean.
    sums = ndimage.correlate(values, kernel, mode="constant", cval=0.0)
    counts = ndimage.correlate(np.ones_like(values), kernel, mode="constant", cval=0.0)
    return sums / counts


class AdaptiveSmoother:
    """
    Applies a box blur only when the source image is high contrast.

    Attributes:
        threshold: Contrast strictly above which smoothing runs
        radius: Box blur radius
    """

    def __init__(self, threshold: float = 0.7, radius: int = 1):
        """
        Initialize the smoother.

        Args:
            threshold: Contrast threshold in [0, 1]
            radius: Box blur radius (1 = 3x3 window)
        """
        self.threshold = threshold
        self.radius = radius

    def should_smooth(self, contrast: float) -> bool:
        """Check whether a field with this contrast gets blurred."""
        return contrast > self.threshold

    def smooth(self, field: np.ndarray, contrast: float) -> np.ndarray:
        """
        Conditionally blur a normalized height field.

        Args:
            field: Normalized 2D height field
            contrast: Contrast of the source image, see ImageStatistics

        Returns:
            The input field unchanged when contrast <= threshold,
            otherwise a new blurred field
        """
        if not self.should_smooth(contrast):
            return field

        logger.info("High contrast detected (%.3f), applying smoothing", contrast)
        return box_blur(field, self.radius)
