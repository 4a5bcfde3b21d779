"""
Color Helpers Module

Handles:
- Hex color literals (0xRRGGBB) to float RGB triples
- sRGB to Linear color space conversion

Color Space Background:
- Band colors are authored as sRGB hex values
- Renderers working in linear space (glTF, color-managed WebGL)
  expect linear vertex colors
- Failure to convert causes "washed out" colors in engines
"""

from typing import Tuple
import numpy as np
from numba import njit, prange


RGB = Tuple[float, float, float]


def hex_to_rgb(value: int) -> RGB:
    """
    Split a 0xRRGGBB integer into float channels in [0, 1].

    Args:
        value: Packed 24-bit color

    Returns:
        (r, g, b) tuple
    """
    if not 0 <= value <= 0xFFFFFF:
        raise ValueError(f"Color out of range: {value:#x}")
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


@njit(cache=True)
def _srgb_to_linear_component(c: float) -> float:
    """
    Convert a single sRGB component to Linear.

    The sRGB standard uses a piecewise function:
    - Linear below threshold (0.04045)
    - Gamma curve above threshold
    """
    if c <= 0.04045:
        return c / 12.92
    else:
        return ((c + 0.055) / 1.055) ** 2.4


@njit(cache=True, parallel=True)
def srgb_to_linear(colors: np.ndarray) -> np.ndarray:
    """
    Convert sRGB colors to Linear color space.

    Args:
        colors: Array of shape (N, 3) with float sRGB values in [0, 1]

    Returns:
        Array of same shape with float32 Linear values [0, 1]
    """
    n = colors.shape[0]
    channels = colors.shape[1]
    result = np.empty((n, channels), dtype=np.float32)

    for i in prange(n):
        for c in range(channels):
            value = max(0.0, min(1.0, colors[i, c]))
            result[i, c] = _srgb_to_linear_component(value)

    return result
