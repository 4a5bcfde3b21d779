"""
Image Ingestion Module

This module handles:
- Decoding heightmap images with Pillow
- Reducing 16-bit and floating point grayscale to 8 bits
- Resampling to a square R x R grid
- Exposing the result as a flat, row-major sequence of RGB triples

Decode failures propagate straight to the caller; the loader never hands
on partial or padded pixel data.
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import logging
import numpy as np
from PIL import Image

from .errors import InputShapeError
from .pipeline import validate_resolution

logger = logging.getLogger(__name__)

RESAMPLING_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "bilinear": Image.Resampling.BILINEAR,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


def to_eight_bit(img: Image.Image) -> Image.Image:
    """
    Reduce high bit depth grayscale images to 8-bit mode L.

    Pillow's RGB conversion clips these modes at 255, which would flatten
    a 16-bit heightmap to two levels.

    - I;16*: top byte of every sample
    - I: same, samples must lie within 0-65535
    - F: min/max stretched onto 0-255 (flat images become black)

    Other modes are returned unchanged.
    """
    if img.mode.startswith("I;16") or img.mode == "I":
        values = np.asarray(img).astype(np.int64)
        if values.min() < 0 or values.max() > 0xFFFF:
            raise InputShapeError(
                f"Mode {img.mode} samples outside 0-65535: {values.min()}..{values.max()}"
            )
        logger.debug("Reducing %s image to 8 bits", img.mode)
        return Image.fromarray((values >> 8).astype(np.uint8))

    if img.mode == "F":
        values = np.asarray(img, dtype=np.float64)
        if not np.isfinite(values).all():
            raise InputShapeError("Floating point image contains non-finite samples")
        low, high = values.min(), values.max()
        if high > low:
            values = np.rint((values - low) / (high - low) * 255)
        else:
            values = np.zeros_like(values)
        logger.debug("Stretching F image from %g..%g to 8 bits", low, high)
        return Image.fromarray(values.astype(np.uint8))

    return img


class PixelSampler:
    """
    Heightmap image loader producing pixel samples for the pipeline.

    The whole image is stretched onto the grid (no cropping), as a
    canvas would when drawing it at R x R.
    """

    def __init__(self, resolution: int = 256, resample: str = "bilinear"):
        """
        Initialize the sampler.

        Args:
            resolution: Grid side length R (>= 2)
            resample: Resampling filter name ("nearest", "bilinear", "bicubic", "lanczos")
        """
        self.resolution = validate_resolution(resolution)
        if resample not in RESAMPLING_FILTERS:
            raise ValueError(f"Unknown resampling filter: {resample}")
        self.resample = resample
        self._pixels: Optional[np.ndarray] = None
        self._original_size: Optional[Tuple[int, int]] = None

    def load(self, image_path: Union[str, Path]) -> "PixelSampler":
        """
        Decode an image file and resample it to the grid.

        Args:
            image_path: Path to the heightmap image

        Returns:
            self for method chaining
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        with Image.open(image_path) as img:
            img.load()
            self._original_size = img.size  # (width, height)
            self._pixels = self._sample(img)

        logger.debug(
            "Loaded %s (%dx%d) -> %dx%d",
            image_path, self._original_size[0], self._original_size[1],
            self.resolution, self.resolution
        )
        return self

    def load_from_array(self, image: np.ndarray) -> "PixelSampler":
        """
        Load from an already decoded numpy image.

        Args:
            image: Array of shape (H, W), (H, W, 3) or (H, W, 4) with
                uint8 channels in 0-255

        Returns:
            self for method chaining
        """
        image = np.asarray(image)
        if image.ndim not in (2, 3) or (image.ndim == 3 and image.shape[2] not in (3, 4)):
            raise InputShapeError("Image array must have shape (H, W), (H, W, 3) or (H, W, 4)")
        if image.shape[0] == 0 or image.shape[1] == 0:
            raise InputShapeError("Image array is empty")
        if image.dtype != np.uint8:
            raise InputShapeError(
                f"Image array must hold uint8 channels in 0-255, got {image.dtype}"
            )

        img = Image.fromarray(image)
        self._original_size = img.size
        self._pixels = self._sample(img)
        return self

    def _sample(self, img: Image.Image) -> np.ndarray:
        """Convert to RGB and resample to (R*R, 3) uint8."""
        img = to_eight_bit(img)
        if img.mode != "RGB":
            img = img.convert("RGB")

        size = (self.resolution, self.resolution)
        if img.size != size:
            img = img.resize(size, RESAMPLING_FILTERS[self.resample])

        return np.array(img, dtype=np.uint8).reshape(-1, 3)

    @property
    def pixels(self) -> np.ndarray:
        """Row-major (R*R, 3) uint8 RGB samples."""
        if self._pixels is None:
            raise RuntimeError("No image loaded")
        return self._pixels

    @property
    def has_image(self) -> bool:
        return self._pixels is not None

    @property
    def original_size(self) -> Tuple[int, int]:
        """Source image size as (width, height)."""
        if self._original_size is None:
            raise RuntimeError("No image loaded")
        return self._original_size

    def as_grid(self) -> np.ndarray:
        """Samples reshaped to (R, R, 3)."""
        return self.pixels.reshape(self.resolution, self.resolution, 3)
