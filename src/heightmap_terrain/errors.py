"""
Exception types raised by the terrain pipeline.

Both concrete errors subclass ValueError so callers that already guard
with ``except ValueError`` keep working.
"""


class TerrainError(Exception):
    """Base class for all terrain pipeline errors."""


class InputShapeError(TerrainError, ValueError):
    """Pixel data does not match the requested grid resolution."""


class ParameterError(TerrainError, ValueError):
    """A numeric parameter or configuration value is out of range."""
