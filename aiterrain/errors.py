"""Exceptions raised by heightfield generation."""

from __future__ import annotations


class TerrainError(ValueError):
    """Base class for invalid heightfield inputs."""


class InvalidDimension(TerrainError):
    """Raised when a requested grid width or length is not positive."""


class InvalidScale(TerrainError):
    """Raised when the noise scale is not a positive finite number."""


class DimensionMismatch(TerrainError):
    """Raised when a grid has no interior cells to smooth."""


class RangeViolation(TerrainError):
    """Raised when a normalized grid holds values outside [0, 1]."""
