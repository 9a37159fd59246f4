"""Deterministic noise-and-growth heightfield generation."""

from .config import (
    DEFAULT_ITERATIONS,
    DEFAULT_LENGTH,
    DEFAULT_NOISE_SCALE,
    DEFAULT_THRESHOLD,
    DEFAULT_WIDTH,
    GeneratorConfig,
    NoiseConfig,
    SmoothingConfig,
)
from .errors import DimensionMismatch, InvalidDimension, InvalidScale, RangeViolation, TerrainError
from .heightfield import HeightfieldResult, generate_heightfield
from .noise import sample_noise_field
from .smoothing import smooth_heights

__all__ = [
    "DEFAULT_WIDTH",
    "DEFAULT_LENGTH",
    "DEFAULT_NOISE_SCALE",
    "DEFAULT_ITERATIONS",
    "DEFAULT_THRESHOLD",
    "GeneratorConfig",
    "NoiseConfig",
    "SmoothingConfig",
    "TerrainError",
    "InvalidDimension",
    "InvalidScale",
    "DimensionMismatch",
    "RangeViolation",
    "HeightfieldResult",
    "generate_heightfield",
    "sample_noise_field",
    "smooth_heights",
]
