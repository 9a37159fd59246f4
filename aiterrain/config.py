"""Configuration models for heightfield generation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


DEFAULT_WIDTH = 512
DEFAULT_LENGTH = 512
DEFAULT_NOISE_SCALE = 50.0
DEFAULT_SEED = 0
DEFAULT_ITERATIONS = 5
DEFAULT_THRESHOLD = 0.5
DEFAULT_MAX_HEIGHT = 100.0

OFFSET_RANGE = 100_000


@dataclass(frozen=True)
class NoiseConfig:
    """Controls the initial coherent-noise field."""

    width: int = DEFAULT_WIDTH
    length: int = DEFAULT_LENGTH
    noise_scale: float = DEFAULT_NOISE_SCALE
    seed: int = DEFAULT_SEED


@dataclass(frozen=True)
class SmoothingConfig:
    """Controls the neighbor-averaging and threshold growth passes."""

    iterations: int = DEFAULT_ITERATIONS
    threshold: float = DEFAULT_THRESHOLD
    blend: float = 0.5
    growth: float = 0.01


@dataclass(frozen=True)
class RenderConfig:
    """Derived raster configuration; never applied inside the engine."""

    max_height: float = DEFAULT_MAX_HEIGHT
    gradient: tuple[tuple[float, str], ...] = (
        (0.00, "#1e4877"),  # deep water
        (0.35, "#3f7fb5"),  # shallows
        (0.40, "#d8c58f"),  # sand
        (0.50, "#5ea345"),  # grass
        (0.65, "#425946"),  # forest
        (0.80, "#8e857a"),  # rock
        (1.00, "#ffffff"),  # snow
    )
    hillshade_azimuth_deg: float = 315.0
    hillshade_altitude_deg: float = 45.0
    hillshade_z_factor: float = 1.0


@dataclass(frozen=True)
class GeneratorConfig:
    """Primary generation configuration."""

    debug_tier: int = 0
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
