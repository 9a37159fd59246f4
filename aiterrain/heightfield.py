"""Heightfield generation pipeline: noise sampling followed by smoothing."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog

from aiterrain.config import GeneratorConfig
from aiterrain.metrics import HeightMetrics, height_metrics
from aiterrain.noise import sample_noise_field_with_offset
from aiterrain.smoothing import has_interior, iter_smoothing, smooth_heights

logger = structlog.get_logger()


@dataclass(frozen=True)
class HeightfieldResult:
    """Normalized grids and summary of one generation run."""

    heights: np.ndarray
    heights_initial: np.ndarray
    offset: tuple[int, int]
    metrics: HeightMetrics
    initial_metrics: HeightMetrics
    iteration_heights: tuple[np.ndarray, ...] = ()


def generate_heightfield(config: GeneratorConfig | None = None) -> HeightfieldResult:
    """Generate a deterministic normalized heightfield of shape ``(width, length)``."""

    cfg = config or GeneratorConfig()
    noise_cfg = cfg.noise
    smoothing_cfg = cfg.smoothing

    heights_initial, offset = sample_noise_field_with_offset(noise_cfg)

    iteration_heights: tuple[np.ndarray, ...] = ()
    if cfg.debug_tier >= 1 and smoothing_cfg.iterations > 0 and has_interior(heights_initial):
        iteration_heights = tuple(iter_smoothing(heights_initial, smoothing_cfg))
        heights = iteration_heights[-1]
    else:
        heights = smooth_heights(heights_initial, smoothing_cfg)

    threshold = smoothing_cfg.threshold
    result = HeightfieldResult(
        heights=heights,
        heights_initial=heights_initial,
        offset=offset,
        metrics=height_metrics(heights, threshold=threshold),
        initial_metrics=height_metrics(heights_initial, threshold=threshold),
        iteration_heights=iteration_heights,
    )
    logger.info(
        "Heightfield generated",
        width=noise_cfg.width,
        length=noise_cfg.length,
        seed=noise_cfg.seed,
        iterations=smoothing_cfg.iterations,
        plateaus=result.metrics.num_plateaus,
    )
    return result
