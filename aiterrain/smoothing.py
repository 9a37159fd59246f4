"""Neighbor-averaging smoothing with threshold growth."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
import structlog

from aiterrain.config import SmoothingConfig
from aiterrain.errors import DimensionMismatch

logger = structlog.get_logger()


def has_interior(grid: np.ndarray) -> bool:
    """True when the grid has at least one cell off every border."""

    return grid.ndim == 2 and grid.shape[0] >= 3 and grid.shape[1] >= 3


def smooth_step(
    heights: np.ndarray,
    *,
    threshold: float,
    blend: float = 0.5,
    growth: float = 0.01,
) -> np.ndarray:
    """Apply one smoothing pass and return a new grid.

    Every interior read comes from ``heights``; the result is written into a
    copy, so border cells keep their incoming values. Non-floating grids are
    promoted to float64 so blended values are not truncated.
    """

    if not np.issubdtype(heights.dtype, np.floating):
        heights = heights.astype(np.float64)

    center = heights[1:-1, 1:-1]
    avg = (
        center
        + heights[:-2, 1:-1]
        + heights[2:, 1:-1]
        + heights[1:-1, :-2]
        + heights[1:-1, 2:]
    ) / 5.0
    blended = center + (avg - center) * blend
    grown = np.clip(blended + growth, 0.0, 1.0)

    out = heights.copy()
    # Growth keys off the pre-pass value, not the blended one.
    out[1:-1, 1:-1] = np.where(center > threshold, grown, blended)
    return out


def iter_smoothing(heights: np.ndarray, config: SmoothingConfig) -> Iterator[np.ndarray]:
    """Yield the grid produced by each smoothing iteration in order."""

    current = heights
    for _ in range(config.iterations):
        current = smooth_step(
            current,
            threshold=config.threshold,
            blend=config.blend,
            growth=config.growth,
        )
        yield current


def smooth_heights(
    heights: np.ndarray,
    config: SmoothingConfig | None = None,
    *,
    strict: bool = False,
) -> np.ndarray:
    """Run ``config.iterations`` smoothing passes over a height grid.

    Zero iterations return ``heights`` itself. A grid narrower than 3 cells in
    either axis has no interior and is returned untouched; with ``strict`` set
    that case raises :class:`DimensionMismatch` instead.
    """

    cfg = config or SmoothingConfig()
    if cfg.iterations < 0:
        raise ValueError("iterations must be >= 0")
    if heights.ndim != 2:
        raise DimensionMismatch(f"height grid must be 2D, got shape {heights.shape}")
    if cfg.iterations == 0:
        return heights
    if not has_interior(heights):
        if strict:
            raise DimensionMismatch(f"height grid {heights.shape} has no interior cells")
        logger.warning("Grid too small to smooth", shape=heights.shape, iterations=cfg.iterations)
        return heights

    result = heights
    for result in iter_smoothing(heights, cfg):
        pass

    logger.debug(
        "Smoothing completed",
        iterations=cfg.iterations,
        threshold=cfg.threshold,
        above_threshold=int(np.count_nonzero(result > cfg.threshold)),
    )
    return result
