"""Heightfield summary metrics and invariant checks."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.ndimage import label

from aiterrain.errors import RangeViolation

_FOUR_CONNECTED = np.array([[0, 1, 0], [1, 1, 1], [0, 1, 0]], dtype=bool)
_EIGHT_CONNECTED = np.ones((3, 3), dtype=bool)


@dataclass(frozen=True)
class HeightMetrics:
    """Range and plateau summary for a normalized height grid."""

    min_height: float
    max_height: float
    mean_height: float
    above_threshold_fraction: float
    num_plateaus: int
    largest_plateau_area: int
    largest_plateau_ratio: float


def assert_normalized(heights: np.ndarray) -> None:
    """Raise :class:`RangeViolation` unless every cell is finite and in [0, 1]."""

    if heights.size == 0:
        return
    if not np.isfinite(heights).all():
        raise RangeViolation("height grid contains non-finite values")
    lo = float(heights.min())
    hi = float(heights.max())
    if lo < 0.0 or hi > 1.0:
        raise RangeViolation(f"height grid spans [{lo}, {hi}], expected [0, 1]")


def plateau_sizes(mask: np.ndarray, *, connectivity: int = 4) -> np.ndarray:
    """Return the area of each connected region of ``mask``, largest first."""

    if mask.ndim != 2:
        raise ValueError("mask must be 2D")
    if connectivity not in (4, 8):
        raise ValueError("connectivity must be 4 or 8")

    structure = _FOUR_CONNECTED if connectivity == 4 else _EIGHT_CONNECTED
    labels, count = label(mask.astype(bool, copy=False), structure=structure)
    if count == 0:
        return np.zeros(0, dtype=np.int64)
    sizes = np.bincount(labels.ravel(), minlength=count + 1)[1:]
    return np.sort(sizes)[::-1].astype(np.int64)


def height_metrics(heights: np.ndarray, *, threshold: float, connectivity: int = 4) -> HeightMetrics:
    """Summarize a height grid; plateaus are connected cells above ``threshold``."""

    if heights.ndim != 2:
        raise ValueError("heights must be 2D")
    if heights.size == 0:
        return HeightMetrics(0.0, 0.0, 0.0, 0.0, 0, 0, 0.0)

    above = heights > threshold
    sizes = plateau_sizes(above, connectivity=connectivity)
    total_above = int(above.sum())
    largest = int(sizes[0]) if sizes.size else 0

    return HeightMetrics(
        min_height=float(heights.min()),
        max_height=float(heights.max()),
        mean_height=float(heights.mean(dtype=np.float64)),
        above_threshold_fraction=float(total_above / heights.size),
        num_plateaus=int(sizes.size),
        largest_plateau_area=largest,
        largest_plateau_ratio=float(largest / total_above) if total_above else 0.0,
    )
