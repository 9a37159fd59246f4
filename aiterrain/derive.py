"""Derived raster products from normalized heightfields.

These sit downstream of the engine: nothing here feeds back into sampling or
smoothing.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from matplotlib.colors import LinearSegmentedColormap


def to_image_rows(heights: np.ndarray) -> np.ndarray:
    """Reorder an ``[x, y]`` grid into row-major ``[y, x]`` image layout."""

    if heights.ndim != 2:
        raise ValueError("heights must be a 2D array")
    return np.ascontiguousarray(heights.T)


def denormalize(heights: np.ndarray, max_height: float) -> np.ndarray:
    """Scale normalized heights to world units."""

    if max_height <= 0:
        raise ValueError("max_height must be positive")
    return (heights.astype(np.float32) * np.float32(max_height)).astype(np.float32)


def gradient_colormap(stops: Sequence[tuple[float, str]]) -> LinearSegmentedColormap:
    """Build a colormap from ``(position, color)`` stops spanning 0 to 1."""

    if len(stops) < 2:
        raise ValueError("gradient needs at least two stops")
    positions = [float(pos) for pos, _ in stops]
    if positions[0] != 0.0 or positions[-1] != 1.0:
        raise ValueError("gradient stops must start at 0.0 and end at 1.0")
    if any(b < a for a, b in zip(positions, positions[1:])):
        raise ValueError("gradient stop positions must be non-decreasing")
    return LinearSegmentedColormap.from_list("height_gradient", list(stops))


def gradient_texture_rgb(heights: np.ndarray, stops: Sequence[tuple[float, str]]) -> np.ndarray:
    """Color each cell by evaluating the gradient at its normalized height.

    Returns an 8-bit RGB image in ``[y, x]`` layout.
    """

    cmap = gradient_colormap(stops)
    values = np.clip(to_image_rows(heights).astype(np.float64), 0.0, 1.0)
    rgba = cmap(values)
    return np.round(rgba[..., :3] * 255.0).astype(np.uint8)


def hillshade(
    height: np.ndarray,
    *,
    cell_size: float = 1.0,
    azimuth_deg: float = 315.0,
    altitude_deg: float = 45.0,
    z_factor: float = 1.0,
) -> np.ndarray:
    """Compute an 8-bit grayscale hillshade from a ``[y, x]`` heightfield."""

    if height.ndim != 2:
        raise ValueError("height must be a 2D array")
    if cell_size <= 0:
        raise ValueError("cell_size must be positive")
    if min(height.shape) < 2:
        return np.full(height.shape, 255, dtype=np.uint8)

    dz_dy, dz_dx = np.gradient(height.astype(np.float32), cell_size, cell_size)
    dz_dx = dz_dx * float(z_factor)
    dz_dy = dz_dy * float(z_factor)

    slope = np.pi / 2.0 - np.arctan(np.hypot(dz_dx, dz_dy))
    aspect = np.arctan2(-dz_dx, dz_dy)

    azimuth = np.deg2rad(azimuth_deg)
    altitude = np.deg2rad(altitude_deg)

    shaded = (
        np.sin(altitude) * np.sin(slope)
        + np.cos(altitude) * np.cos(slope) * np.cos(azimuth - aspect)
    )
    shaded = np.clip(shaded, 0.0, 1.0)
    return np.round(shaded * 255.0).astype(np.uint8)


def height_preview_u16(heights: np.ndarray) -> np.ndarray:
    """Encode normalized ``[x, y]`` heights as a 16-bit ``[y, x]`` image."""

    norm = np.clip(to_image_rows(heights).astype(np.float64), 0.0, 1.0)
    return np.round(norm * 65535.0).astype(np.uint16)


def height_preview_u8(heights: np.ndarray) -> np.ndarray:
    norm = np.clip(to_image_rows(heights).astype(np.float64), 0.0, 1.0)
    return np.round(norm * 255.0).astype(np.uint8)
