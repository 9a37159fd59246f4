"""Coherent noise sampling for the initial heightfield."""

from __future__ import annotations

import math

import numpy as np
import structlog

from aiterrain.config import OFFSET_RANGE, NoiseConfig
from aiterrain.errors import InvalidDimension, InvalidScale
from aiterrain.rng import RngStream

logger = structlog.get_logger()

# Reference gradient-noise permutation, doubled so lookups never wrap.
_PERMUTATION = np.array(
    [
        151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225,
        140, 36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148,
        247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32,
        57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175,
        74, 165, 71, 134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122,
        60, 211, 133, 230, 220, 105, 92, 41, 55, 46, 245, 40, 244, 102, 143, 54,
        65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89, 18, 169,
        200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64,
        52, 217, 226, 250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212,
        207, 206, 59, 227, 47, 16, 58, 17, 182, 189, 28, 42, 223, 183, 170, 213,
        119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43, 172, 9,
        129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104,
        218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241,
        81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31, 181, 199, 106, 157,
        184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138, 236, 205, 93,
        222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
    ],
    dtype=np.int64,
)
_PERM2 = np.concatenate((_PERMUTATION, _PERMUTATION))

_MAX_SAMPLE_COORD = float(2**53)

_GRADIENTS = np.array(
    [[1, 1], [-1, 1], [1, -1], [-1, -1], [1, 0], [-1, 0], [0, 1], [0, -1]],
    dtype=np.float64,
)


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def _grad(hashed: np.ndarray, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
    g = _GRADIENTS[hashed & 7]
    return g[..., 0] * dx + g[..., 1] * dy


def perlin_2d(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Evaluate 2D gradient noise at the given coordinates.

    Output is zero on every integer lattice point and stays within [-1, 1].
    Inputs broadcast against each other; the result is float64.
    """

    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    x, y = np.broadcast_arrays(x, y)

    x_floor = np.floor(x)
    y_floor = np.floor(y)
    xi = x_floor.astype(np.int64) & 255
    yi = y_floor.astype(np.int64) & 255
    xf = x - x_floor
    yf = y - y_floor

    u = _fade(xf)
    v = _fade(yf)

    a = _PERM2[xi] + yi
    b = _PERM2[xi + 1] + yi
    aa = _PERM2[a]
    ab = _PERM2[a + 1]
    ba = _PERM2[b]
    bb = _PERM2[b + 1]

    bottom = _lerp(_grad(aa, xf, yf), _grad(ba, xf - 1.0, yf), u)
    top = _lerp(_grad(ab, xf, yf - 1.0), _grad(bb, xf - 1.0, yf - 1.0), u)
    return _lerp(bottom, top, v)


def sample_offset(seed: int) -> tuple[int, int]:
    """Derive the deterministic sampling offset for ``seed``."""

    return RngStream(seed).fork("noise-offset").offset_2d(OFFSET_RANGE)


def validate_noise_config(config: NoiseConfig) -> None:
    if config.width <= 0 or config.length <= 0:
        raise InvalidDimension(
            f"width and length must be positive, got {config.width}x{config.length}"
        )
    scale = float(config.noise_scale)
    if not math.isfinite(scale) or scale <= 0.0:
        raise InvalidScale(f"noise_scale must be a positive finite number, got {config.noise_scale!r}")
    # Lattice indices are taken with floor() and an int64 cast, so every
    # sample coordinate must stay an exactly representable float integer.
    extent = (max(config.width, config.length) + OFFSET_RANGE) / scale
    if not extent <= _MAX_SAMPLE_COORD:
        raise InvalidScale(
            f"noise_scale {config.noise_scale!r} is too small for a "
            f"{config.width}x{config.length} grid"
        )


def sample_noise_field_with_offset(config: NoiseConfig) -> tuple[np.ndarray, tuple[int, int]]:
    """Sample the noise field and return it with the offset it was sampled at."""

    validate_noise_config(config)

    offset_x, offset_y = sample_offset(config.seed)
    scale = float(config.noise_scale)
    sample_x = (np.arange(config.width, dtype=np.float64) + offset_x) / scale
    sample_y = (np.arange(config.length, dtype=np.float64) + offset_y) / scale

    noise = perlin_2d(sample_x[:, None], sample_y[None, :])
    heights = np.clip((noise + 1.0) * 0.5, 0.0, 1.0).astype(np.float32)

    logger.debug(
        "Noise field sampled",
        width=config.width,
        length=config.length,
        noise_scale=scale,
        offset_x=offset_x,
        offset_y=offset_y,
    )
    return heights, (offset_x, offset_y)


def sample_noise_field(config: NoiseConfig) -> np.ndarray:
    """Sample a normalized ``(width, length)`` height grid from coherent noise.

    The grid is indexed ``[x, y]``. Identical configs give bit-identical
    grids; the seed only selects where in the noise plane the grid sits.
    """

    heights, _ = sample_noise_field_with_offset(config)
    return heights
