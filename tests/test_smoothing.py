from __future__ import annotations

import numpy as np
import pytest

from aiterrain.config import SmoothingConfig
from aiterrain.errors import DimensionMismatch
from aiterrain.smoothing import iter_smoothing, smooth_heights, smooth_step


def _random_grid(width: int, length: int, seed: int = 0) -> np.ndarray:
    rng = np.random.Generator(np.random.PCG64(seed))
    return rng.uniform(0.0, 1.0, size=(width, length)).astype(np.float32)


def _border(grid: np.ndarray) -> np.ndarray:
    return np.concatenate((grid[0, :], grid[-1, :], grid[1:-1, 0], grid[1:-1, -1]))


def test_zero_iterations_returns_input_unchanged() -> None:
    grid = _random_grid(16, 12)
    result = smooth_heights(grid, SmoothingConfig(iterations=0, threshold=0.5))

    assert result is grid
    assert np.array_equal(result, grid)


def test_border_cells_are_never_touched() -> None:
    grid = _random_grid(20, 14, seed=4)
    snapshot = grid.copy()

    result = smooth_heights(grid, SmoothingConfig(iterations=7, threshold=0.4))

    assert np.array_equal(_border(result), _border(snapshot))
    assert np.array_equal(grid, snapshot)
    assert not np.array_equal(result[1:-1, 1:-1], snapshot[1:-1, 1:-1])


def test_uniform_field_above_threshold_grows() -> None:
    grid = np.full((5, 5), 0.9, dtype=np.float32)

    result = smooth_heights(grid, SmoothingConfig(iterations=1, threshold=0.5))

    assert np.allclose(result[1:-1, 1:-1], 0.91, atol=1e-6)
    assert np.array_equal(_border(result), _border(grid))


def test_uniform_field_below_threshold_is_stable() -> None:
    grid = np.full((5, 5), 0.3, dtype=np.float32)

    result = smooth_heights(grid, SmoothingConfig(iterations=1, threshold=0.5))

    assert np.allclose(result, 0.3, atol=1e-6)


def test_growth_branches_on_pre_pass_value() -> None:
    # Center above threshold, blended value below it: still grows.
    grid = np.zeros((3, 3), dtype=np.float32)
    grid[1, 1] = 0.6
    result = smooth_step(grid, threshold=0.5)
    assert float(result[1, 1]) == pytest.approx(0.37, abs=1e-6)

    # Center below threshold, blended value above it: no growth.
    grid = np.ones((3, 3), dtype=np.float32)
    grid[1, 1] = 0.4
    result = smooth_step(grid, threshold=0.5)
    assert float(result[1, 1]) == pytest.approx(0.64, abs=1e-6)


def test_neighbor_reads_use_previous_iteration() -> None:
    grid = np.zeros((5, 5), dtype=np.float32)
    grid[2, 2] = 1.0

    result = smooth_heights(grid, SmoothingConfig(iterations=1, threshold=0.5))

    assert float(result[2, 2]) == pytest.approx(0.61, abs=1e-6)
    for x, y in ((1, 2), (3, 2), (2, 1), (2, 3)):
        assert float(result[x, y]) == pytest.approx(0.1, abs=1e-6)
    # Diagonals only see zeros from the previous iteration.
    for x, y in ((1, 1), (1, 3), (3, 1), (3, 3)):
        assert float(result[x, y]) == 0.0


def test_integer_grid_is_not_truncated() -> None:
    grid = np.zeros((5, 5), dtype=np.int64)
    grid[2, 2] = 1

    result = smooth_heights(grid, SmoothingConfig(iterations=1, threshold=0.5))

    assert np.issubdtype(result.dtype, np.floating)
    assert float(result[2, 2]) == pytest.approx(0.61, abs=1e-9)
    for x, y in ((1, 2), (3, 2), (2, 1), (2, 3)):
        assert float(result[x, y]) == pytest.approx(0.1, abs=1e-9)


def test_growth_is_clamped_to_one() -> None:
    grid = np.full((6, 6), 0.995, dtype=np.float32)

    for heights in iter_smoothing(grid, SmoothingConfig(iterations=50, threshold=0.5)):
        assert float(heights.max()) <= 1.0

    result = smooth_heights(grid, SmoothingConfig(iterations=50, threshold=0.5))
    assert np.allclose(result[1:-1, 1:-1], 1.0, atol=1e-6)


def test_every_iteration_stays_in_range() -> None:
    grid = _random_grid(32, 24, seed=9)
    config = SmoothingConfig(iterations=12, threshold=0.3)

    iterations = list(iter_smoothing(grid, config))

    assert len(iterations) == 12
    for heights in iterations:
        assert heights.shape == grid.shape
        assert float(heights.min()) >= 0.0
        assert float(heights.max()) <= 1.0
    assert np.array_equal(iterations[-1], smooth_heights(grid, config))


def test_each_iteration_returns_a_new_array() -> None:
    grid = _random_grid(8, 8, seed=2)
    results = list(iter_smoothing(grid, SmoothingConfig(iterations=3, threshold=0.5)))

    assert all(heights is not grid for heights in results)
    assert results[0] is not results[1]


@pytest.mark.parametrize("shape", [(1, 1), (2, 2), (1, 7), (7, 2), (2, 9)])
@pytest.mark.parametrize("iterations", [0, 1, 5])
def test_degenerate_grids_are_returned_unchanged(shape: tuple[int, int], iterations: int) -> None:
    grid = _random_grid(*shape, seed=1)
    snapshot = grid.copy()

    result = smooth_heights(grid, SmoothingConfig(iterations=iterations, threshold=0.1))

    assert np.array_equal(result, snapshot)


def test_degenerate_grid_raises_when_strict() -> None:
    grid = _random_grid(2, 2)

    with pytest.raises(DimensionMismatch):
        smooth_heights(grid, SmoothingConfig(iterations=1, threshold=0.5), strict=True)


def test_non_2d_grid_is_rejected() -> None:
    with pytest.raises(DimensionMismatch):
        smooth_heights(np.zeros(9, dtype=np.float32), SmoothingConfig(iterations=1))


def test_negative_iterations_are_rejected() -> None:
    with pytest.raises(ValueError):
        smooth_heights(_random_grid(4, 4), SmoothingConfig(iterations=-1))


def test_smoothing_reduces_roughness() -> None:
    grid = _random_grid(40, 40, seed=6)
    # Threshold above 1 disables growth so only averaging remains.
    result = smooth_heights(grid, SmoothingConfig(iterations=5, threshold=2.0))

    rough_before = float(np.mean(np.abs(np.diff(grid[1:-1, 1:-1], axis=0))))
    rough_after = float(np.mean(np.abs(np.diff(result[1:-1, 1:-1], axis=0))))
    assert rough_after < rough_before
