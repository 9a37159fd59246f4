from __future__ import annotations

from PIL import Image
import numpy as np
import pytest

from aiterrain.config import RenderConfig
from aiterrain.derive import (
    denormalize,
    gradient_texture_rgb,
    height_preview_u16,
    hillshade,
    to_image_rows,
)
from aiterrain.io import write_png


def test_denormalize_scales_by_max_height() -> None:
    heights = np.array([[0.0, 0.5], [0.25, 1.0]], dtype=np.float32)

    world = denormalize(heights, 100.0)

    assert world.dtype == np.float32
    assert np.allclose(world, [[0.0, 50.0], [25.0, 100.0]])
    assert np.array_equal(heights, [[0.0, 0.5], [0.25, 1.0]])


def test_denormalize_rejects_non_positive_scale() -> None:
    with pytest.raises(ValueError):
        denormalize(np.zeros((2, 2), dtype=np.float32), 0.0)


def test_gradient_texture_hits_end_stops() -> None:
    stops = ((0.0, "#000000"), (1.0, "#ff0000"))
    heights = np.array([[0.0], [1.0]], dtype=np.float32)

    rgb = gradient_texture_rgb(heights, stops)

    # [x, y] grid of shape (2, 1) becomes a 1x2 image.
    assert rgb.shape == (1, 2, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0, 0]) == (0, 0, 0)
    assert tuple(rgb[0, 1]) == (255, 0, 0)


def test_gradient_rejects_bad_stops() -> None:
    heights = np.zeros((2, 2), dtype=np.float32)
    with pytest.raises(ValueError):
        gradient_texture_rgb(heights, ((0.0, "#000000"),))
    with pytest.raises(ValueError):
        gradient_texture_rgb(heights, ((0.2, "#000000"), (1.0, "#ffffff")))


def test_hillshade_of_flat_field_is_uniform() -> None:
    shade = hillshade(np.full((8, 6), 42.0, dtype=np.float32), altitude_deg=45.0)

    assert shade.dtype == np.uint8
    assert shade.min() == shade.max()


def test_hillshade_z_factor_changes_output() -> None:
    yy, xx = np.indices((32, 32), dtype=np.float32)
    field = np.sin(xx / 4.0) * np.cos(yy / 5.0) * 10.0

    assert not np.array_equal(hillshade(field, z_factor=1.0), hillshade(field, z_factor=4.0))


def test_height_preview_and_texture_write_as_images(tmp_path) -> None:
    heights = np.linspace(0.0, 1.0, 24 * 10, dtype=np.float32).reshape(24, 10)

    preview = height_preview_u16(heights)
    assert preview.shape == to_image_rows(heights).shape
    write_png(tmp_path / "height_16.png", preview)
    write_png(tmp_path / "texture.png", gradient_texture_rgb(heights, RenderConfig().gradient))

    with Image.open(tmp_path / "height_16.png") as image:
        assert image.mode in {"I", "I;16"}
        assert image.size == (24, 10)
    with Image.open(tmp_path / "texture.png") as image:
        assert image.mode == "RGB"
        assert image.size == (24, 10)


def test_write_png_rejects_unsupported_rasters(tmp_path) -> None:
    with pytest.raises(ValueError):
        write_png(tmp_path / "float.png", np.zeros((4, 4), dtype=np.float32))
    with pytest.raises(ValueError):
        write_png(tmp_path / "rgba.png", np.zeros((4, 4, 4), dtype=np.uint8))
    assert not any(tmp_path.iterdir())
