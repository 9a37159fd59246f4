"""Output serialization for generated heightfield artifacts."""

from __future__ import annotations

import json
from pathlib import Path
import shutil
from typing import Any

import numpy as np
from PIL import Image


def resolve_output_dir(
    out_root: str | Path,
    seed: int,
    width: int,
    length: int,
    *,
    overwrite: bool,
) -> Path:
    """Create and return the output directory for one generation run."""

    target = Path(out_root) / f"seed-{seed}" / f"{width}x{length}"
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def safe_clean_output_dir(target: Path, *, out_root: Path) -> None:
    """Delete all children of ``target``, which must live under ``out_root``."""

    out_root_r = out_root.resolve()
    target_r = target.resolve()
    target_r.relative_to(out_root_r)

    if not target_r.exists():
        target_r.mkdir(parents=True, exist_ok=True)
        return

    for child in target_r.iterdir():
        if child.is_symlink() or child.is_file():
            child.unlink()
        elif child.is_dir():
            shutil.rmtree(child)


def move_tree_contents(src_dir: Path, dst_dir: Path) -> None:
    """Move all entries from src_dir into dst_dir."""

    for child in src_dir.iterdir():
        shutil.move(str(child), str(dst_dir / child.name))


def write_height_npy(path: str | Path, heights: np.ndarray) -> None:
    np.save(Path(path), heights.astype(np.float32), allow_pickle=False)


def write_png(path: str | Path, raster: np.ndarray) -> None:
    """Write an 8-bit grayscale, 16-bit grayscale or 8-bit RGB raster.

    Pillow picks the image mode from the array: ``uint8`` 2D is ``L``,
    ``uint16`` 2D is ``I;16`` and ``uint8`` with a trailing axis of 3 is ``RGB``.
    """

    gray = raster.ndim == 2 and raster.dtype in (np.uint8, np.uint16)
    rgb = raster.ndim == 3 and raster.shape[-1] == 3 and raster.dtype == np.uint8
    if not (gray or rgb):
        raise ValueError(
            f"unsupported raster {raster.dtype} {raster.shape}; expected 2D uint8/uint16 or (rows, cols, 3) uint8"
        )
    Image.fromarray(np.ascontiguousarray(raster)).save(Path(path))


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")
