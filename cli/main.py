"""CLI entry point for heightfield generation."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from datetime import datetime, timezone
import logging
from pathlib import Path
import platform
import shutil
import sys
import tempfile
import time

import numpy as np
import structlog

from aiterrain.config import (
    DEFAULT_ITERATIONS,
    DEFAULT_LENGTH,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_NOISE_SCALE,
    DEFAULT_SEED,
    DEFAULT_THRESHOLD,
    DEFAULT_WIDTH,
    GeneratorConfig,
    NoiseConfig,
    RenderConfig,
    SmoothingConfig,
)
from aiterrain.derive import (
    denormalize,
    gradient_texture_rgb,
    height_preview_u16,
    height_preview_u8,
    hillshade,
    to_image_rows,
)
from aiterrain.errors import TerrainError
from aiterrain.heightfield import generate_heightfield
from aiterrain.io import (
    move_tree_contents,
    resolve_output_dir,
    safe_clean_output_dir,
    write_height_npy,
    write_json,
    write_png,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic noise-and-growth heightfield generator")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Integer seed selecting the noise offset")
    parser.add_argument("--out", default="out", help="Output root directory")
    parser.add_argument("--w", type=int, default=DEFAULT_WIDTH, help="Grid width in cells")
    parser.add_argument("--l", type=int, default=DEFAULT_LENGTH, help="Grid length in cells")
    parser.add_argument(
        "--scale",
        type=float,
        default=DEFAULT_NOISE_SCALE,
        help="Noise scale; larger values give smoother terrain",
    )
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS, help="Smoothing passes")
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help="Normalized height above which cells grow each pass",
    )
    parser.add_argument(
        "--max-height",
        type=float,
        default=DEFAULT_MAX_HEIGHT,
        help="World-unit height for a normalized value of 1.0",
    )
    parser.add_argument(
        "--debug-tier",
        type=int,
        choices=(0, 1),
        default=0,
        help="Debug output tier: 0=core, 1=per-iteration previews",
    )
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write metadata JSON files",
    )
    parser.add_argument("--verbose", action="store_true", help="Log pipeline events to stderr")
    return parser


def configure_logging(verbose: bool) -> None:
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO if verbose else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.iterations < 0:
        parser.error("--iterations must be >= 0")
    if args.max_height <= 0:
        parser.error("--max-height must be positive")

    config = GeneratorConfig(
        debug_tier=args.debug_tier,
        noise=NoiseConfig(width=args.w, length=args.l, noise_scale=args.scale, seed=args.seed),
        smoothing=SmoothingConfig(iterations=args.iterations, threshold=args.threshold),
        render=RenderConfig(max_height=args.max_height),
    )

    generation_start = time.perf_counter()
    try:
        result = generate_heightfield(config)
    except TerrainError as exc:
        parser.error(str(exc))
    generation_seconds = time.perf_counter() - generation_start

    render = config.render
    height_world = denormalize(result.heights, render.max_height)
    shade = hillshade(
        to_image_rows(height_world),
        azimuth_deg=render.hillshade_azimuth_deg,
        altitude_deg=render.hillshade_altitude_deg,
        z_factor=render.hillshade_z_factor,
    )
    png_outputs: dict[str, np.ndarray] = {
        "height_16.png": height_preview_u16(result.heights),
        "hillshade.png": shade,
        "texture.png": gradient_texture_rgb(result.heights, render.gradient),
    }
    if config.debug_tier >= 1:
        png_outputs["debug_initial.png"] = height_preview_u8(result.heights_initial)
        for index, heights in enumerate(result.iteration_heights, start=1):
            png_outputs[f"debug_iteration_{index:03d}.png"] = height_preview_u8(heights)

    out_dir = resolve_output_dir(
        args.out,
        args.seed,
        args.w,
        args.l,
        overwrite=args.overwrite,
    )

    stage_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=str(out_dir.parent)))
    try:
        write_height_npy(stage_dir / "height.npy", result.heights)
        write_height_npy(stage_dir / "height_world.npy", height_world)
        for name, raster in png_outputs.items():
            write_png(stage_dir / name, raster)
        if args.json:
            deterministic_meta = {
                "seed": args.seed,
                "width": args.w,
                "length": args.l,
                "offset": list(result.offset),
                "config": config.to_dict(),
                "metrics": asdict(result.metrics),
                "initial_metrics": asdict(result.initial_metrics),
            }
            meta = {
                **deterministic_meta,
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "generation_seconds": generation_seconds,
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
            }
            write_json(stage_dir / "deterministic_meta.json", deterministic_meta)
            write_json(stage_dir / "meta.json", meta)

        safe_clean_output_dir(out_dir, out_root=Path(args.out))
        move_tree_contents(stage_dir, out_dir)
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)

    metrics = result.metrics
    print(f"Generated heightfield: {out_dir}")
    print(f"Offset: ({result.offset[0]}, {result.offset[1]})")
    print(
        "Heights "
        f"min={metrics.min_height:.3f}, "
        f"max={metrics.max_height:.3f}, "
        f"mean={metrics.mean_height:.3f}"
    )
    print(
        "Plateaus: "
        f"count={metrics.num_plateaus}, "
        f"largest={metrics.largest_plateau_area} cells, "
        f"above threshold={metrics.above_threshold_fraction * 100.0:.2f}%"
    )
    print(f"Generation time: {generation_seconds:.3f} s ({args.w}x{args.l}, {args.iterations} iterations)")
    file_count = sum(1 for child in out_dir.iterdir() if child.is_file())
    print(f"Output files: {file_count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
