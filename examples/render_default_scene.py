#!/usr/bin/env python3
"""Render the default scene, or a scene loaded from JSON.

This script demonstrates end-to-end rendering with the mirrortrace ray
tracer. It builds the scene, renders it in bands of rows with progress
output and saves the result as PPM or PNG.

Usage:
    python -m examples.render_default_scene [options]

Options:
    --width WIDTH         Image width in pixels (default: scene setting)
    --height HEIGHT       Image height in pixels (default: scene setting)
    --fov DEGREES         Field of view in degrees (default: scene setting)
    --scene PATH          Load the scene from a JSON file
    --output OUTPUT       Output file path (default: render.ppm)
    --format {ppm,png}    Output format (default: from the output extension)
    --batch-rows ROWS     Rows per progress update (default: 32)
    --arch {cpu,gpu}      Taichi backend (default: gpu, falling back to cpu)
    --quiet               Suppress progress output
    --verbose             Enable debug logging

Example:
    python -m examples.render_default_scene --width 400 --height 300 --output scene.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default mirrortrace scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: scene setting)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: scene setting)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=None,
        help="Field of view in degrees (default: scene setting)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Load the scene from a JSON file instead of the default scene",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.ppm",
        help="Output file path (default: render.ppm)",
    )
    parser.add_argument(
        "--format",
        choices=("ppm", "png"),
        default=None,
        help="Output format (default: from the output file extension)",
    )
    parser.add_argument(
        "--batch-rows",
        type=int,
        default=32,
        help="Rows per progress update (default: 32)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="gpu",
        help="Taichi backend (default: gpu, falling back to cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_scene(
    output_path: str = "render.ppm",
    *,
    width: int | None = None,
    height: int | None = None,
    field_of_view: float | None = None,
    scene_path: str | None = None,
    output_format: str | None = None,
    batch_rows: int = 32,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        output_path: Output file path.
        width: Override for the image width.
        height: Override for the image height.
        field_of_view: Override for the field of view.
        scene_path: JSON scene file. None renders the default scene.
        output_format: "ppm" or "png". None picks from the file extension.
        batch_rows: Number of rows to render between progress updates.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.mirrortrace.core.renderer import Renderer
    from src.mirrortrace.preview.export import save_png, save_ppm
    from src.mirrortrace.scene.default_scene import create_default_scene
    from src.mirrortrace.scene.manager import SceneManager

    if scene_path is not None:
        scene = SceneManager.load_json(scene_path)
    else:
        scene = create_default_scene()

    if width is not None:
        scene.width = width
    if height is not None:
        scene.height = height
    if field_of_view is not None:
        scene.field_of_view = field_of_view
    scene.apply()

    if not quiet:
        print(
            f"Rendering {scene.width}x{scene.height} scene with "
            f"{scene.get_shape_count()} shapes and {scene.get_light_count()} lights..."
        )

    renderer = Renderer(scene.width, scene.height)

    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {elapsed:.1f}s",
                end="",
                flush=True,
            )

    renderer.render(batch_rows=batch_rows, callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    if output_format is None:
        output_format = "png" if output_file.suffix.lower() == ".png" else "ppm"

    image = renderer.get_image_numpy()
    if output_format == "png":
        save_png(image, output_file)
    else:
        save_ppm(image, output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.arch == "cpu":
        ti.init(arch=ti.cpu)
    else:
        # ti.gpu falls back to the CPU backend when no GPU is available
        ti.init(arch=ti.gpu)
    if not args.quiet:
        print(f"Using {args.arch.upper()} backend")

    try:
        render_scene(
            args.output,
            width=args.width,
            height=args.height,
            field_of_view=args.fov,
            scene_path=args.scene,
            output_format=args.format,
            batch_rows=args.batch_rows,
            quiet=args.quiet,
        )
        return 0
    except (OSError, RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
