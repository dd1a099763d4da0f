"""Row-batched renderer with progress reporting.

This module provides a convenient wrapper around the core integrator that supports:
- Rendering the image in bands of rows
- Progress callbacks for UI updates
- A generator interface so a caller can stop between bands

Every pixel depends only on the scene, so rendering a band is independent of
the bands before it and stopping early leaves the remaining rows black.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.core.renderer import Renderer
    >>> from src.mirrortrace.scene.default_scene import create_default_scene
    >>>
    >>> scene = create_default_scene()
    >>> renderer = Renderer(scene.width, scene.height)
    >>> renderer.render(batch_rows=64)
    >>> image = renderer.get_image_numpy()
"""

import logging
from collections.abc import Callable, Generator
from typing import Any

import numpy as np
import numpy.typing as npt

from src.mirrortrace.camera.pinhole import is_camera_ready, resize_camera
from src.mirrortrace.core.integrator import (
    clear_render_target,
    get_image,
    get_image_numpy,
    render_rows,
    setup_render_target,
)

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the active scene into the shared image buffer.

    The renderer keeps its own width/height and delegates to the global
    integrator buffers (which are Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).

        Raises:
            ValueError: If dimensions are invalid or exceed the maximum.
        """
        self._width = width
        self._height = height
        self._rows_done = 0
        self._setup_target(width, height)

    def _setup_target(self, width: int, height: int) -> None:
        setup_render_target(width, height)
        # The camera maps pixels through its own size, which must match the image
        if is_camera_ready():
            resize_camera(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def rows_done(self) -> int:
        """Number of rows rendered since the last reset."""
        return self._rows_done

    @property
    def is_complete(self) -> bool:
        return self._rows_done >= self._height

    def reset(self) -> None:
        """Clear the image so the next render starts from the top row."""
        clear_render_target()
        self._rows_done = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and the camera, and reset progress.

        Raises:
            ValueError: If dimensions are invalid or exceed the maximum.
        """
        self._setup_target(width, height)
        self._width = width
        self._height = height
        self._rows_done = 0

    def render(
        self,
        batch_rows: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the remaining rows of the image.

        Args:
            batch_rows: Rows to render before each callback. None renders
                everything in a single pass.
            callback: Optional callback called after each batch with
                (rows_done, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(batch_rows=100, callback=progress)
        """
        for rows_done, total in self.render_progressive(batch_rows):
            if callback is not None:
                callback(rows_done, total)

    def render_progressive(
        self,
        batch_rows: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the remaining rows, yielding progress after each batch.

        Abandoning the generator stops rendering after the current batch.

        Args:
            batch_rows: Rows to render before each yield. None renders
                everything in a single pass.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If batch_rows is not positive.
        """
        if batch_rows is None:
            batch_rows = self._height
        if batch_rows <= 0:
            raise ValueError(f"batch_rows must be positive, got {batch_rows}")

        while self._rows_done < self._height:
            stop = min(self._rows_done + batch_rows, self._height)
            render_rows(self._rows_done, stop)
            logger.debug("Rendered rows [%d, %d)", self._rows_done, stop)
            self._rows_done = stop
            yield (self._rows_done, self._height)

    def get_image(self) -> Any:
        """Get the raw Taichi color buffer field.

        Note: This returns the full preallocated buffer. Use width/height
        properties to determine the active region.
        """
        return get_image()

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a (height, width, 3) float32 array in [0, 1]."""
        return get_image_numpy()

    def get_image_uint8(self, gamma: float = 1.0) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Args:
            gamma: Gamma correction value. Default 1.0 (linear), which
                matches the PPM output.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        from src.mirrortrace.preview.export import image_to_uint8

        return image_to_uint8(self.get_image_numpy(), gamma=gamma)

    def save_image(self, filepath: str, gamma: float = 1.0) -> None:
        """Save the rendered image, choosing PPM or PNG from the extension.

        Args:
            filepath: Output path ending in ".ppm" or another Pillow format.
            gamma: Gamma correction value for non-PPM output.
        """
        from src.mirrortrace.preview.export import save_png, save_ppm

        image = self.get_image_numpy()
        if filepath.lower().endswith(".ppm"):
            save_ppm(image, filepath)
        else:
            save_png(image, filepath, gamma=gamma)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done})"
        )
