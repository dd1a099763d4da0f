"""Image export utilities for rendered images.

This module writes rendered images to files.

Supported formats:
    - PPM (ASCII P3, 8 bits per channel)
    - PNG (8-bit via Pillow, optional gamma)

Images are NumPy arrays of shape (height, width, 3) with row 0 at the top
and channel values in [0, 1], as returned by ``Renderer.get_image_numpy``.

Example:
    >>> from src.mirrortrace.preview.export import save_ppm
    >>> from src.mirrortrace.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(800, 600)
    >>> renderer.render()
    >>> save_ppm(renderer.get_image_numpy(), "output.ppm")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.mirrortrace.preview.display import apply_gamma

logger = logging.getLogger(__name__)


def _check_image(image: npt.NDArray[np.floating]) -> None:
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must have shape (height, width, 3), got {image.shape}")


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a float image to uint8 for display/export.

    Channels are clamped to [0, 1], optionally gamma encoded, then scaled
    by 255 and truncated.

    Args:
        image: Image array of shape (H, W, 3).
        gamma: Gamma correction value (default 1.0, linear).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    _check_image(image)
    processed = np.clip(image, 0.0, 1.0)
    processed = apply_gamma(processed.astype(np.float32), gamma)
    return (processed * 255).astype(np.uint8)


def save_ppm(image: npt.NDArray[np.float32], filepath: str | Path) -> None:
    """Save an image as an ASCII PPM (P3) file.

    The header is ``P3``, the dimensions and a maximum value of 255. Pixels
    follow row by row from the top, one ``r g b`` triple per line.

    Args:
        image: Image array of shape (H, W, 3).
        filepath: Output file path.

    Raises:
        ValueError: If the image does not have three channels.
    """
    image_uint8 = image_to_uint8(image)
    height, width, _ = image_uint8.shape

    lines = [f"{r} {g} {b}" for r, g, b in image_uint8.reshape(-1, 3).tolist()]
    with open(filepath, "w", encoding="ascii") as f:
        f.write(f"P3\n{width} {height}\n255\n")
        if lines:
            f.write("\n".join(lines))
            f.write("\n")

    logger.info("Wrote %dx%d PPM to %s", width, height, filepath)


def save_png(
    image: npt.NDArray[np.float32],
    filepath: str | Path,
    *,
    gamma: float = 1.0,
) -> None:
    """Save an image as a PNG file using Pillow.

    Args:
        image: Image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (default 1.0, linear).
    """
    image_uint8 = image_to_uint8(image, gamma=gamma)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)

    logger.info("Wrote %dx%d image to %s", image_uint8.shape[1], image_uint8.shape[0], filepath)


def load_ppm(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read an ASCII PPM (P3) file back into a uint8 array.

    Returns:
        Array of shape (height, width, 3).

    Raises:
        ValueError: If the file is not a P3 image with a maximum value of 255.
    """
    tokens = Path(filepath).read_text(encoding="ascii").split()
    if len(tokens) < 4 or tokens[0] != "P3":
        raise ValueError(f"{filepath} is not an ASCII PPM file")
    width, height, max_value = int(tokens[1]), int(tokens[2]), int(tokens[3])
    if max_value != 255:
        raise ValueError(f"Unsupported PPM maximum value {max_value}")

    values = np.array(tokens[4:], dtype=np.int64)
    if values.size != width * height * 3:
        raise ValueError(
            f"PPM has {values.size} values, expected {width * height * 3}"
        )
    return values.reshape(height, width, 3).astype(np.uint8)


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
