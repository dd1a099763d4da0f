"""Matplotlib-based preview display for rendered images.

Rendered images are already clamped to [0, 1], so display only needs an
optional gamma curve.

Example:
    >>> from src.mirrortrace.preview.display import show_preview
    >>> from src.mirrortrace.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(800, 600)
    >>> renderer.render()
    >>> show_preview(renderer.get_image_numpy())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from matplotlib.figure import Figure


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array of shape (H, W, 3) in [0, 1] range.
        gamma: Gamma value. 1.0 returns the image unchanged.

    Returns:
        Gamma corrected image.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)

    # Apply gamma encoding: out = in^(1/gamma)
    result = np.power(image, 1.0 / gamma)

    return result.astype(np.float32)


def show_preview(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> Figure:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: Image array of shape (H, W, 3), row 0 at the top.
        gamma: Gamma correction value (default 1.0, linear).
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.

    Returns:
        The Matplotlib figure.
    """
    import matplotlib.pyplot as plt

    display_image = apply_gamma(np.clip(image, 0.0, 1.0).astype(np.float32), gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    # origin="upper" puts row 0 at the top, matching the render buffer
    ax.imshow(display_image, origin="upper")
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
    return fig


def show_comparison(
    image_a: npt.NDArray[np.float32],
    image_b: npt.NDArray[np.float32],
    *,
    labels: tuple[str, str] = ("A", "B"),
    figsize: tuple[float, float] = (15, 5),
    block: bool = True,
) -> float:
    """Show two renders next to a heat map of where they differ.

    Handy for checking what a scene edit does, e.g. setting every
    reflectivity to zero. The heat map shows the largest per-channel
    difference at each pixel.

    Returns:
        RMSE between the two images.
    """
    import matplotlib.pyplot as plt

    from src.mirrortrace.preview.export import compute_rmse

    rmse = compute_rmse(image_a, image_b)
    per_pixel = np.abs(image_a.astype(np.float64) - image_b.astype(np.float64)).max(axis=2)

    fig, (left, middle, right) = plt.subplots(1, 3, figsize=figsize)
    for ax, image, label in ((left, image_a, labels[0]), (middle, image_b, labels[1])):
        ax.imshow(np.clip(image, 0.0, 1.0), origin="upper")
        ax.set_title(label)
        ax.axis("off")

    heat = right.imshow(per_pixel, origin="upper", cmap="magma", vmin=0.0, vmax=1.0)
    right.set_title(f"Max channel difference (RMSE {rmse:.4f})")
    right.axis("off")
    fig.colorbar(heat, ax=right, fraction=0.046)

    fig.tight_layout()
    plt.show(block=block)
    return rmse
