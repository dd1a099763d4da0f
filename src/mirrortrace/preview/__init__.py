"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PPM/PNG image export utilities

Example:
    >>> from src.mirrortrace.preview import save_ppm, show_preview
    >>> from src.mirrortrace.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(800, 600)
    >>> renderer.render()
    >>> save_ppm(renderer.get_image_numpy(), "output.ppm")
    >>> show_preview(renderer.get_image_numpy())
"""

from src.mirrortrace.preview.display import (
    apply_gamma,
    show_comparison,
    show_preview,
)
from src.mirrortrace.preview.export import (
    compute_rmse,
    image_to_uint8,
    load_ppm,
    save_png,
    save_ppm,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    "apply_gamma",
    # Export functions
    "save_ppm",
    "load_ppm",
    "save_png",
    "image_to_uint8",
    "compute_rmse",
]
