"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera at the world origin looking down -z

Ray generation maps a pixel (column, row) with row 0 at the top to a
unit-direction world-space ray through the pixel center, using the
field of view and the image aspect ratio.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_primary_ray,
    is_camera_ready,
    primary_ray_direction,
    reset_camera,
    resize_camera,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_primary_ray",
    "primary_ray_direction",
    "get_camera_info",
    "is_camera_ready",
    "reset_camera",
    "resize_camera",
]
