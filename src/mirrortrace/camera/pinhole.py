"""Pinhole camera model for primary ray generation.

The camera sits at the world origin and looks down the negative z axis with
+y up. A pixel (column j, row i) maps to normalized device coordinates

    fov_scale = tan(radians(field_of_view) / 2)
    aspect    = width / height
    ndc_x     = ((j + 0.5) / width * 2 - 1) * aspect * fov_scale
    ndc_y     = (1 - (i + 0.5) / height * 2) * fov_scale

and the primary ray direction is normalize(ndc_x, ndc_y, -1). Row 0 is the
top of the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(width=800, height=600, field_of_view=90.0))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_primary_ray(400, 300)
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from src.mirrortrace.core.ray import WORLD_ORIGIN, Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the pinhole camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Full field of view in degrees, applied vertically and
            widened horizontally by the aspect ratio.
    """

    width: int
    height: int
    field_of_view: float

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def fov_scale(self) -> float:
        return math.tan(math.radians(self.field_of_view) / 2.0)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_width = ti.field(dtype=ti.i32, shape=())
_camera_height = ti.field(dtype=ti.i32, shape=())
_fov_scale = ti.field(dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())
_field_of_view = ti.field(dtype=ti.f32, shape=())
_camera_ready = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Push camera parameters to the device.

    Must be called before rendering and whenever the image size or field of
    view changes.

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the dimensions are not positive or the field of view
            is outside (0, 180) degrees.
    """
    if camera.width <= 0 or camera.height <= 0:
        raise ValueError(
            f"Camera dimensions must be positive, got {camera.width}x{camera.height}"
        )
    if not 0.0 < camera.field_of_view < 180.0:
        raise ValueError(
            f"Field of view must be in (0, 180) degrees, got {camera.field_of_view}"
        )

    _camera_width[None] = camera.width
    _camera_height[None] = camera.height
    _fov_scale[None] = camera.fov_scale
    _aspect_ratio[None] = camera.aspect_ratio
    _field_of_view[None] = camera.field_of_view
    _camera_ready[None] = 1


def is_camera_ready() -> bool:
    """Whether setup_camera() has been called since the last reset."""
    return bool(_camera_ready[None])


def reset_camera() -> None:
    """Forget the camera so rendering requires a new setup."""
    _camera_ready[None] = 0


def resize_camera(width: int, height: int) -> None:
    """Re-aim the current camera at a new image size, keeping its field of view.

    Raises:
        RuntimeError: If no camera has been set up.
        ValueError: If the dimensions are not positive.
    """
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    setup_camera(PinholeCamera(width=width, height=height, field_of_view=float(_field_of_view[None])))


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_primary_ray(column: ti.i32, row: ti.i32) -> Ray:
    """Generate the camera ray through the center of a pixel.

    Args:
        column: Pixel column (0 = left).
        row: Pixel row (0 = top).

    Returns:
        A Ray from the world origin with a unit direction.
    """
    width = ti.cast(_camera_width[None], ti.f32)
    height = ti.cast(_camera_height[None], ti.f32)
    fov_scale = _fov_scale[None]

    ndc_x = ((ti.cast(column, ti.f32) + 0.5) / width * 2.0 - 1.0) * _aspect_ratio[None] * fov_scale
    ndc_y = (1.0 - (ti.cast(row, ti.f32) + 0.5) / height * 2.0) * fov_scale

    origin = vec3(WORLD_ORIGIN[0], WORLD_ORIGIN[1], WORLD_ORIGIN[2])
    direction = normalize(vec3(ndc_x, ndc_y, -1.0))
    return make_ray(origin, direction)


_query_direction = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _primary_direction_kernel(column: ti.i32, row: ti.i32):
    _query_direction[None] = get_primary_ray(column, row).direction


def primary_ray_direction(column: int, row: int) -> tuple[float, float, float]:
    """Get the primary ray direction for a pixel, from Python.

    Useful for checking camera setup.
    """
    _primary_direction_kernel(column, row)
    d = _query_direction[None]
    return (float(d[0]), float(d[1]), float(d[2]))


def get_camera_info() -> dict[str, float]:
    """Get current camera state for debugging."""
    return {
        "width": int(_camera_width[None]),
        "height": int(_camera_height[None]),
        "fov_scale": float(_fov_scale[None]),
        "aspect_ratio": float(_aspect_ratio[None]),
    }
