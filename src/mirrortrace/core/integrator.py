"""Whitted-style integrator: direct lighting, hard shadows, mirror reflection.

For a camera ray that strikes a shape, the color is built in two steps:

1. Direct lighting. For every light a shadow ray leaves the hit point,
   offset along the surface normal by the scene's shadow bias. The light
   counts only if nothing is struck, or the nearest occluder lies beyond
   the light. Each visible light adds

       shape_color * light_color * max(dot(N, L), 0) * strength * irradiance / pi

   and the sum is clamped to [0, 1].

2. Reflection. If the shape is reflective, one mirror ray is traced from the
   same biased origin. Its color c_r (black on a miss) is blended in a fixed
   number of times:

       repeat REFLECTION_BLEND_ITERATIONS times:
           color = color * reflectivity + reflectivity * c_r

   The same reflected color is reused by every blend iteration. c_r is
   computed by the same two steps at the next bounce, up to
   MAX_REFLECTION_DEPTH bounces; beyond that c_r is black.

Because the blend is linear in c_r, the bounce chain is evaluated front to
back with a scalar weight instead of recursion. Per-pixel results are
clamped when they are written to the image buffer.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.core.integrator import (
    ...     render_image, render_pixel, setup_render_target
    ... )
    >>> from src.mirrortrace.scene.default_scene import create_default_scene
    >>>
    >>> scene = create_default_scene()
    >>> setup_render_target(scene.width, scene.height)
    >>> render_image()
"""

import logging
import math
import time

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.mirrortrace.camera.pinhole import get_primary_ray, is_camera_ready
from src.mirrortrace.core.color import Color, clamp_color
from src.mirrortrace.core.ray import reflect
from src.mirrortrace.lighting.lights import (
    get_light_color,
    get_light_direction_from,
    get_light_distance,
    get_light_strength,
    num_lights,
)
from src.mirrortrace.scene.intersection import (
    get_shape_color,
    get_shape_irradiance,
    get_shape_normal,
    get_shape_reflectivity,
    trace_scene,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Number of times the reflected color is blended into a reflective surface
REFLECTION_BLEND_ITERATIONS = 2

# Maximum chain of mirror bounces after the camera hit
MAX_REFLECTION_DEPTH = 2

# Shadow bias used until a scene sets its own
DEFAULT_SHADOW_BIAS = 0.1

# =============================================================================
# Shadow Bias
# =============================================================================

_shadow_bias = ti.field(dtype=ti.f32, shape=())


def set_shadow_bias(bias: float) -> None:
    """Set the offset applied along the normal to shadow and reflection rays.

    Args:
        bias: A small positive distance.

    Raises:
        ValueError: If bias is not a finite positive number.
    """
    if not math.isfinite(bias) or bias <= 0.0:
        raise ValueError(f"Shadow bias must be a finite positive number, got {bias}")
    _shadow_bias[None] = bias


def get_shadow_bias() -> float:
    """Get the shadow bias used for shadow and reflection rays."""
    bias = float(_shadow_bias[None])
    return bias if bias > 0.0 else DEFAULT_SHADOW_BIAS


def reset_shadow_bias() -> None:
    """Return to DEFAULT_SHADOW_BIAS."""
    _shadow_bias[None] = 0.0


@ti.func
def current_shadow_bias() -> ti.f32:
    """Shadow bias in effect, falling back to DEFAULT_SHADOW_BIAS while unset."""
    bias = _shadow_bias[None]
    if bias <= 0.0:
        bias = DEFAULT_SHADOW_BIAS
    return bias


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Clamped color per pixel, indexed [column, row] with row 0 at the top
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer. The buffer is
    preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to black."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Forget the render target so rendering requires a new setup."""
    _render_target_initialized[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_camera_ready() -> None:
    """Check if a camera is set up and raise if not."""
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def direct_lighting(hit_point: vec3, normal: vec3, shape_id: ti.i32) -> vec3:
    """Sum the unclamped contribution of every light at a surface point.

    Args:
        hit_point: The point on the surface.
        normal: The unit surface normal at hit_point.
        shape_id: The shape being shaded.

    Returns:
        The accumulated color (not clamped).
    """
    color = vec3(0.0, 0.0, 0.0)
    shadow_origin = hit_point + normal * current_shadow_bias()
    surface_color = get_shape_color(shape_id)
    light_reflected = get_shape_irradiance(shape_id) / tm.pi

    for li in range(num_lights[None]):
        to_light = get_light_direction_from(li, hit_point)
        occluder = trace_scene(shadow_origin, to_light)

        # An occluder beyond the light does not cast a shadow
        intensity = 0.0
        if occluder.hit == 0:
            intensity = get_light_strength(li, hit_point)
        elif occluder.distance > get_light_distance(li, hit_point):
            intensity = get_light_strength(li, hit_point)

        light_power = tm.max(tm.dot(normal, to_light), 0.0) * intensity
        light_color = get_light_color(li) * light_power * light_reflected
        color += surface_color * light_color

    return color


@ti.func
def shade(ray_origin: vec3, ray_direction: vec3, hit_distance: ti.f32, shape_id: ti.i32) -> vec3:
    """Compute the color seen along a ray that struck a shape.

    Args:
        ray_origin: Origin of the ray that produced the hit.
        ray_direction: Unit direction of that ray.
        hit_distance: Distance along the ray to the hit.
        shape_id: The struck shape.

    Returns:
        The shaded color. Direct lighting at each bounce is clamped but the
        blended result is not.
    """
    radiance = vec3(0.0, 0.0, 0.0)
    # Weight of the current bounce's color in the camera hit's color
    weight = 1.0

    origin = ray_origin
    direction = ray_direction
    distance = hit_distance
    current = shape_id
    active = 1

    for depth in range(MAX_REFLECTION_DEPTH + 1):
        if active == 1:
            hit_point = origin + distance * direction
            normal = get_shape_normal(current, hit_point)
            color = clamp_color(direct_lighting(hit_point, normal, current))
            reflectivity = get_shape_reflectivity(current)

            if reflectivity > 0.0:
                # color_n = color * r^n + c_r * (r^n + ... + r)
                direct_scale = 1.0
                reflected_scale = 0.0
                for _ in ti.static(range(REFLECTION_BLEND_ITERATIONS)):
                    direct_scale *= reflectivity
                    reflected_scale = reflected_scale * reflectivity + reflectivity

                radiance += weight * direct_scale * color
                active = 0

                if depth < MAX_REFLECTION_DEPTH:
                    reflection_origin = hit_point + normal * current_shadow_bias()
                    reflection_direction = reflect(direction, normal)
                    reflected = trace_scene(reflection_origin, reflection_direction)
                    if reflected.hit == 1:
                        weight *= reflected_scale
                        origin = reflection_origin
                        direction = reflection_direction
                        distance = reflected.distance
                        current = reflected.shape_id
                        active = 1
            else:
                radiance += weight * color
                active = 0

    return radiance


@ti.func
def render_pixel_impl(column: ti.i32, row: ti.i32) -> vec3:
    """Clamped color of one pixel.

    Args:
        column: Pixel column (0 = left).
        row: Pixel row (0 = top).

    Returns:
        The pixel color with every channel in [0, 1].
    """
    ray = get_primary_ray(column, row)
    record = trace_scene(ray.origin, ray.direction)

    # Rays that strike nothing are black
    color = vec3(0.0, 0.0, 0.0)
    if record.hit == 1:
        color = shade(ray.origin, ray.direction, record.distance, record.shape_id)

    return clamp_color(color)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows_kernel(width: ti.i32, row_start: ti.i32, row_stop: ti.i32):
    """Render every pixel in rows [row_start, row_stop)."""
    for i, j in ti.ndrange(width, (row_start, row_stop)):
        _color_buffer[i, j] = render_pixel_impl(i, j)


_single_pixel = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _render_single_pixel(column: ti.i32, row: ti.i32):
    """Render one pixel into _single_pixel."""
    # Single-iteration outer loop keeps the light and shape loops serial
    for _ in range(1):
        _single_pixel[None] = render_pixel_impl(column, row)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_pixel(column: int, row: int) -> Color:
    """Render a single pixel.

    Depends only on the scene and the pixel coordinates; the image buffer is
    not touched.

    Args:
        column: Pixel column (0 = left).
        row: Pixel row (0 = top).

    Returns:
        The clamped pixel Color.

    Raises:
        RuntimeError: If render target has not been set up.
            or no camera has been set up.
        ValueError: If the pixel lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= column < width and 0 <= row < height):
        raise ValueError(f"Pixel ({column}, {row}) outside {width}x{height} image")
    _check_camera_ready()

    _render_single_pixel(column, row)
    return Color.from_vec(_single_pixel[None])


def render_rows(row_start: int, row_stop: int) -> None:
    """Render the rows [row_start, row_stop) into the image buffer.

    Raises:
        RuntimeError: If render target has not been set up.
            or no camera has been set up.
        ValueError: If the row range is invalid.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_stop <= height:
        raise ValueError(f"Invalid row range [{row_start}, {row_stop}) for height {height}")
    if row_start == row_stop:
        return

    _check_camera_ready()

    _render_rows_kernel(width, row_start, row_stop)


def render_image() -> None:
    """Render every pixel of the image into the buffer.

    Raises:
        RuntimeError: If render target has not been set up.
            or no camera has been set up.
    """
    _check_render_target_initialized()
    _check_camera_ready()

    width, height = get_image_dimensions()
    start = time.perf_counter()
    _render_rows_kernel(width, 0, height)
    ti.sync()
    logger.info("Rendered %dx%d image in %.3fs", width, height, time.perf_counter() - start)


def get_image() -> "ti.MatrixField":
    """Get the color buffer.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Returns:
        Array of shape (height, width, 3), row 0 at the top, every channel
        in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()

    # Extract active region and transpose [column, row] to [row, column]
    image = full_image[:width, :height, :]
    image = np.transpose(image, (1, 0, 2))

    return np.clip(image, 0.0, 1.0).astype(np.float32)
