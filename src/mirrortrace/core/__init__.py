"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and point/vector utilities
    color: RGB color model and clamping
    integrator: Direct lighting, hard shadows and mirror reflection
    renderer: Row-batched rendering wrapper with progress reporting

All compute-intensive operations use Taichi kernels; every pixel is shaded
independently against the read-only scene fields.
"""

from .color import BLACK, Color, clamp_color
from .ray import (
    WORLD_ORIGIN,
    Ray,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    point_difference,
    point_offset,
    ray_at,
    reflect,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from src.mirrortrace.core.integrator or src.mirrortrace.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "WORLD_ORIGIN",
    "point_difference",
    "point_offset",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "Color",
    "BLACK",
    "clamp_color",
]
