"""Sphere primitive with geometric ray-sphere intersection.

The intersection projects the center onto the ray instead of solving the
quadratic directly:

    length   = dot(center - origin, direction)
    squared  = |center - origin|^2 - length^2   (perpendicular distance^2)
    half     = sqrt(radius^2 - squared)
    t        = length - half, or length + half when the near root is behind

A ray whose origin lies inside the sphere therefore reports the exit point.
Rays are expected to carry unit-length directions.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=1.0)
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.mirrortrace.core.ray import normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def intersect_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Find the nearest forward intersection of a ray with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test.

    Returns:
        A tuple (did_hit, distance). distance is only meaningful when
        did_hit == 1 and is always >= 0 in that case.
    """
    center_line = sphere.center - ray_origin
    length = tm.dot(center_line, ray_direction)
    squared = tm.dot(center_line, center_line) - length * length
    radius_squared = sphere.radius * sphere.radius

    did_hit = 0
    distance = 0.0

    if squared <= radius_squared:
        half_chord = ti.sqrt(radius_squared - squared)
        near = length - half_chord
        far = length + half_chord

        if near >= 0.0:
            did_hit = 1
            distance = near
        elif far >= 0.0:
            # Origin inside the sphere: report the exit point
            did_hit = 1
            distance = far

    return did_hit, distance


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal at a point on the sphere surface."""
    return normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
