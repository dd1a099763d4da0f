"""One-sided infinite plane primitive.

A plane is stored as a point on the plane and a normal. Only rays travelling
along the stored normal register a hit (dot(normal, direction) > epsilon);
the visible side is therefore the one the stored normal points away from,
and the reported surface normal is the negated stored normal.

    t = dot(point - origin, normal) / dot(normal, direction)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.geometry.plane import Plane, intersect_plane
    >>> # Floor at y = -2 visible from above
    >>> floor = Plane(point=ti.math.vec3(0, -2, 0), normal=ti.math.vec3(0, -1, 0))
"""

import taichi as ti
import taichi.math as tm

from src.mirrortrace.core.ray import normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with dot(normal, direction) at or below this count as parallel
PLANE_EPSILON = 1e-6


@ti.dataclass
class Plane:
    """An infinite plane through a point.

    Attributes:
        point: Any point on the plane (vec3).
        normal: The plane normal (vec3). Rays must travel along this
            direction to hit the plane.
    """

    point: vec3
    normal: vec3


@ti.func
def intersect_plane(ray_origin: vec3, ray_direction: vec3, plane: Plane):
    """Intersect a ray with the plane's visible face.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test.

    Returns:
        A tuple (did_hit, distance). Rays parallel to the plane or arriving
        from the hidden side never hit.
    """
    denom = tm.dot(plane.normal, ray_direction)

    did_hit = 0
    distance = 0.0

    if denom > PLANE_EPSILON:
        t = tm.dot(plane.point - ray_origin, plane.normal) / denom
        if t >= 0.0:
            did_hit = 1
            distance = t

    return did_hit, distance


@ti.func
def plane_normal(plane: Plane) -> vec3:
    """Unit normal of the visible face (the negated stored normal)."""
    return -normalize(plane.normal)


@ti.func
def make_plane(point: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and a normal."""
    return Plane(point=point, normal=normal)
