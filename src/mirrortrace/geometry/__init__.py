"""Geometry module for shape primitives.

This module provides the two primitive kinds a scene can hold:

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection
    plane: One-sided infinite plane primitive

All intersection routines are implemented as Taichi functions (@ti.func)
and follow the pattern:
    did_hit, distance = intersect_shape(ray_origin, ray_direction, shape)

Scene-level storage and the nearest-hit query live in scene.intersection.
"""

from .plane import PLANE_EPSILON, Plane, intersect_plane, make_plane, plane_normal
from .sphere import Sphere, intersect_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "intersect_sphere",
    "sphere_normal",
    "make_sphere",
    "Plane",
    "intersect_plane",
    "plane_normal",
    "make_plane",
    "PLANE_EPSILON",
]
