"""Spherical (point) light with inverse-square falloff.

A spherical light radiates its strength uniformly over the sphere of
directions, so the intensity reaching a point at distance d is

    strength / (4 * pi * d^2)

The light must not coincide with the shaded point; that case divides by
zero and is left to scene construction to avoid.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.lighting.spherical import SphericalLight
    >>> bulb = SphericalLight(
    ...     position=ti.math.vec3(-2, 10, -3),
    ...     color=ti.math.vec3(0.3, 0.8, 0.3),
    ...     strength=24000.0,
    ... )
"""

import taichi as ti
import taichi.math as tm

from src.mirrortrace.core.ray import length, length_squared, normalize

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class SphericalLight:
    """Spherical light properties.

    Attributes:
        position: The light position in world space (vec3).
        color: The light color (RGB).
        strength: Total emitted power before falloff.
    """

    position: vec3
    color: vec3
    strength: ti.f32


@ti.func
def spherical_direction_from(light: SphericalLight, point: vec3) -> vec3:
    """Unit vector from a surface point toward the light position."""
    return normalize(light.position - point)


@ti.func
def spherical_strength(light: SphericalLight, point: vec3) -> ti.f32:
    """Intensity at a point after inverse-square falloff."""
    distance_squared = length_squared(light.position - point)
    return light.strength / (4.0 * tm.pi * distance_squared)


@ti.func
def spherical_distance(light: SphericalLight, point: vec3) -> ti.f32:
    """Euclidean distance from a point to the light."""
    return length(light.position - point)
