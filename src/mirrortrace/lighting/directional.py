"""Directional (infinitely distant) light.

A directional light shines along a fixed direction everywhere in the scene,
like sunlight. It has no position, so it is never closer to a surface than
an occluder: its distance is reported as +infinity and its strength does
not fall off.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.lighting.directional import DirectionalLight
    >>> # Light shining straight down
    >>> sun = DirectionalLight(
    ...     direction=ti.math.vec3(0, -1, 0),
    ...     color=ti.math.vec3(1, 1, 1),
    ...     strength=2.0,
    ... )
"""

import taichi as ti
import taichi.math as tm

from src.mirrortrace.core.ray import normalize

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class DirectionalLight:
    """Directional light properties.

    Attributes:
        direction: The direction the light travels in (vec3).
        color: The light color (RGB).
        strength: Constant intensity at every point.
    """

    direction: vec3
    color: vec3
    strength: ti.f32


@ti.func
def directional_direction_from(light: DirectionalLight, point: vec3) -> vec3:
    """Unit vector from a surface point toward the light.

    The same everywhere: the negated travel direction.
    """
    return -normalize(light.direction)


@ti.func
def directional_strength(light: DirectionalLight, point: vec3) -> ti.f32:
    """Intensity at a point (no falloff)."""
    return light.strength


@ti.func
def directional_distance(light: DirectionalLight, point: vec3) -> ti.f32:
    """Distance to the light, always +infinity."""
    return tm.inf
