"""Light storage and per-kind dispatch.

Lights are kept in Taichi fields using a Structure-of-Arrays layout with a
kind tag per slot. The ``light_vectors`` field holds the travel direction of
a directional light or the position of a spherical light.

The device-side query functions take a light index and dispatch on the
kind, so shading code can loop over every light without knowing which
kinds are present:

    to_light = get_light_direction_from(i, point)
    distance = get_light_distance(i, point)
    strength = get_light_strength(i, point)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.lighting.lights import (
    ...     add_directional_light, add_spherical_light, clear_lights
    ... )
    >>> clear_lights()
    >>> add_spherical_light((-2.0, 10.0, -3.0), (0.3, 0.8, 0.3), 24000.0)
    0
"""

import logging
import math
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.mirrortrace.lighting.directional import (
    DirectionalLight,
    directional_direction_from,
    directional_distance,
    directional_strength,
)
from src.mirrortrace.lighting.spherical import (
    SphericalLight,
    spherical_direction_from,
    spherical_distance,
    spherical_strength,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


class LightKind(IntEnum):
    """Tag identifying which light model a slot holds."""

    DIRECTIONAL = 0
    SPHERICAL = 1


# Maximum number of lights in a scene
MAX_LIGHTS = 64

# Light storage: Structure of Arrays layout
light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_vectors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_strengths = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def _validate_triple(name: str, value) -> tuple[float, float, float]:
    if len(value) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(value)}")
    triple = (float(value[0]), float(value[1]), float(value[2]))
    if not all(math.isfinite(c) for c in triple):
        raise ValueError(f"{name} must be finite, got {triple}")
    return triple


def _validate_strength(strength: float) -> float:
    if not math.isfinite(strength) or strength < 0.0:
        raise ValueError(f"Light strength must be finite and non-negative, got {strength}")
    return float(strength)


def _store_light(kind: LightKind, vector, color, strength: float) -> int:
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_kinds[idx] = int(kind)
    light_vectors[idx] = list(vector)
    light_colors[idx] = list(color)
    light_strengths[idx] = strength
    num_lights[None] = idx + 1
    logger.debug("Added %s light %d", kind.name.lower(), idx)
    return idx


def clear_lights() -> None:
    """Remove all lights.

    Resets the light count to zero; stale slots are overwritten on reuse.
    """
    num_lights[None] = 0


def add_directional_light(
    direction: tuple[float, float, float],
    color: tuple[float, float, float],
    strength: float,
) -> int:
    """Add a directional light.

    Args:
        direction: The direction the light travels in. Need not be unit
            length but must not be zero.
        color: The light color (RGB).
        strength: Constant intensity (non-negative).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If the direction is zero or any value is invalid.
    """
    direction = _validate_triple("direction", direction)
    if direction == (0.0, 0.0, 0.0):
        raise ValueError("Directional light direction must be non-zero")
    color = _validate_triple("color", color)
    return _store_light(LightKind.DIRECTIONAL, direction, color, _validate_strength(strength))


def add_spherical_light(
    position: tuple[float, float, float],
    color: tuple[float, float, float],
    strength: float,
) -> int:
    """Add a spherical (point) light.

    Args:
        position: The light position in world space.
        color: The light color (RGB).
        strength: Emitted power before inverse-square falloff (non-negative).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If any value is invalid.
    """
    position = _validate_triple("position", position)
    color = _validate_triple("color", color)
    return _store_light(LightKind.SPHERICAL, position, color, _validate_strength(strength))


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Device-side Queries
# =============================================================================


@ti.func
def _directional_at(idx: ti.i32) -> DirectionalLight:
    return DirectionalLight(
        direction=light_vectors[idx], color=light_colors[idx], strength=light_strengths[idx]
    )


@ti.func
def _spherical_at(idx: ti.i32) -> SphericalLight:
    return SphericalLight(
        position=light_vectors[idx], color=light_colors[idx], strength=light_strengths[idx]
    )


@ti.func
def get_light_color(idx: ti.i32) -> vec3:
    """Color of light idx."""
    return light_colors[idx]


@ti.func
def get_light_direction_from(idx: ti.i32, point: vec3) -> vec3:
    """Unit vector from point toward light idx."""
    result = vec3(0.0, 0.0, 0.0)
    if light_kinds[idx] == int(LightKind.DIRECTIONAL):
        result = directional_direction_from(_directional_at(idx), point)
    else:
        result = spherical_direction_from(_spherical_at(idx), point)
    return result


@ti.func
def get_light_strength(idx: ti.i32, point: vec3) -> ti.f32:
    """Intensity of light idx arriving at point."""
    result = 0.0
    if light_kinds[idx] == int(LightKind.DIRECTIONAL):
        result = directional_strength(_directional_at(idx), point)
    else:
        result = spherical_strength(_spherical_at(idx), point)
    return result


@ti.func
def get_light_distance(idx: ti.i32, point: vec3) -> ti.f32:
    """Distance from point to light idx (+infinity for directional lights)."""
    result = 0.0
    if light_kinds[idx] == int(LightKind.DIRECTIONAL):
        result = directional_distance(_directional_at(idx), point)
    else:
        result = spherical_distance(_spherical_at(idx), point)
    return result
