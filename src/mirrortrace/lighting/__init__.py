"""Lighting module for light source models.

Components:
    directional: Infinitely distant light with constant strength
    spherical: Point light with inverse-square falloff
    lights: Light storage in Taichi fields and per-kind dispatch

Each light model provides, as Taichi functions:
    - direction_from(point): unit vector toward the light
    - strength(point): intensity arriving at the point
    - distance(point): distance used to decide whether an occluder
      actually sits between the point and the light
"""

from .directional import (
    DirectionalLight,
    directional_direction_from,
    directional_distance,
    directional_strength,
)
from .lights import (
    MAX_LIGHTS,
    LightKind,
    add_directional_light,
    add_spherical_light,
    clear_lights,
    get_light_color,
    get_light_count,
    get_light_direction_from,
    get_light_distance,
    get_light_strength,
)
from .spherical import (
    SphericalLight,
    spherical_direction_from,
    spherical_distance,
    spherical_strength,
)

__all__ = [
    # Directional
    "DirectionalLight",
    "directional_direction_from",
    "directional_strength",
    "directional_distance",
    # Spherical
    "SphericalLight",
    "spherical_direction_from",
    "spherical_strength",
    "spherical_distance",
    # Storage
    "LightKind",
    "MAX_LIGHTS",
    "add_directional_light",
    "add_spherical_light",
    "clear_lights",
    "get_light_count",
    "get_light_color",
    "get_light_direction_from",
    "get_light_strength",
    "get_light_distance",
]
