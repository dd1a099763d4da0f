"""Scene-level shape storage and nearest-hit query.

Spheres and planes share one ordered Structure-of-Arrays store tagged by
``ShapeKind``. Each slot carries the shape's geometry together with its
surface attributes (color, irradiance, reflectivity):

    kind        SPHERE            PLANE
    origin      center            point on plane
    normal      unused            stored normal
    radius      radius            unused

``trace_scene`` tests every stored shape in insertion order and keeps the
nearest hit; with a strict ``<`` comparison the earlier shape wins ties.
The same query serves camera, shadow and reflection rays.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.scene.intersection import add_sphere, clear_scene, trace
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -5.0), 1.0, color=(1.0, 0.2, 0.2))
    0
    >>> trace((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    Hit(distance=4.0, shape_id=0)
"""

import logging
import math
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.mirrortrace.geometry.plane import Plane, intersect_plane, plane_normal
from src.mirrortrace.geometry.sphere import Sphere, intersect_sphere, sphere_normal

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ShapeKind(IntEnum):
    """Tag identifying which primitive a slot holds."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class SceneHit:
    """Device-side result of a nearest-hit query.

    Attributes:
        hit: 1 if a shape was struck, 0 otherwise.
        distance: Distance along the ray to the hit. Only valid if hit == 1.
        shape_id: Index of the struck shape. -1 on a miss.
    """

    hit: ti.i32
    distance: ti.f32
    shape_id: ti.i32


@dataclass(frozen=True)
class Hit:
    """Host-side result of a nearest-hit query.

    Attributes:
        distance: Finite, non-negative distance along the ray.
        shape_id: Index of the struck shape in the scene's shape store.

    Raises:
        ValueError: If the distance is not finite.
    """

    distance: float
    shape_id: int

    def __post_init__(self) -> None:
        if not math.isfinite(self.distance):
            raise ValueError("Intersection must have a finite distance.")


# Maximum number of shapes supported in the scene
MAX_SHAPES = 1024

# Shape storage: Structure of Arrays layout
shape_kinds = ti.field(dtype=ti.i32, shape=MAX_SHAPES)
shape_origins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_radii = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
shape_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SHAPES)
shape_irradiances = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
shape_reflectivities = ti.field(dtype=ti.f32, shape=MAX_SHAPES)
num_shapes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all shapes from the scene.

    Resets the shape count to zero. The actual field data is not cleared
    but will be overwritten when new shapes are added.
    """
    num_shapes[None] = 0


def _validate_triple(name: str, value) -> list[float]:
    if len(value) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(value)}")
    triple = [float(value[0]), float(value[1]), float(value[2])]
    if not all(math.isfinite(c) for c in triple):
        raise ValueError(f"{name} must be finite, got {tuple(triple)}")
    return triple


def _validate_surface(irradiance: float, reflectivity: float) -> None:
    if not math.isfinite(irradiance) or irradiance < 0.0:
        raise ValueError(f"Irradiance must be finite and non-negative, got {irradiance}")
    if not 0.0 <= reflectivity <= 1.0:
        raise ValueError(f"Reflectivity must be in [0, 1], got {reflectivity}")


def _store_shape(
    kind: ShapeKind,
    origin: list[float],
    normal: list[float],
    radius: float,
    color: list[float],
    irradiance: float,
    reflectivity: float,
) -> int:
    idx = num_shapes[None]
    if idx >= MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
    shape_kinds[idx] = int(kind)
    shape_origins[idx] = origin
    shape_normals[idx] = normal
    shape_radii[idx] = radius
    shape_colors[idx] = color
    shape_irradiances[idx] = irradiance
    shape_reflectivities[idx] = reflectivity
    num_shapes[None] = idx + 1
    logger.debug("Added %s %d", kind.name.lower(), idx)
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[float, float, float] = (1.0, 1.0, 1.0),
    irradiance: float = 1.0,
    reflectivity: float = 0.0,
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        color: The surface color (RGB).
        irradiance: Diffuse scaling constant (non-negative).
        reflectivity: Mirror reflectivity in [0, 1].

    Returns:
        The index of the added shape.

    Raises:
        RuntimeError: If the maximum number of shapes is exceeded.
        ValueError: If any parameter is out of range.
    """
    center_list = _validate_triple("center", center)
    if not math.isfinite(radius) or radius <= 0.0:
        raise ValueError(f"Sphere radius must be positive, got {radius}")
    color_list = _validate_triple("color", color)
    _validate_surface(irradiance, reflectivity)
    return _store_shape(
        ShapeKind.SPHERE,
        center_list,
        [0.0, 0.0, 0.0],
        float(radius),
        color_list,
        float(irradiance),
        float(reflectivity),
    )


def add_plane(
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    color: tuple[float, float, float] = (1.0, 1.0, 1.0),
    irradiance: float = 1.0,
    reflectivity: float = 0.0,
) -> int:
    """Add a one-sided plane to the scene.

    The plane is visible to rays travelling along ``normal``; its reported
    surface normal is ``-normal``.

    Args:
        point: Any point on the plane.
        normal: The plane normal (must be non-zero).
        color: The surface color (RGB).
        irradiance: Diffuse scaling constant (non-negative).
        reflectivity: Mirror reflectivity in [0, 1].

    Returns:
        The index of the added shape.

    Raises:
        RuntimeError: If the maximum number of shapes is exceeded.
        ValueError: If any parameter is out of range.
    """
    point_list = _validate_triple("point", point)
    normal_list = _validate_triple("normal", normal)
    if normal_list == [0.0, 0.0, 0.0]:
        raise ValueError("Plane normal must be non-zero")
    color_list = _validate_triple("color", color)
    _validate_surface(irradiance, reflectivity)
    return _store_shape(
        ShapeKind.PLANE,
        point_list,
        normal_list,
        0.0,
        color_list,
        float(irradiance),
        float(reflectivity),
    )


def get_shape_count() -> int:
    """Get the number of shapes in the scene."""
    return int(num_shapes[None])


# =============================================================================
# Device-side Shape Queries
# =============================================================================


@ti.func
def intersect_shape(idx: ti.i32, ray_origin: vec3, ray_direction: vec3):
    """Intersect a ray with shape idx.

    Returns:
        A tuple (did_hit, distance).
    """
    did_hit = 0
    distance = 0.0
    if shape_kinds[idx] == int(ShapeKind.SPHERE):
        sphere = Sphere(center=shape_origins[idx], radius=shape_radii[idx])
        did_hit, distance = intersect_sphere(ray_origin, ray_direction, sphere)
    else:
        plane = Plane(point=shape_origins[idx], normal=shape_normals[idx])
        did_hit, distance = intersect_plane(ray_origin, ray_direction, plane)
    return did_hit, distance


@ti.func
def get_shape_normal(idx: ti.i32, point: vec3) -> vec3:
    """Unit surface normal of shape idx at a point on its surface."""
    normal = vec3(0.0, 0.0, 0.0)
    if shape_kinds[idx] == int(ShapeKind.SPHERE):
        sphere = Sphere(center=shape_origins[idx], radius=shape_radii[idx])
        normal = sphere_normal(sphere, point)
    else:
        plane = Plane(point=shape_origins[idx], normal=shape_normals[idx])
        normal = plane_normal(plane)
    return normal


@ti.func
def get_shape_color(idx: ti.i32) -> vec3:
    return shape_colors[idx]


@ti.func
def get_shape_irradiance(idx: ti.i32) -> ti.f32:
    return shape_irradiances[idx]


@ti.func
def get_shape_reflectivity(idx: ti.i32) -> ti.f32:
    return shape_reflectivities[idx]


# =============================================================================
# Nearest-hit Query
# =============================================================================


@ti.func
def make_hit(distance: ti.f32, shape_id: ti.i32) -> SceneHit:
    """Create a hit record. The distance must be finite."""
    assert not (tm.isinf(distance) or tm.isnan(distance)), "Intersection must have a finite distance."
    return SceneHit(hit=1, distance=distance, shape_id=shape_id)


@ti.func
def make_miss() -> SceneHit:
    """Create a record indicating that no shape was struck."""
    return SceneHit(hit=0, distance=0.0, shape_id=-1)


@ti.func
def trace_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHit:
    """Find the nearest shape struck by a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHit for the nearest shape, or a miss record if no shape
        reports a forward intersection.
    """
    closest = tm.inf
    closest_id = -1

    for i in range(num_shapes[None]):
        did_hit, distance = intersect_shape(i, ray_origin, ray_direction)
        if did_hit == 1 and distance < closest:
            closest = distance
            closest_id = i

    result = make_miss()
    if closest_id >= 0:
        result = make_hit(closest, closest_id)
    return result


# =============================================================================
# Host-side Query
# =============================================================================

_query_hit = ti.field(dtype=ti.i32, shape=())
_query_distance = ti.field(dtype=ti.f32, shape=())
_query_shape_id = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _trace_kernel(ray_origin: vec3, ray_direction: vec3):
    # Single-iteration outer loop keeps the shape loop serial
    for _ in range(1):
        record = trace_scene(ray_origin, ray_direction)
        _query_hit[None] = record.hit
        _query_distance[None] = record.distance
        _query_shape_id[None] = record.shape_id


def trace(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> Hit | None:
    """Find the nearest shape struck by a ray, from Python.

    Args:
        origin: The starting point of the ray.
        direction: The ray direction (normalized by this function).

    Returns:
        A Hit for the nearest shape, or None if the ray strikes nothing.
    """
    dx, dy, dz = (float(c) for c in direction)
    norm = math.sqrt(dx * dx + dy * dy + dz * dz)
    if norm > 0.0:
        dx, dy, dz = dx / norm, dy / norm, dz / norm

    _trace_kernel(vec3(*origin), vec3(dx, dy, dz))

    if _query_hit[None] == 0:
        return None
    return Hit(distance=float(_query_distance[None]), shape_id=int(_query_shape_id[None]))
