"""Scene manager coordinating shapes, lights and render settings.

This module provides a high-level scene management API over the module-level
shape and light stores. Besides populating those stores, the SceneManager
keeps a host-side record of everything it added so a scene can be exported
to and rebuilt from a plain configuration (dict or JSON file).

The SceneManager maintains:
- Image size, field of view and shadow bias
- SphereInfo/PlaneInfo/LightInfo records in insertion order
- Scene serialization/configuration support

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.scene.manager import SceneManager
    >>> scene = SceneManager(width=320, height=240)
    >>> scene.add_sphere((0.0, 0.0, -5.0), 1.0, color=(1.0, 0.2, 0.2))
    0
    >>> scene.add_directional_light((0.0, 0.0, -1.0), (1.0, 1.0, 1.0), 5.0)
    0
    >>> scene.apply()
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.mirrortrace.camera.pinhole import PinholeCamera, setup_camera
from src.mirrortrace.lighting.lights import (
    MAX_LIGHTS,
    LightKind,
    add_directional_light,
    add_spherical_light,
    clear_lights,
    get_light_count,
)
from src.mirrortrace.scene.intersection import (
    MAX_SHAPES,
    add_plane,
    add_sphere,
    clear_scene,
    get_shape_count,
)

logger = logging.getLogger(__name__)

Triple = tuple[float, float, float]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        shape_index: The index in the shape storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        color: The surface color.
        irradiance: Diffuse scaling constant.
        reflectivity: Mirror reflectivity in [0, 1].
    """

    shape_index: int
    center: Triple
    radius: float
    color: Triple
    irradiance: float
    reflectivity: float


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        shape_index: The index in the shape storage arrays.
        point: A point on the plane.
        normal: The stored plane normal.
        color: The surface color.
        irradiance: Diffuse scaling constant.
        reflectivity: Mirror reflectivity in [0, 1].
    """

    shape_index: int
    point: Triple
    normal: Triple
    color: Triple
    irradiance: float
    reflectivity: float


@dataclass
class LightInfo:
    """Information about a light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        kind: DIRECTIONAL or SPHERICAL.
        vector: Travel direction (directional) or position (spherical).
        color: The light color.
        strength: Intensity (directional) or power (spherical).
    """

    light_index: int
    kind: LightKind
    vector: Triple
    color: Triple
    strength: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Field of view in degrees.
        shadow_bias: Offset for shadow and reflection ray origins.
        shapes: List of shape configurations, in trace order.
        lights: List of light configurations.
    """

    width: int = 800
    height: int = 600
    field_of_view: float = 90.0
    shadow_bias: float = 0.1
    shapes: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


def _triple(value: Any, name: str) -> Triple:
    if value is None or len(value) != 3:
        raise ValueError(f"'{name}' must be a list of 3 numbers, got {value!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


def _require(config: dict[str, Any], key: str, kind: str) -> Any:
    if key not in config:
        raise ValueError(f"{kind} configuration is missing '{key}'")
    return config[key]


def _check_settings(width: int, height: int, field_of_view: float, shadow_bias: float) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if not 0.0 < field_of_view < 180.0:
        raise ValueError(f"Field of view must be in (0, 180) degrees, got {field_of_view}")
    if shadow_bias <= 0.0:
        raise ValueError(f"Shadow bias must be positive, got {shadow_bias}")


def _parse_shape(shape_config: dict[str, Any]) -> tuple[str, tuple]:
    """Turn one shape entry into the name and arguments of its add method."""
    shape_type = str(shape_config.get("type", "")).lower()
    color = _triple(shape_config.get("color", [1.0, 1.0, 1.0]), "color")
    irradiance = float(shape_config.get("irradiance", 1.0))
    reflectivity = float(shape_config.get("reflectivity", 0.0))
    if shape_type == "sphere":
        center = _triple(_require(shape_config, "center", "Sphere"), "center")
        radius = float(_require(shape_config, "radius", "Sphere"))
        return "add_sphere", (center, radius, color, irradiance, reflectivity)
    if shape_type == "plane":
        point = _triple(_require(shape_config, "point", "Plane"), "point")
        normal = _triple(_require(shape_config, "normal", "Plane"), "normal")
        return "add_plane", (point, normal, color, irradiance, reflectivity)
    raise ValueError(f"Unknown shape type: {shape_type}")


def _parse_light(light_config: dict[str, Any]) -> tuple[str, tuple]:
    """Turn one light entry into the name and arguments of its add method."""
    light_type = str(light_config.get("type", "")).lower()
    color = _triple(light_config.get("color", [1.0, 1.0, 1.0]), "color")
    strength = float(_require(light_config, "strength", "Light"))
    if light_type == "directional":
        direction = _triple(_require(light_config, "direction", "Directional light"), "direction")
        return "add_directional_light", (direction, color, strength)
    if light_type == "spherical":
        position = _triple(_require(light_config, "position", "Spherical light"), "position")
        return "add_spherical_light", (position, color, strength)
    raise ValueError(f"Unknown light type: {light_type}")


class SceneManager:
    """High-level scene builder and render settings holder.

    Only one scene is active at a time: shapes and lights live in module-level
    Taichi fields, and constructing a SceneManager clears them.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Field of view in degrees.
        shadow_bias: Offset for shadow and reflection ray origins.
        spheres: SphereInfo for all spheres in the scene.
        planes: PlaneInfo for all planes in the scene.
        lights: LightInfo for all lights in the scene.

    Example:
        >>> scene = SceneManager()
        >>> scene.add_sphere((2.0, -1.0, -4.0), 1.0, (1.0, 0.2, 0.2), reflectivity=0.6)
        >>> scene.add_plane((0.0, -2.0, 0.0), (0.0, -1.0, 0.0), (0.1, 0.1, 0.1))
        >>> scene.add_spherical_light((-2.0, 10.0, -3.0), (0.3, 0.8, 0.3), 24000.0)
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        field_of_view: float = 90.0,
        shadow_bias: float = 0.1,
    ) -> None:
        """Initialize an empty scene.

        Raises:
            ValueError: If the image size, field of view or shadow bias is invalid.
        """
        self.width = width
        self.height = height
        self.field_of_view = field_of_view
        self.shadow_bias = shadow_bias
        self.spheres: list[SphereInfo] = []
        self.planes: list[PlaneInfo] = []
        self.lights: list[LightInfo] = []
        self._shape_order: list[SphereInfo | PlaneInfo] = []
        self._validate_settings()
        self._clear_all()

    def _validate_settings(self) -> None:
        _check_settings(self.width, self.height, self.field_of_view, self.shadow_bias)

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_lights()
        self.spheres.clear()
        self.planes.clear()
        self.lights.clear()
        self._shape_order.clear()

    def clear(self) -> None:
        """Remove every shape and light. Render settings are kept."""
        self._clear_all()
        logger.debug("Cleared scene")

    # =========================================================================
    # Shapes
    # =========================================================================

    def add_sphere(
        self,
        center: Triple,
        radius: float,
        color: Triple = (1.0, 1.0, 1.0),
        irradiance: float = 1.0,
        reflectivity: float = 0.0,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center of the sphere as (x, y, z).
            radius: The radius of the sphere.
            color: The surface color as (R, G, B).
            irradiance: Diffuse scaling constant.
            reflectivity: Mirror reflectivity in [0, 1].

        Returns:
            The index of the sphere in the shape store.

        Raises:
            RuntimeError: If the maximum number of shapes is exceeded.
            ValueError: If any parameter is out of range.
        """
        shape_index = add_sphere(center, radius, color, irradiance, reflectivity)
        info = SphereInfo(
            shape_index=shape_index,
            center=tuple(center),
            radius=radius,
            color=tuple(color),
            irradiance=irradiance,
            reflectivity=reflectivity,
        )
        self.spheres.append(info)
        self._shape_order.append(info)
        return shape_index

    def add_plane(
        self,
        point: Triple,
        normal: Triple,
        color: Triple = (1.0, 1.0, 1.0),
        irradiance: float = 1.0,
        reflectivity: float = 0.0,
    ) -> int:
        """Add a one-sided plane to the scene.

        Args:
            point: A point on the plane as (x, y, z).
            normal: The plane normal. Rays travelling along it hit the plane.
            color: The surface color as (R, G, B).
            irradiance: Diffuse scaling constant.
            reflectivity: Mirror reflectivity in [0, 1].

        Returns:
            The index of the plane in the shape store.

        Raises:
            RuntimeError: If the maximum number of shapes is exceeded.
            ValueError: If any parameter is out of range.
        """
        shape_index = add_plane(point, normal, color, irradiance, reflectivity)
        info = PlaneInfo(
            shape_index=shape_index,
            point=tuple(point),
            normal=tuple(normal),
            color=tuple(color),
            irradiance=irradiance,
            reflectivity=reflectivity,
        )
        self.planes.append(info)
        self._shape_order.append(info)
        return shape_index

    # =========================================================================
    # Lights
    # =========================================================================

    def add_directional_light(self, direction: Triple, color: Triple, strength: float) -> int:
        """Add a light at infinity shining along direction.

        Returns:
            The index of the light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If any parameter is out of range.
        """
        light_index = add_directional_light(direction, color, strength)
        self.lights.append(
            LightInfo(light_index, LightKind.DIRECTIONAL, tuple(direction), tuple(color), strength)
        )
        return light_index

    def add_spherical_light(self, position: Triple, color: Triple, strength: float) -> int:
        """Add a point light with inverse-square falloff.

        Returns:
            The index of the light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If any parameter is out of range.
        """
        light_index = add_spherical_light(position, color, strength)
        self.lights.append(
            LightInfo(light_index, LightKind.SPHERICAL, tuple(position), tuple(color), strength)
        )
        return light_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_shape_count(self) -> int:
        """Get the number of shapes in the scene."""
        return get_shape_count()

    def get_sphere_count(self) -> int:
        return len(self.spheres)

    def get_plane_count(self) -> int:
        return len(self.planes)

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    def get_camera(self) -> PinholeCamera:
        """Camera configuration for the current settings."""
        return PinholeCamera(
            width=self.width,
            height=self.height,
            field_of_view=self.field_of_view,
        )

    def apply(self) -> None:
        """Push camera, shadow bias and image size to the renderer.

        Call before rendering and after changing any render setting.

        Raises:
            ValueError: If a render setting is invalid.
        """
        from src.mirrortrace.core.integrator import set_shadow_bias, setup_render_target

        self._validate_settings()
        setup_camera(self.get_camera())
        set_shadow_bias(self.shadow_bias)
        setup_render_target(self.width, self.height)
        logger.debug(
            "Applied %dx%d scene: %d shapes, %d lights",
            self.width,
            self.height,
            self.get_shape_count(),
            self.get_light_count(),
        )

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig with shapes in trace order.
        """
        config = SceneConfig(
            width=self.width,
            height=self.height,
            field_of_view=self.field_of_view,
            shadow_bias=self.shadow_bias,
        )

        for shape in self._shape_order:
            if isinstance(shape, SphereInfo):
                config.shapes.append(
                    {
                        "type": "sphere",
                        "center": list(shape.center),
                        "radius": shape.radius,
                        "color": list(shape.color),
                        "irradiance": shape.irradiance,
                        "reflectivity": shape.reflectivity,
                    }
                )
            else:
                config.shapes.append(
                    {
                        "type": "plane",
                        "point": list(shape.point),
                        "normal": list(shape.normal),
                        "color": list(shape.color),
                        "irradiance": shape.irradiance,
                        "reflectivity": shape.reflectivity,
                    }
                )

        for light in self.lights:
            vector_key = "direction" if light.kind == LightKind.DIRECTIONAL else "position"
            config.lights.append(
                {
                    "type": light.kind.name.lower(),
                    vector_key: list(light.vector),
                    "color": list(light.color),
                    "strength": light.strength,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Every entry is parsed and the settings checked before the current
        scene is touched. If adding a shape or light still fails, the previous
        scene is restored before the error propagates.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
            RuntimeError: If the configuration exceeds shape or light capacity.
        """
        settings = (
            int(config.width),
            int(config.height),
            float(config.field_of_view),
            float(config.shadow_bias),
        )
        _check_settings(*settings)
        calls = [_parse_shape(shape) for shape in config.shapes]
        calls += [_parse_light(light) for light in config.lights]

        previous = self.to_config()
        try:
            self._load(settings, calls)
        except (RuntimeError, ValueError):
            self._load(
                (previous.width, previous.height, previous.field_of_view, previous.shadow_bias),
                [_parse_shape(shape) for shape in previous.shapes]
                + [_parse_light(light) for light in previous.lights],
            )
            raise

    def _load(self, settings: tuple[int, int, float, float], calls: list[tuple[str, tuple]]) -> None:
        self.width, self.height, self.field_of_view, self.shadow_bias = settings
        self.clear()
        for method, args in calls:
            getattr(self, method)(*args)

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "width": config.width,
            "height": config.height,
            "field_of_view": config.field_of_view,
            "shadow_bias": config.shadow_bias,
            "shapes": config.shapes,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with the keys produced by to_dict(). Missing
                settings fall back to SceneConfig defaults.
        """
        defaults = SceneConfig()
        config = SceneConfig(
            width=data.get("width", defaults.width),
            height=data.get("height", defaults.height),
            field_of_view=data.get("field_of_view", defaults.field_of_view),
            shadow_bias=data.get("shadow_bias", defaults.shadow_bias),
            shapes=data.get("shapes", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    def save_json(self, filepath: str | Path) -> None:
        """Write the scene to a JSON file."""
        Path(filepath).write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load_json(cls, filepath: str | Path) -> "SceneManager":
        """Create a scene from a JSON file written by save_json().

        Raises:
            ValueError: If the file is not valid JSON or describes an invalid scene.
        """
        try:
            data = json.loads(Path(filepath).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene file {filepath}: {e}") from e

        scene = cls()
        scene.from_dict(data)
        logger.info(
            "Loaded scene from %s: %d shapes, %d lights",
            filepath,
            scene.get_shape_count(),
            scene.get_light_count(),
        )
        return scene

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_shapes() -> int:
        """Get the maximum number of shapes supported."""
        return MAX_SHAPES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
