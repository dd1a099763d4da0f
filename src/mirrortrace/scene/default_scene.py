"""Default demo scene.

Two reflective spheres stand on a dark floor in front of a blue back wall,
with a red wall on the left. A single green-tinted point light hangs above
the scene.

Shape colors are given on a 0-255 scale while light colors are in [0, 1];
the product drives the strongly lit areas into saturation, which the
per-bounce clamp then limits to 1.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.mirrortrace.scene.default_scene import create_default_scene
    >>> from src.mirrortrace.core.renderer import Renderer
    >>>
    >>> scene = create_default_scene()
    >>> renderer = Renderer(scene.width, scene.height)
    >>> renderer.render()
"""

from dataclasses import dataclass

from src.mirrortrace.scene.manager import SceneManager


@dataclass
class DefaultSceneParams:
    """Adjustable settings of the default scene.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        field_of_view: Field of view in degrees.
        shadow_bias: Offset for shadow and reflection ray origins.
        light_color: RGB color of the point light.
        light_strength: Power of the point light.
    """

    width: int = 800
    height: int = 600
    field_of_view: float = 90.0
    shadow_bias: float = 0.1
    light_color: tuple[float, float, float] = (0.3, 0.8, 0.3)
    light_strength: float = 24000.0


# =============================================================================
# Scene Constants
# =============================================================================

LIGHT_POSITION = (-2.0, 10.0, -3.0)

BLUE_SPHERE_COLOR = (0.2 * 255.0, 0.2 * 255.0, 1.0 * 255.0)
RED_SPHERE_COLOR = (1.0 * 255.0, 0.2 * 255.0, 0.2 * 255.0)
FLOOR_COLOR = (0.1 * 255.0, 0.1 * 255.0, 0.1 * 255.0)
BACK_WALL_COLOR = (0.1 * 255.0, 0.1 * 255.0, 1.0 * 255.0)
LEFT_WALL_COLOR = (1.0 * 255.0, 0.0, 0.2 * 255.0)

WALL_REFLECTIVITY = 0.4


def create_default_scene(params: DefaultSceneParams | None = None) -> SceneManager:
    """Build the default scene and push it to the renderer.

    Shapes are added in the order spheres, floor, back wall, left wall.

    Args:
        params: Optional settings. If None, uses DefaultSceneParams().

    Returns:
        The SceneManager holding the scene, already applied.

    Example:
        >>> scene = create_default_scene()
        >>> scene.get_shape_count(), scene.get_light_count()
        (5, 1)
    """
    if params is None:
        params = DefaultSceneParams()

    scene = SceneManager(
        width=params.width,
        height=params.height,
        field_of_view=params.field_of_view,
        shadow_bias=params.shadow_bias,
    )

    scene.add_spherical_light(LIGHT_POSITION, params.light_color, params.light_strength)

    # Spheres
    scene.add_sphere(
        center=(-3.0, 0.0, -6.0),
        radius=2.0,
        color=BLUE_SPHERE_COLOR,
        irradiance=0.004,
        reflectivity=0.5,
    )
    scene.add_sphere(
        center=(2.0, -1.0, -4.0),
        radius=1.0,
        color=RED_SPHERE_COLOR,
        irradiance=0.0038,
        reflectivity=0.6,
    )

    # Floor at y = -2, seen from above
    scene.add_plane(
        point=(0.0, -2.0, 0.0),
        normal=(0.0, -1.0, 0.0),
        color=FLOOR_COLOR,
        irradiance=0.008,
        reflectivity=WALL_REFLECTIVITY,
    )

    # Back wall at z = -20
    scene.add_plane(
        point=(0.0, 0.0, -20.0),
        normal=(0.0, 0.0, -1.0),
        color=BACK_WALL_COLOR,
        irradiance=0.005,
        reflectivity=WALL_REFLECTIVITY,
    )

    # Left wall at x = -10
    scene.add_plane(
        point=(-10.0, 0.0, -20.0),
        normal=(-1.0, 0.0, 0.0),
        color=LEFT_WALL_COLOR,
        irradiance=0.008,
        reflectivity=WALL_REFLECTIVITY,
    )

    scene.apply()
    return scene
