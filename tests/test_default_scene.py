"""Tests for the default demo scene.

Tests cover:
- Scene settings and contents
- Shape order and attributes
- Rendering a reduced-size version
"""

import numpy as np
import pytest


class TestDefaultSceneContents:
    """The scene is built with the expected settings, shapes and light."""

    def test_settings(self):
        from src.mirrortrace.scene.default_scene import create_default_scene

        scene = create_default_scene()
        assert (scene.width, scene.height) == (800, 600)
        assert scene.field_of_view == 90.0
        assert scene.shadow_bias == 0.1

    def test_shape_order(self):
        from src.mirrortrace.scene.default_scene import create_default_scene

        config = create_default_scene().to_config()
        assert [s["type"] for s in config.shapes] == ["sphere", "sphere", "plane", "plane", "plane"]

        blue, red = config.shapes[0], config.shapes[1]
        assert blue["center"] == [-3.0, 0.0, -6.0]
        assert blue["radius"] == 2.0
        assert blue["reflectivity"] == 0.5
        assert red["center"] == [2.0, -1.0, -4.0]
        assert red["irradiance"] == 0.0038

        floor = config.shapes[2]
        assert floor["normal"] == [0.0, -1.0, 0.0]
        assert all(s["reflectivity"] == 0.4 for s in config.shapes[2:])

    def test_light(self):
        from src.mirrortrace.scene.default_scene import create_default_scene

        config = create_default_scene().to_config()
        assert config.lights == [
            {
                "type": "spherical",
                "position": [-2.0, 10.0, -3.0],
                "color": [0.3, 0.8, 0.3],
                "strength": 24000.0,
            }
        ]

    def test_params_override(self):
        from src.mirrortrace.scene.default_scene import DefaultSceneParams, create_default_scene

        scene = create_default_scene(DefaultSceneParams(width=40, height=30, light_strength=100.0))
        assert (scene.width, scene.height) == (40, 30)
        assert scene.lights[0].strength == 100.0

    def test_scene_is_applied(self):
        from src.mirrortrace.core.integrator import get_image_dimensions
        from src.mirrortrace.scene.default_scene import DefaultSceneParams, create_default_scene

        create_default_scene(DefaultSceneParams(width=40, height=30))
        assert get_image_dimensions() == (40, 30)


class TestDefaultSceneRender:
    """Small renders of the default scene."""

    @pytest.fixture
    def small_render(self):
        from src.mirrortrace.core.renderer import Renderer
        from src.mirrortrace.scene.default_scene import DefaultSceneParams, create_default_scene

        scene = create_default_scene(DefaultSceneParams(width=80, height=60))
        renderer = Renderer(scene.width, scene.height)
        renderer.render(batch_rows=16)
        return renderer.get_image_numpy()

    def test_image_valid(self, small_render):
        assert small_render.shape == (60, 80, 3)
        assert not np.any(np.isnan(small_render))
        assert np.all(small_render >= 0.0) and np.all(small_render <= 1.0)

    def test_image_not_blank(self, small_render):
        assert small_render.max() > 0.0

    def test_floor_visible_at_bottom(self, small_render):
        """The bottom rows look at the floor, which is lit by the point light."""
        assert small_render[-1].max() > 0.0
