"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear shapes, lights, camera and render state before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from src.mirrortrace.camera.pinhole import reset_camera
    from src.mirrortrace.core.integrator import reset_render_target, reset_shadow_bias
    from src.mirrortrace.lighting.lights import clear_lights
    from src.mirrortrace.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_lights()
        reset_camera()
        reset_shadow_bias()
        reset_render_target()

    # Clear everything before test
    _clear_all()

    yield

    # Clear everything after test
    _clear_all()


@pytest.fixture
def camera_1x1():
    """Single-pixel camera looking straight down -z, with a render target."""
    from src.mirrortrace.camera.pinhole import PinholeCamera, setup_camera
    from src.mirrortrace.core.integrator import setup_render_target

    setup_camera(PinholeCamera(width=1, height=1, field_of_view=90.0))
    setup_render_target(1, 1)
