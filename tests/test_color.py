"""Unit tests for the color model.

Tests cover:
- Channel-wise addition and multiplication
- Scalar multiplication
- Clamping (host Color and device clamp_color)
- Conversion to 8-bit values
"""

import pytest
import taichi as ti


class TestColorArithmetic:
    """Tests for Color operators."""

    def test_add(self):
        from src.mirrortrace.core.color import Color

        assert Color(0.1, 0.2, 0.3) + Color(0.5, 0.5, 0.5) == pytest.approx((0.6, 0.7, 0.8))

    def test_add_returns_color(self):
        from src.mirrortrace.core.color import Color

        result = Color(1.0, 2.0, 3.0) + Color(1.0, 1.0, 1.0)
        assert isinstance(result, Color)
        assert len(result) == 3

    def test_multiply_channelwise(self):
        from src.mirrortrace.core.color import Color

        assert Color(0.5, 2.0, 1.0) * Color(0.5, 0.25, 0.0) == pytest.approx((0.25, 0.5, 0.0))

    def test_multiply_scalar(self):
        from src.mirrortrace.core.color import Color

        assert Color(0.5, 2.0, 1.0) * 2.0 == pytest.approx((1.0, 4.0, 2.0))
        assert 0.5 * Color(0.5, 2.0, 1.0) == pytest.approx((0.25, 1.0, 0.5))

    def test_black(self):
        from src.mirrortrace.core.color import BLACK, Color

        assert BLACK.is_black()
        assert not Color(0.0, 0.0, 0.01).is_black()


class TestColorClamp:
    """Tests for clamping to the displayable range."""

    def test_clamp_mixed(self):
        from src.mirrortrace.core.color import Color

        assert Color(1.5, -0.2, 0.4).clamp() == (1.0, 0.0, 0.4)

    def test_clamp_idempotent(self):
        from src.mirrortrace.core.color import Color

        c = Color(3.0, 0.5, -8.0).clamp()
        assert c.clamp() == c

    def test_to_rgb255_truncates(self):
        from src.mirrortrace.core.color import Color

        assert Color(1.0, 0.5, 0.0).to_rgb255() == (255, 127, 0)
        assert Color(2.0, -1.0, 0.999).to_rgb255() == (255, 0, 254)

    def test_device_clamp(self):
        from src.mirrortrace.core.color import clamp_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = clamp_color(vec3(1.5, -0.2, 0.4))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 0.0) < 1e-6
        assert abs(r[2] - 0.4) < 1e-6

    def test_from_vec(self):
        from src.mirrortrace.core.color import Color

        assert Color.from_vec([0.25, 0.5, 0.75]) == (0.25, 0.5, 0.75)


class TestDeviceModules:
    """Modules defining Taichi functions must keep evaluated annotations."""

    @pytest.mark.parametrize(
        "module_name",
        [
            "src.mirrortrace.core.color",
            "src.mirrortrace.core.ray",
            "src.mirrortrace.core.integrator",
            "src.mirrortrace.geometry.sphere",
            "src.mirrortrace.geometry.plane",
            "src.mirrortrace.lighting.directional",
            "src.mirrortrace.lighting.spherical",
            "src.mirrortrace.lighting.lights",
            "src.mirrortrace.scene.intersection",
            "src.mirrortrace.camera.pinhole",
        ],
    )
    def test_no_postponed_annotations(self, module_name):
        import __future__
        import importlib

        module = importlib.import_module(module_name)
        assert getattr(module, "annotations", None) is not __future__.annotations

    def test_color_hints_resolve(self):
        import typing

        from src.mirrortrace.core.color import Color

        hints = typing.get_type_hints(Color.__add__)
        assert hints["other"] is Color
        assert hints["return"] is Color
