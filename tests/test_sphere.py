"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Sphere entirely behind the ray
- Ray starting inside sphere
- Tangent ray
- Surface normal
"""

import pytest
import taichi as ti


def _intersect(origin, direction, center, radius):
    """Run intersect_sphere in a kernel and return (did_hit, distance)."""
    from src.mirrortrace.core.ray import normalize
    from src.mirrortrace.geometry.sphere import Sphere, intersect_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f32):
        sphere = Sphere(center=c, radius=r)
        h, t = intersect_sphere(o, normalize(d), sphere)
        hit[None] = h
        distance[None] = t

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius)
    return hit[None], distance[None]


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from src.mirrortrace.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_head_on(self):
        """Ray from z=5 toward a unit sphere at the origin hits at t=4."""
        hit, t = _intersect((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 1
        assert abs(t - 4.0) < 1e-5

    @pytest.mark.parametrize(
        "origin,center,radius",
        [
            ((0.0, 0.0, 0.0), (0.0, 0.0, -5.0), 1.0),
            ((1.0, 2.0, 3.0), (4.0, -2.0, -9.0), 2.5),
            ((-3.0, 0.0, 0.0), (3.0, 0.0, 0.0), 0.5),
        ],
    )
    def test_through_center_distance(self, origin, center, radius):
        """A ray aimed at the center hits at |origin - center| - radius."""
        direction = tuple(c - o for c, o in zip(center, origin))
        expected = sum(d * d for d in direction) ** 0.5 - radius

        hit, t = _intersect(origin, direction, center, radius)
        assert hit == 1
        assert abs(t - expected) < 1e-4

    def test_miss(self):
        """Ray passing beside the sphere reports no hit."""
        hit, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (3.0, 0.0, -5.0), 1.0)
        assert hit == 0

    def test_sphere_behind_ray(self):
        """A sphere entirely behind the origin is not hit."""
        hit, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 0

    def test_origin_inside_sphere(self):
        """From inside, the exit point is reported."""
        hit, t = _intersect((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), 2.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-5

    def test_tangent_ray(self):
        """A ray grazing the sphere counts as a hit at the tangent point."""
        hit, t = _intersect((0.0, 1.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
        assert hit == 1
        assert abs(t - 5.0) < 1e-3

    def test_distance_non_negative(self):
        """Reported distances are never negative."""
        for origin in [(0.0, 0.0, -5.0), (0.0, 0.0, -4.5), (0.0, 0.5, -5.0)]:
            hit, t = _intersect(origin, (0.0, 0.0, -1.0), (0.0, 0.0, -5.0), 1.0)
            assert hit == 1
            assert t >= 0.0


class TestSphereNormal:
    """Tests for the sphere surface normal."""

    def test_normal_points_outward(self):
        from src.mirrortrace.geometry.sphere import Sphere, sphere_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=2.0)
            result[None] = sphere_normal(sphere, vec3(0.0, 2.0, -5.0))

        test_kernel()
        n = result[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1] - 1.0) < 1e-6
        assert abs(n[2]) < 1e-6

    def test_normal_is_unit_length(self):
        from src.mirrortrace.geometry.sphere import Sphere, sphere_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(1.0, 1.0, 1.0), radius=3.0)
            result[None] = sphere_normal(sphere, vec3(3.0, 3.0, 2.0))

        test_kernel()
        n = result[None]
        assert abs((n[0] ** 2 + n[1] ** 2 + n[2] ** 2) ** 0.5 - 1.0) < 1e-5
