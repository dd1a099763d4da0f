"""Unit tests for plane intersection.

Tests cover:
- Ray hitting the visible face
- Parallel rays
- Rays arriving from the hidden side
- Plane behind the ray
- Reported surface normal
"""

import taichi as ti


def _intersect(origin, direction, point, normal):
    """Run intersect_plane in a kernel and return (did_hit, distance)."""
    from src.mirrortrace.core.ray import normalize
    from src.mirrortrace.geometry.plane import Plane, intersect_plane, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, p: vec3, n: vec3):
        plane = Plane(point=p, normal=n)
        h, t = intersect_plane(o, normalize(d), plane)
        hit[None] = h
        distance[None] = t

    test_kernel(vec3(*origin), vec3(*direction), vec3(*point), vec3(*normal))
    return hit[None], distance[None]


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_hit_floor_from_above(self):
        """A downward ray hits a floor whose stored normal points down."""
        hit, t = _intersect((0.0, 0.0, 0.0), (0.0, -1.0, 0.0), (0.0, -2.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert abs(t - 2.0) < 1e-5

    def test_oblique_hit(self):
        """Distance along an oblique ray accounts for the angle."""
        hit, t = _intersect((0.0, 0.0, 0.0), (0.0, -1.0, -1.0), (0.0, -2.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert abs(t - 2.0 * 2.0**0.5) < 1e-4

    def test_unnormalized_stored_normal(self):
        """The stored normal's length does not change the distance."""
        hit, t = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, -20.0), (0.0, 0.0, -5.0))
        assert hit == 1
        assert abs(t - 20.0) < 1e-4

    def test_parallel_ray_misses(self):
        """A ray parallel to the plane never hits."""
        hit, _ = _intersect((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, -2.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_parallel_ray_in_plane_misses(self):
        hit, _ = _intersect((0.0, -2.0, 0.0), (0.0, 0.0, -1.0), (0.0, -2.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_hidden_side_misses(self):
        """A ray travelling against the stored normal does not hit."""
        hit, _ = _intersect((0.0, -5.0, 0.0), (0.0, 1.0, 0.0), (0.0, -2.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_plane_behind_ray_misses(self):
        """A plane behind the origin along the ray direction is not hit."""
        hit, _ = _intersect((0.0, -5.0, 0.0), (0.0, -1.0, 0.0), (0.0, -2.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0


class TestPlaneNormal:
    """Tests for the reported plane normal."""

    def test_normal_is_negated_and_normalized(self):
        from src.mirrortrace.geometry.plane import make_plane, plane_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            plane = make_plane(vec3(0.0, -2.0, 0.0), vec3(0.0, -3.0, 0.0))
            result[None] = plane_normal(plane)

        test_kernel()
        n = result[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1] - 1.0) < 1e-6
        assert abs(n[2]) < 1e-6
