"""Unit tests for plane intersection.

Tests cover:
- Rays hitting the plane from either side (normal faces the ray)
- Parallel rays (no division, always a miss)
- Plane behind the ray
- Normalization of the stored normal
"""

import math

import taichi as ti


def _hit(origin, direction, point, normal):
    """Run hit_plane in a kernel and return (hit, t, point, normal)."""
    from src.whitted.geometry.plane import Plane, hit_plane, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    hit_point = ti.Vector.field(3, dtype=ti.f32, shape=())
    hit_normal = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        qx: ti.f32, qy: ti.f32, qz: ti.f32,
        nx: ti.f32, ny: ti.f32, nz: ti.f32,
    ):
        plane = Plane(point=vec3(qx, qy, qz), normal=vec3(nx, ny, nz))
        rec = hit_plane(vec3(ox, oy, oz), vec3(dx, dy, dz), plane)
        hit[None] = rec.hit
        t_val[None] = rec.t
        hit_point[None] = rec.point
        hit_normal[None] = rec.normal

    test_kernel(*origin, *direction, *point, *normal)
    p = hit_point[None]
    n = hit_normal[None]
    return (
        hit[None],
        float(t_val[None]),
        (float(p[0]), float(p[1]), float(p[2])),
        (float(n[0]), float(n[1]), float(n[2])),
    )


class TestPlaneIntersection:
    """Tests for ray-plane intersection."""

    def test_hit_from_above(self):
        """Test a ray straight down onto y = 0 hits at distance 5."""
        hit, t, point, normal = _hit((0.0, 5.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 1
        assert abs(t - 5.0) < 1e-5
        assert abs(point[1]) < 1e-5
        assert abs(normal[1] - 1.0) < 1e-6

    def test_hit_from_below_flips_normal(self):
        """Test the reported normal faces a ray arriving from the back side."""
        hit, t, _, normal = _hit((0.0, -3.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 1
        assert abs(t - 3.0) < 1e-5
        assert abs(normal[1] + 1.0) < 1e-6

    def test_parallel_ray_misses(self):
        """Test a ray parallel to the plane is a miss, not a division by zero."""
        hit, t, _, _ = _hit((0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 0
        assert math.isinf(t)

    def test_parallel_ray_in_plane_misses(self):
        """Test a ray lying in the plane is also a miss.

        This is the only way to reach exactly grazing incidence, so the
        zero-normal branch of hit_plane is never observable.
        """
        hit, _, _, _ = _hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 0

    def test_plane_behind_ray_misses(self):
        """Test a negative intersection distance is a miss."""
        hit, _, _, _ = _hit((0.0, 5.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 0

    def test_oblique_hit(self):
        """Test an oblique ray hits where expected."""
        hit, t, point, normal = _hit((0.0, 2.0, 0.0), (1.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))

        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert abs(point[0] - 2.0) < 1e-5
        assert abs(point[1]) < 1e-5
        assert abs(normal[1] - 1.0) < 1e-6

    def test_unnormalized_plane_normal_reports_unit_normal(self):
        """Test the reported normal is unit length even for a long stored normal."""
        hit, t, _, normal = _hit((0.0, 5.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, 0.0), (0.0, 4.0, 0.0))

        assert hit == 1
        assert abs(t - 5.0) < 1e-5
        assert abs(normal[1] - 1.0) < 1e-6
