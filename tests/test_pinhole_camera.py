"""Unit tests for the pinhole camera.

Tests cover:
- Orthonormal basis construction
- Pixel-centre primary rays, top-left pixel origin
- Input validation
"""

import math

import pytest
import taichi as ti


def _default_camera(**overrides):
    from src.whitted.camera.pinhole import PinholeCamera

    params = {
        "lookfrom": (0.0, 0.0, 0.0),
        "lookat": (0.0, 0.0, -1.0),
        "vup": (0.0, 1.0, 0.0),
        "vfov": 90.0,
        "aspect_ratio": 1.0,
    }
    params.update(overrides)
    return PinholeCamera(**params)


def _cast(x, y, width, height):
    """Run cast_ray in a kernel and return (origin, direction)."""
    from src.whitted.camera.pinhole import cast_ray

    origin = ti.Vector.field(3, dtype=ti.f32, shape=())
    direction = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(px: ti.i32, py: ti.i32, w: ti.i32, h: ti.i32):
        ray = cast_ray(px, py, w, h)
        origin[None] = ray.origin
        direction[None] = ray.direction

    test_kernel(x, y, width, height)
    o = origin[None]
    d = direction[None]
    return (float(o[0]), float(o[1]), float(o[2])), (float(d[0]), float(d[1]), float(d[2]))


class TestCameraSetup:
    """Tests for setup_camera."""

    def test_basis_for_default_view(self):
        from src.whitted.camera.pinhole import get_camera_info, setup_camera

        setup_camera(_default_camera())
        info = get_camera_info()

        assert info["right"] == pytest.approx((1.0, 0.0, 0.0), abs=1e-6)
        assert info["up"] == pytest.approx((0.0, 1.0, 0.0), abs=1e-6)
        assert info["back"] == pytest.approx((0.0, 0.0, 1.0), abs=1e-6)
        assert info["eye"] == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)

    def test_viewport_size_from_vfov(self):
        """Test a 90 degree vfov gives a viewport of height 2 at unit distance."""
        from src.whitted.camera.pinhole import get_camera_info, setup_camera

        setup_camera(_default_camera(aspect_ratio=2.0))
        info = get_camera_info()

        assert info["span_down"] == pytest.approx((0.0, -2.0, 0.0), abs=1e-5)
        assert info["span_right"] == pytest.approx((4.0, 0.0, 0.0), abs=1e-5)
        assert info["upper_left"] == pytest.approx((-2.0, 1.0, -1.0), abs=1e-5)

    def test_lookfrom_equal_lookat_raises(self):
        from src.whitted.camera.pinhole import setup_camera

        with pytest.raises(ValueError, match="differ"):
            setup_camera(_default_camera(lookat=(0.0, 0.0, 0.0)))

    def test_vup_parallel_to_view_raises(self):
        from src.whitted.camera.pinhole import setup_camera

        with pytest.raises(ValueError, match="parallel"):
            setup_camera(_default_camera(vup=(0.0, 0.0, 1.0)))

    @pytest.mark.parametrize("vfov", [0.0, 180.0, -10.0])
    def test_invalid_vfov_raises(self, vfov):
        from src.whitted.camera.pinhole import setup_camera

        with pytest.raises(ValueError, match="vfov"):
            setup_camera(_default_camera(vfov=vfov))

    def test_invalid_aspect_ratio_raises(self):
        from src.whitted.camera.pinhole import setup_camera

        with pytest.raises(ValueError, match="aspect_ratio"):
            setup_camera(_default_camera(aspect_ratio=0.0))


class TestCastRay:
    """Tests for primary ray generation."""

    def test_centre_pixel_looks_forward(self):
        from src.whitted.camera.pinhole import setup_camera

        setup_camera(_default_camera())
        origin, direction = _cast(1, 1, 3, 3)

        assert origin == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)
        assert direction == pytest.approx((0.0, 0.0, -1.0), abs=1e-5)

    def test_top_left_pixel_points_up_and_left(self):
        """Test pixel (0, 0) is the top-left of the image."""
        from src.whitted.camera.pinhole import setup_camera

        setup_camera(_default_camera())
        _, direction = _cast(0, 0, 2, 2)

        # Pixel centre at s = 0.25, t = 0.25 -> (-0.5, 0.5, -1) on the viewport
        expected = (-0.5, 0.5, -1.0)
        norm = math.sqrt(sum(c * c for c in expected))
        assert direction == pytest.approx(tuple(c / norm for c in expected), abs=1e-5)

    def test_bottom_right_pixel_points_down_and_right(self):
        from src.whitted.camera.pinhole import setup_camera

        setup_camera(_default_camera())
        _, direction = _cast(1, 1, 2, 2)

        assert direction[0] > 0.0
        assert direction[1] < 0.0

    def test_directions_are_unit_length(self):
        from src.whitted.camera.pinhole import setup_camera

        setup_camera(_default_camera(lookfrom=(1.0, 2.0, 3.0), lookat=(0.0, 0.0, -4.0)))
        for x, y in [(0, 0), (7, 3), (15, 9)]:
            _, direction = _cast(x, y, 16, 10)
            assert math.sqrt(sum(c * c for c in direction)) == pytest.approx(1.0, abs=1e-5)
