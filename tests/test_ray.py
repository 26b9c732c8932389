"""Unit tests for the ray type and vector helpers."""

import math

import pytest
import taichi as ti


class TestRayFunctions:
    """Tests for Taichi-side ray helpers."""

    def test_ray_at(self):
        """Test point evaluation along a ray."""
        from src.whitted.core.ray import make_ray, ray_at, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -2.0))
            result[None] = ray_at(ray, 1.5)

        test_kernel()
        p = result[None]
        assert abs(p[0] - 1.0) < 1e-6
        assert abs(p[1] - 2.0) < 1e-6
        assert abs(p[2] - 0.0) < 1e-6

    def test_reflect_mirrors_incident_direction(self):
        """Test that reflect() flips the normal component of an incident ray."""
        from src.whitted.core.ray import reflect, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_reflect_in_mirrors_outgoing_vector(self):
        """Test reflect_in(v, n) = 2(v.n)n - v, the Phong R vector."""
        from src.whitted.core.ray import reflect_in, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect_in(vec3(1.0, 1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] + 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_reflect_equals_reflect_in_of_reversed_direction(self):
        """Test reflect(d, n) == reflect_in(-d, n)."""
        from src.whitted.core.ray import reflect, reflect_in, vec3

        a = ti.Vector.field(3, dtype=ti.f32, shape=())
        b = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            d = vec3(0.3, -0.8, 0.5)
            n = ti.math.normalize(vec3(0.2, 1.0, -0.1))
            a[None] = reflect(d, n)
            b[None] = reflect_in(-d, n)

        test_kernel()
        for i in range(3):
            assert abs(a[None][i] - b[None][i]) < 1e-6


class TestValidateDirection:
    """Tests for Python-side direction validation."""

    def test_valid_direction_is_returned_as_floats(self):
        from src.whitted.core.ray import validate_direction

        assert validate_direction((0, 0, -2)) == (0.0, 0.0, -2.0)

    def test_zero_direction_raises(self):
        from src.whitted.core.ray import validate_direction

        with pytest.raises(ValueError, match="non-zero"):
            validate_direction((0.0, 0.0, 0.0))

    def test_non_finite_direction_raises(self):
        from src.whitted.core.ray import validate_direction

        with pytest.raises(ValueError, match="finite"):
            validate_direction((math.nan, 0.0, 1.0))

    def test_wrong_component_count_raises(self):
        from src.whitted.core.ray import validate_direction

        with pytest.raises(ValueError, match="3 components"):
            validate_direction((1.0, 0.0))
