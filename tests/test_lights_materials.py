"""Unit tests for Phong materials and point lights.

Tests cover:
- Material registration and validation
- Point light registration, validation and falloff
- Ambient lighting
"""

import math

import pytest


class TestPhongMaterials:
    """Tests for the Phong material registry."""

    def test_add_material_returns_sequential_ids(self):
        from src.whitted.materials.phong import add_phong_material, get_phong_material_count

        assert add_phong_material((1.0, 0.0, 0.0)) == 0
        assert add_phong_material((0.0, 1.0, 0.0), k_s=0.0) == 1
        assert get_phong_material_count() == 2

    def test_default_coefficients(self):
        """Test defaults are the glossy sphere finish."""
        from src.whitted.materials.phong import (
            add_phong_material,
            phong_alpha,
            phong_k_d,
            phong_k_s,
            phong_reflectivity,
        )

        mat_id = add_phong_material((0.5, 0.5, 0.5))
        assert abs(phong_k_d[mat_id] - 0.8) < 1e-6
        assert abs(phong_k_s[mat_id] - 1.2) < 1e-6
        assert abs(phong_alpha[mat_id] - 10.0) < 1e-6
        assert abs(phong_reflectivity[mat_id] - 0.3) < 1e-6

    @pytest.mark.parametrize("reflectivity", [-0.1, 1.5])
    def test_reflectivity_out_of_range_raises(self, reflectivity):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="Reflectivity"):
            add_phong_material((0.5, 0.5, 0.5), reflectivity=reflectivity)

    def test_negative_color_raises(self):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="non-negative"):
            add_phong_material((0.5, -0.5, 0.5))

    def test_negative_coefficient_raises(self):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="k_d"):
            add_phong_material((0.5, 0.5, 0.5), k_d=-1.0)

    def test_clear_materials(self):
        from src.whitted.materials.phong import (
            add_phong_material,
            clear_phong_materials,
            get_phong_material_count,
        )

        add_phong_material((0.5, 0.5, 0.5))
        clear_phong_materials()
        assert get_phong_material_count() == 0


class TestPointLights:
    """Tests for point lights and ambient lighting."""

    def test_add_point_light(self):
        from src.whitted.scene.lights import add_point_light, get_point_light_count

        assert add_point_light((0.0, 5.0, 0.0), (1.0, 1.0, 1.0), 10.0) == 0
        assert add_point_light((1.0, 5.0, 0.0), (1.0, 0.5, 0.5)) == 1
        assert get_point_light_count() == 2

    def test_negative_intensity_raises(self):
        from src.whitted.scene.lights import add_point_light

        with pytest.raises(ValueError, match="intensity"):
            add_point_light((0.0, 5.0, 0.0), (1.0, 1.0, 1.0), -1.0)

    def test_negative_light_color_raises(self):
        from src.whitted.scene.lights import add_point_light

        with pytest.raises(ValueError, match="Light color"):
            add_point_light((0.0, 5.0, 0.0), (1.0, -1.0, 1.0))

    def test_ambient_defaults_to_black(self):
        from src.whitted.scene.lights import get_ambient_lighting_python

        assert get_ambient_lighting_python() == (0.0, 0.0, 0.0)

    def test_set_ambient_lighting(self):
        from src.whitted.scene.lights import get_ambient_lighting_python, set_ambient_lighting

        set_ambient_lighting((0.25, 0.5, 0.75))
        assert get_ambient_lighting_python() == pytest.approx((0.25, 0.5, 0.75))

    def test_negative_ambient_raises(self):
        from src.whitted.scene.lights import set_ambient_lighting

        with pytest.raises(ValueError):
            set_ambient_lighting((-0.1, 0.0, 0.0))

    def test_inverse_square_falloff(self):
        """Test a lit point receives color * intensity / (4 pi d^2).

        A white matte floor directly under a light at height 2, with an
        intensity chosen so the attenuated illumination is exactly 1.
        """
        from src.whitted.core.tracer import illuminate_point
        from src.whitted.materials.phong import add_phong_material
        from src.whitted.scene.intersection import add_plane
        from src.whitted.scene.lights import add_point_light

        mat = add_phong_material((1.0, 1.0, 1.0), k_d=1.0, k_s=0.0, reflectivity=0.0)
        floor = add_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), mat)
        add_point_light((0.0, 2.0, 0.0), (1.0, 1.0, 1.0), 4.0 * math.pi * 4.0)

        color = illuminate_point(floor, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 1.0, 1.0))
        assert color == pytest.approx((1.0, 1.0, 1.0), rel=1e-4)

    def test_no_falloff(self):
        """Test LightFalloff.NONE delivers color * intensity at any distance."""
        from src.whitted.core.tracer import illuminate_point
        from src.whitted.materials.phong import add_phong_material
        from src.whitted.scene.intersection import add_plane
        from src.whitted.scene.lights import LightFalloff, add_point_light

        mat = add_phong_material((1.0, 1.0, 1.0), k_d=0.5, k_s=0.0, reflectivity=0.0)
        floor = add_plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), mat)
        add_point_light((0.0, 100.0, 0.0), (1.0, 0.5, 0.25), 2.0, LightFalloff.NONE)

        color = illuminate_point(floor, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 1.0, 1.0))
        assert color == pytest.approx((1.0, 0.5, 0.25), rel=1e-4)
