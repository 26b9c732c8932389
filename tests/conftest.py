"""Pytest configuration for ray tracer tests.

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
    ti.init(arch=ti.cpu, default_fp=ti.f32)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear objects, materials and lights before and after each test."""
    # Import here to ensure Taichi is initialized first
    from src.whitted.materials.phong import clear_phong_materials
    from src.whitted.scene.intersection import clear_scene
    from src.whitted.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_phong_materials()
        clear_lights()

    _clear_all()
    yield
    _clear_all()
