"""Materials module.

Components:
    phong: Phong reflection model (ambient, diffuse, specular) with a
        per-material mirror reflectivity, and the material registry

Materials are stored in Taichi fields and referenced by integer material
IDs, so kernels can look them up with get_phong_material(material_id).
"""

from .phong import (
    MAX_PHONG_MATERIALS,
    PLANE_ALPHA,
    PLANE_K_D,
    PLANE_K_S,
    PLANE_REFLECTIVITY,
    SPHERE_ALPHA,
    SPHERE_K_D,
    SPHERE_K_S,
    SPHERE_REFLECTIVITY,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    eval_phong,
    get_phong_material,
    get_phong_material_count,
    get_phong_reflectivity,
)

__all__ = [
    "PhongMaterial",
    "add_phong_material",
    "clear_phong_materials",
    "eval_phong",
    "get_phong_material",
    "get_phong_material_count",
    "get_phong_reflectivity",
    "MAX_PHONG_MATERIALS",
    "SPHERE_K_D",
    "SPHERE_K_S",
    "SPHERE_ALPHA",
    "SPHERE_REFLECTIVITY",
    "PLANE_K_D",
    "PLANE_K_S",
    "PLANE_ALPHA",
    "PLANE_REFLECTIVITY",
]
