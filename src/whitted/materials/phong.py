"""Phong material implementation.

This module implements the classic Phong reflection model used for local
illumination. For a single unoccluded point light the reflected radiance is:

    diffuse  = C_diff * k_d * I * max(0, N . L)
    specular = C_light * k_s * I * max(0, R . V)^alpha

where I is the light's attenuated intensity at the surface, L the unit
vector toward the light, V the unit vector toward the viewer and R the
mirror of L about N. The ambient term C_diff * I_a is added once per
surface by the shading code.

Each material also carries a reflectivity in [0, 1] that the tracer uses to
blend direct illumination with the mirror-reflected contribution.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.materials.phong import add_phong_material
    >>> red = add_phong_material((0.9, 0.1, 0.1), k_d=0.8, k_s=1.2, alpha=10.0)
"""

import math

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Coefficients used for spheres when none are given
SPHERE_K_D = 0.8
SPHERE_K_S = 1.2
SPHERE_ALPHA = 10.0
SPHERE_REFLECTIVITY = 0.3

# Coefficients used for planes when none are given
PLANE_K_D = 0.6
PLANE_K_S = 0.0
PLANE_ALPHA = 0.0
PLANE_REFLECTIVITY = 0.1


@ti.dataclass
class PhongMaterial:
    """Phong material properties.

    Attributes:
        color: The diffuse color (RGB, non-negative).
        k_d: Diffuse coefficient.
        k_s: Specular coefficient.
        alpha: Specular exponent (shininess).
        reflectivity: Fraction of radiance taken from the mirror direction,
            in [0, 1].
    """

    color: vec3
    k_d: ti.f32
    k_s: ti.f32
    alpha: ti.f32
    reflectivity: ti.f32


@ti.func
def eval_phong(
    material: PhongMaterial,
    light_color: vec3,
    intensity: vec3,
    normal: vec3,
    to_light: vec3,
    reflected: vec3,
    to_viewer: vec3,
) -> vec3:
    """Evaluate diffuse plus specular Phong reflection for one light.

    Args:
        material: The surface material.
        light_color: The light's own color, which tints the highlight.
        intensity: The light's attenuated intensity at the surface point.
        normal: The unit surface normal.
        to_light: Unit vector from the surface point toward the light.
        reflected: Unit mirror direction of to_light about the normal.
        to_viewer: Unit vector from the surface point toward the viewer.

    Returns:
        The reflected radiance (RGB), unclamped.
    """
    n_dot_l = tm.max(0.0, tm.dot(normal, to_light))
    r_dot_v = tm.max(0.0, tm.dot(reflected, to_viewer))

    diffuse = material.color * material.k_d * intensity * n_dot_l
    specular = light_color * material.k_s * intensity * (r_dot_v**material.alpha)

    return diffuse + specular


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Phong materials in the scene
MAX_PHONG_MATERIALS = 1024

# Storage for Phong material properties: Structure of Arrays layout
phong_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_k_d = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_k_s = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_alpha = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
phong_reflectivity = ti.field(dtype=ti.f32, shape=MAX_PHONG_MATERIALS)
num_phong_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all Phong materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_phong_materials[None] = 0


def add_phong_material(
    color: tuple[float, float, float],
    k_d: float = SPHERE_K_D,
    k_s: float = SPHERE_K_S,
    alpha: float = SPHERE_ALPHA,
    reflectivity: float = SPHERE_REFLECTIVITY,
) -> int:
    """Add a Phong material to the material registry.

    Args:
        color: The diffuse color as (R, G, B). Components must be
            non-negative; values above 1 are allowed.
        k_d: Diffuse coefficient (non-negative).
        k_s: Specular coefficient (non-negative).
        alpha: Specular exponent (non-negative).
        reflectivity: Mirror reflectivity in [0, 1].

    Returns:
        The material ID of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is out of range.
    """
    if len(color) != 3:
        raise ValueError(f"Color must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if not math.isfinite(component) or component < 0.0:
            raise ValueError(f"Color component {i} = {component} must be non-negative")

    for name, value in (("k_d", k_d), ("k_s", k_s), ("alpha", alpha)):
        if not math.isfinite(value) or value < 0.0:
            raise ValueError(f"{name} = {value} must be non-negative")

    if not 0.0 <= reflectivity <= 1.0:
        raise ValueError(f"Reflectivity {reflectivity} is outside [0, 1]")

    idx = num_phong_materials[None]
    if idx >= MAX_PHONG_MATERIALS:
        raise RuntimeError(f"Maximum number of Phong materials ({MAX_PHONG_MATERIALS}) exceeded")

    phong_colors[idx] = vec3(color[0], color[1], color[2])
    phong_k_d[idx] = k_d
    phong_k_s[idx] = k_s
    phong_alpha[idx] = alpha
    phong_reflectivity[idx] = reflectivity
    num_phong_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of Phong materials in the registry."""
    return int(num_phong_materials[None])


@ti.func
def get_phong_material(material_id: ti.i32) -> PhongMaterial:
    """Look up a Phong material by ID.

    Args:
        material_id: The index of the material in the registry.

    Returns:
        The material's properties.
    """
    return PhongMaterial(
        color=phong_colors[material_id],
        k_d=phong_k_d[material_id],
        k_s=phong_k_s[material_id],
        alpha=phong_alpha[material_id],
        reflectivity=phong_reflectivity[material_id],
    )


@ti.func
def get_phong_reflectivity(material_id: ti.i32) -> ti.f32:
    """Get the mirror reflectivity of a material by ID."""
    return phong_reflectivity[material_id]
