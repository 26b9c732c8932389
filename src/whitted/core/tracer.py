"""Whitted-style shading and tracing.

This module implements the light transport of the renderer:

    illuminate: Phong local illumination at a surface point. Starts from the
        ambient term and adds the diffuse and specular contribution of every
        point light that a shadow ray finds unoccluded.
    trace: Follows a ray into the scene. A miss returns the background; a
        hit returns its direct illumination, blended with the radiance
        traced along the mirror direction while the bounce budget lasts:

            result = direct * (1 - rho) + trace(reflected, bounces - 1) * rho

Taichi functions cannot recurse, so trace() unrolls the recursion into a
loop. Expanding the recursive blend gives

    result = sum_k  w_k * (1 - rho_k) * direct_k  +  w_last * terminal

with w_0 = 1 and w_{k+1} = w_k * rho_k, which is what the loop accumulates.
Each iteration spends one bounce, so the loop runs at most bounces + 1 times.

Shadow and reflected rays start at P + epsilon * direction to avoid hitting
the surface they leave.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.tracer import trace_ray
    >>> color = trace_ray((0, 0, 0), (0, 0, -1), bounces=2)
"""

from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

from src.whitted.core.config import DEFAULT_BACKGROUND, DEFAULT_EPSILON
from src.whitted.core.ray import as_point, reflect, reflect_in, validate_direction
from src.whitted.materials.phong import eval_phong, get_phong_material, get_phong_reflectivity
from src.whitted.scene.intersection import get_object_material_id, intersect_scene
from src.whitted.scene.lights import (
    get_ambient_lighting,
    illumination_at,
    light_colors,
    light_positions,
    num_point_lights,
)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def illuminate(
    object_id: ti.i32,
    point: vec3,
    normal: vec3,
    origin: vec3,
    epsilon: ti.f32,
) -> vec3:
    """Compute Phong local illumination at a surface point.

    Args:
        object_id: The object the point lies on (selects the material).
        point: The surface point P.
        normal: The unit surface normal N at P.
        origin: The origin O of the ray that reached P; V = normalize(O - P).
        epsilon: Offset for the shadow ray origin.

    Returns:
        The unclamped reflected radiance (RGB).
    """
    material = get_phong_material(get_object_material_id(object_id))

    color = material.color * get_ambient_lighting()

    to_viewer = tm.normalize(origin - point)

    for i in range(num_point_lights[None]):
        to_light_unnormalized = light_positions[i] - point
        distance_to_light = tm.length(to_light_unnormalized)
        to_light = tm.normalize(to_light_unnormalized)
        reflected = tm.normalize(reflect_in(to_light, normal))

        intensity = illumination_at(i, distance_to_light)

        # Binary shadow: anything between P and the light blocks it entirely
        shadow = intersect_scene(point + epsilon * to_light, to_light)
        if shadow.hit == 0 or shadow.t > distance_to_light:
            color += eval_phong(
                material,
                light_colors[i],
                intensity,
                normal,
                to_light,
                reflected,
                to_viewer,
            )

    return color


@ti.func
def trace(
    ray_origin: vec3,
    ray_direction: vec3,
    bounces: ti.i32,
    epsilon: ti.f32,
    background: vec3,
) -> vec3:
    """Trace a ray and return the radiance arriving along it.

    Args:
        ray_origin: The ray origin.
        ray_direction: The ray direction (non-zero).
        bounces: Remaining reflection budget. Zero means no reflection.
        epsilon: Offset for shadow and reflected ray origins.
        background: Radiance of rays that hit nothing.

    Returns:
        The unclamped radiance (RGB).
    """
    radiance = vec3(0.0, 0.0, 0.0)

    # Weight of the current segment in the final blend
    weight = 1.0

    origin = ray_origin
    direction = ray_direction

    # Active flag for continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for depth in range(bounces + 1):
        if active == 1:
            hit_record = intersect_scene(origin, direction)

            if hit_record.hit == 0:
                radiance += weight * background
                active = 0
            else:
                point = hit_record.point
                normal = hit_record.normal

                direct = illuminate(hit_record.object_id, point, normal, origin, epsilon)
                reflectivity = get_phong_reflectivity(hit_record.material_id)

                if depth == bounces or reflectivity == 0.0:
                    radiance += weight * direct
                    active = 0
                else:
                    radiance += weight * (1.0 - reflectivity) * direct
                    weight *= reflectivity

                    mirrored = tm.normalize(reflect(direction, normal))
                    origin = point + epsilon * mirrored
                    direction = mirrored

    return radiance


# =============================================================================
# Python-callable entry points
# =============================================================================

_trace_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _trace_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    bounces: ti.i32,
    epsilon: ti.f32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
):
    # Single-iteration outer loop keeps the scene scans serial
    for _ in range(1):
        _trace_result[None] = trace(
            vec3(ox, oy, oz), vec3(dx, dy, dz), bounces, epsilon, vec3(bg_r, bg_g, bg_b)
        )


@ti.kernel
def _illuminate_kernel(
    object_id: ti.i32,
    px: ti.f32,
    py: ti.f32,
    pz: ti.f32,
    nx: ti.f32,
    ny: ti.f32,
    nz: ti.f32,
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    epsilon: ti.f32,
):
    for _ in range(1):
        _trace_result[None] = illuminate(
            object_id, vec3(px, py, pz), vec3(nx, ny, nz), vec3(ox, oy, oz), epsilon
        )


def _read_result() -> tuple[float, float, float]:
    c = _trace_result[None]
    return float(c[0]), float(c[1]), float(c[2])


def trace_ray(
    origin: Sequence[float],
    direction: Sequence[float],
    bounces: int,
    *,
    epsilon: float = DEFAULT_EPSILON,
    background: Sequence[float] = DEFAULT_BACKGROUND,
) -> tuple[float, float, float]:
    """Trace a single ray through the current scene.

    This is a Python-callable function for testing and debugging. For
    rendering, use Renderer which processes all pixels in one kernel.

    Args:
        origin: The ray origin (x, y, z).
        direction: The ray direction (x, y, z), non-zero.
        bounces: Reflection budget, non-negative.
        epsilon: Offset for shadow and reflected ray origins.
        background: Radiance of rays that hit nothing.

    Returns:
        Tuple of (R, G, B) linear radiance.

    Raises:
        ValueError: If the direction is zero or the bounce budget negative.
    """
    if bounces < 0:
        raise ValueError(f"Bounce budget must be non-negative, got {bounces}")
    ox, oy, oz = as_point(origin)
    dx, dy, dz = validate_direction(direction)
    bg_r, bg_g, bg_b = as_point(background)
    _trace_kernel(ox, oy, oz, dx, dy, dz, bounces, epsilon, bg_r, bg_g, bg_b)
    return _read_result()


def illuminate_point(
    object_id: int,
    point: Sequence[float],
    normal: Sequence[float],
    origin: Sequence[float],
    *,
    epsilon: float = DEFAULT_EPSILON,
) -> tuple[float, float, float]:
    """Compute Phong local illumination at a point (Python entry point).

    Args:
        object_id: The object the point lies on.
        point: The surface point.
        normal: The unit surface normal at the point.
        origin: The viewer position.
        epsilon: Offset for shadow ray origins.

    Returns:
        Tuple of (R, G, B) linear radiance.
    """
    px, py, pz = as_point(point)
    nx, ny, nz = as_point(normal)
    ox, oy, oz = as_point(origin)
    _illuminate_kernel(object_id, px, py, pz, nx, ny, nz, ox, oy, oz, epsilon)
    return _read_result()
