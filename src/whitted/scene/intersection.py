"""Scene-level primitive storage and closest-hit queries.

The scene keeps one row per object in an object table, in insertion order.
Each row records the object's shape kind (sphere or plane), the row of the
shape's own storage, and the object's material ID. Shape parameters are
kept in Structure-of-Arrays Taichi fields, one set per shape kind.

intersect_scene() scans every object with a plain linear loop and keeps the
closest hit. A later hit only replaces the current one when it is strictly
closer, so equal distances resolve to the object added first.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.intersection import (
    ...     add_sphere, add_plane, clear_scene, find_closest_intersection
    ... )
    >>> clear_scene()
    >>> add_sphere((0, 0, -5), 1.0, material_id=0)
    >>> add_plane((0, -1, 0), (0, 1, 0), material_id=1)
    >>> find_closest_intersection((0, 0, 0), (0, 0, -1)).distance
    4.0
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import as_point, validate_direction
from src.whitted.geometry.plane import Plane, hit_plane, plane_normal_at
from src.whitted.geometry.sphere import (
    HitRecord,
    Sphere,
    hit_sphere,
    make_miss,
    sphere_normal_at,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ShapeKind(IntEnum):
    """Kinds of shapes an object can have."""

    SPHERE = 0
    PLANE = 1


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if the ray intersected any object, 0 otherwise.
        t: Distance along the ray to the hit point; +inf on a miss.
        point: The world-space hit point. Only valid if hit == 1.
        normal: The unit surface normal at the hit point. Only valid if
            hit == 1.
        object_id: Row of the hit object in the object table; -1 on a miss.
            The scene keeps ownership of the object, this is only a handle.
        material_id: The material ID of the hit object; -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    object_id: ti.i32
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_PLANES = 256
MAX_OBJECTS = MAX_SPHERES + MAX_PLANES

# Object table, in insertion order
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_shape_indices = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Plane storage: Structure of Arrays layout
plane_points = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all objects from the scene.

    Resets the object and shape counts to zero. The actual field data is not
    cleared but will be overwritten when new objects are added.
    """
    num_objects[None] = 0
    num_spheres[None] = 0
    num_planes[None] = 0


def _append_object(kind: ShapeKind, shape_index: int, material_id: int) -> int:
    """Append a row to the object table and return its object ID."""
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    object_kinds[idx] = int(kind)
    object_shape_indices[idx] = shape_index
    object_material_ids[idx] = material_id
    num_objects[None] = idx + 1
    return idx


def add_sphere(center: Sequence[float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: The material ID to associate with this sphere.

    Returns:
        The object ID of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is not a positive number.
    """
    if not (math.isfinite(radius) and radius > 0.0):
        raise ValueError(f"Sphere radius must be positive, got {radius}")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    num_spheres[None] = idx + 1
    return _append_object(ShapeKind.SPHERE, idx, material_id)


def add_plane(point: Sequence[float], normal: Sequence[float], material_id: int = 0) -> int:
    """Add an infinite plane to the scene.

    Args:
        point: Any point in the plane.
        normal: The plane normal. It is normalized before storage.
        material_id: The material ID to associate with this plane.

    Returns:
        The object ID of the added plane.

    Raises:
        RuntimeError: If the maximum number of planes is exceeded.
        ValueError: If the normal has zero length.
    """
    nx, ny, nz = as_point(normal)
    length = math.sqrt(nx * nx + ny * ny + nz * nz)
    if not (math.isfinite(length) and length > 0.0):
        raise ValueError(f"Plane normal must be a non-zero vector, got {normal}")

    idx = num_planes[None]
    if idx >= MAX_PLANES:
        raise RuntimeError(f"Maximum number of planes ({MAX_PLANES}) exceeded")
    plane_points[idx] = vec3(point[0], point[1], point[2])
    plane_normals[idx] = vec3(nx / length, ny / length, nz / length)
    num_planes[None] = idx + 1
    return _append_object(ShapeKind.PLANE, idx, material_id)


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of planes in the scene."""
    return int(num_planes[None])


# =============================================================================
# Taichi-side queries
# =============================================================================


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create the EMPTY SceneHitRecord."""
    return SceneHitRecord(
        hit=0,
        t=tm.inf,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        object_id=-1,
        material_id=-1,
    )


@ti.func
def intersect_object(object_id: ti.i32, ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with a single object, dispatching on its shape kind.

    Args:
        object_id: Row of the object in the object table.
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        The object's HitRecord.
    """
    kind = object_kinds[object_id]
    idx = object_shape_indices[object_id]

    rec = make_miss()
    if kind == int(ShapeKind.SPHERE):
        sphere = Sphere(center=sphere_centers[idx], radius=sphere_radii[idx])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
    elif kind == int(ShapeKind.PLANE):
        plane = Plane(point=plane_points[idx], normal=plane_normals[idx])
        rec = hit_plane(ray_origin, ray_direction, plane)
    return rec


@ti.func
def normal_at(object_id: ti.i32, position: vec3) -> vec3:
    """Unit surface normal of an object at a position on its surface.

    Spheres give the outward normal; planes give their stored normal.
    """
    kind = object_kinds[object_id]
    idx = object_shape_indices[object_id]

    normal = vec3(0.0, 0.0, 0.0)
    if kind == int(ShapeKind.SPHERE):
        sphere = Sphere(center=sphere_centers[idx], radius=sphere_radii[idx])
        normal = sphere_normal_at(sphere, position)
    elif kind == int(ShapeKind.PLANE):
        plane = Plane(point=plane_points[idx], normal=plane_normals[idx])
        normal = plane_normal_at(plane, position)
    return normal


@ti.func
def get_object_material_id(object_id: ti.i32) -> ti.i32:
    """Get the material ID of an object."""
    return object_material_ids[object_id]


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the closest intersection of a ray with the scene.

    Tests every object in insertion order and keeps the hit with the
    smallest distance. Ties keep the earlier object.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A SceneHitRecord for the closest hit, or the EMPTY record if the
        ray hits nothing.
    """
    closest_t = tm.inf
    result = _make_miss_record()

    for i in range(num_objects[None]):
        rec = intersect_object(i, ray_origin, ray_direction)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                object_id=i,
                material_id=object_material_ids[i],
            )

    return result


# =============================================================================
# Python-callable queries
# =============================================================================


@dataclass(frozen=True)
class Intersection:
    """Python-side view of an intersection result.

    Attributes:
        hit: Whether anything was hit.
        distance: Distance along the ray to the hit; math.inf when empty.
        point: The world-space hit point.
        normal: The unit surface normal at the hit point.
        object_id: The hit object's ID, or None when empty.
    """

    hit: bool
    distance: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    object_id: int | None

    @property
    def is_empty(self) -> bool:
        """True when the ray hit nothing."""
        return not self.hit


# Single-query output slots
_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_query_object = ti.field(dtype=ti.i32, shape=())


@ti.func
def _store_query(hit: ti.i32, t: ti.f32, point: vec3, normal: vec3, object_id: ti.i32):
    _query_hit[None] = hit
    _query_t[None] = t
    _query_point[None] = point
    _query_normal[None] = normal
    _query_object[None] = object_id


@ti.kernel
def _closest_intersection_kernel(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
):
    # Single-iteration outer loop keeps the object scan serial
    for _ in range(1):
        rec = intersect_scene(vec3(ox, oy, oz), vec3(dx, dy, dz))
        _store_query(rec.hit, rec.t, rec.point, rec.normal, rec.object_id)


@ti.kernel
def _object_intersection_kernel(
    object_id: ti.i32, ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
):
    for _ in range(1):
        rec = intersect_object(object_id, vec3(ox, oy, oz), vec3(dx, dy, dz))
        _store_query(rec.hit, rec.t, rec.point, rec.normal, object_id)


def _read_query() -> Intersection:
    """Convert the query output slots to an Intersection."""
    if _query_hit[None] == 0:
        return Intersection(
            hit=False,
            distance=math.inf,
            point=(0.0, 0.0, 0.0),
            normal=(0.0, 0.0, 0.0),
            object_id=None,
        )
    p = _query_point[None]
    n = _query_normal[None]
    return Intersection(
        hit=True,
        distance=float(_query_t[None]),
        point=(float(p[0]), float(p[1]), float(p[2])),
        normal=(float(n[0]), float(n[1]), float(n[2])),
        object_id=int(_query_object[None]),
    )


def find_closest_intersection(
    origin: Sequence[float], direction: Sequence[float]
) -> Intersection:
    """Find the closest object hit by a ray (Python entry point).

    Args:
        origin: The ray origin (x, y, z).
        direction: The ray direction (x, y, z), non-zero.

    Returns:
        The closest Intersection, empty if the ray hits nothing.

    Raises:
        ValueError: If the direction is zero or malformed.
    """
    ox, oy, oz = as_point(origin)
    dx, dy, dz = validate_direction(direction)
    _closest_intersection_kernel(ox, oy, oz, dx, dy, dz)
    return _read_query()


def query_object_intersection(
    object_id: int, origin: Sequence[float], direction: Sequence[float]
) -> Intersection:
    """Intersect a ray with one object only (Python entry point).

    Raises:
        ValueError: If the object ID is unknown or the direction is invalid.
    """
    if not 0 <= object_id < get_object_count():
        raise ValueError(f"Invalid object_id: {object_id}")
    ox, oy, oz = as_point(origin)
    dx, dy, dz = validate_direction(direction)
    _object_intersection_kernel(object_id, ox, oy, oz, dx, dy, dz)
    return _read_query()
