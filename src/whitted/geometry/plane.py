"""Infinite plane primitive with ray-plane intersection.

A plane is defined by:
- point: Any point Q lying in the plane
- normal: A vector N perpendicular to the plane (any non-zero length)

Ray-plane intersection solves the linear equation
    (O + s * D - Q) . N = 0   =>   s = (Q - O) . N / (D . N)

A ray parallel to the plane (D . N == 0) is reported as a miss before the
division happens, so a NaN or infinite distance can never be produced.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.plane import Plane, hit_plane
    >>> # Floor at y = 0
    >>> floor = Plane(point=ti.math.vec3(0, 0, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord, make_miss

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Plane:
    """An infinite plane through a point with a given normal.

    Attributes:
        point: A point in the plane (vec3).
        normal: The plane normal (vec3, non-zero).
    """

    point: vec3
    normal: vec3


@ti.func
def plane_normal_at(plane: Plane, position: vec3) -> vec3:
    """Unit normal of the plane. It is the same everywhere on the plane."""
    return tm.normalize(plane.normal)


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, plane: Plane) -> HitRecord:
    """Intersect a ray with a plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        plane: The plane to test intersection against.

    Returns:
        A HitRecord. The reported normal faces the incoming ray: N^ when
        D . N^ < 0 and -N^ when D . N^ > 0. Exactly grazing incidence would
        leave the zero vector, but such rays are parallel and already misses.
    """
    denom = tm.dot(ray_direction, plane.normal)

    result = make_miss()

    if denom != 0.0:
        s = tm.dot(plane.point - ray_origin, plane.normal) / denom

        # Behind the origin, or not a finite number
        if s >= 0.0 and s < tm.inf:
            point = ray_origin + s * ray_direction

            unit_normal = plane_normal_at(plane, point)
            facing = tm.dot(ray_direction, unit_normal)

            oriented = vec3(0.0, 0.0, 0.0)
            if facing < 0.0:
                oriented = unit_normal
            elif facing > 0.0:
                oriented = -unit_normal

            result = HitRecord(hit=1, t=s, point=point, normal=oriented)

    return result


@ti.func
def make_plane(point: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and a normal."""
    return Plane(point=point, normal=normal)
