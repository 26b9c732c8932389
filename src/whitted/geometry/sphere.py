"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere dataclass, the HitRecord shared by all
primitives, and the sphere intersection routine.

The intersection solves a*s^2 + b*s + c = 0 with the cancellation-free form
of the quadratic formula, so that near-tangent rays and distant spheres do
not lose precision when b^2 is close to 4ac.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Result of intersecting a ray with a single primitive.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 otherwise.
        t: Distance along the ray, in units of the ray direction, to the hit
            point. +inf when there is no hit.
        point: The world-space hit point. Only valid if hit == 1.
        normal: The unit surface normal at the hit point. Only valid if
            hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def make_miss() -> HitRecord:
    """Create a HitRecord describing no intersection."""
    return HitRecord(
        hit=0,
        t=tm.inf,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def _solve_quadratic(a: ti.f32, b: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve a*s^2 + b*s + c = 0 given the square root of the discriminant.

    Uses q = -(b + sign(b) * sqrt_d) / 2, with roots q / a and c / q, which
    avoids subtracting two nearly equal numbers.

    Returns:
        Tuple of (s0, s1) with s0 <= s1.
    """
    sign_b = ti.select(b < 0.0, -1.0, 1.0)
    q = -0.5 * (b + sign_b * sqrt_d)

    s0 = 0.0
    s1 = 0.0

    if ti.abs(q) < 1e-12:
        # b and the discriminant are both ~0: the textbook form is exact here
        s0 = (-b - sqrt_d) / (2.0 * a)
        s1 = (-b + sqrt_d) / (2.0 * a)
    else:
        s0 = q / a
        s1 = c / q

    if s0 > s1:
        temp = s0
        s0 = s1
        s1 = temp

    return s0, s1


@ti.func
def sphere_normal_at(sphere: Sphere, position: vec3) -> vec3:
    """Outward unit normal of the sphere at a surface position."""
    return tm.normalize(position - sphere.center)


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Intersect a ray with a sphere.

    The ray-sphere intersection is found by solving:
        |O + s * D - C|^2 = r^2

    which expands to a*s^2 + b*s + c = 0 with:
        a = D . D
        b = 2 D . (O - C)
        c = (O - C) . (O - C) - r^2

    A negative discriminant is a miss, and so is a pair of negative roots
    (the sphere lies entirely behind the ray). Otherwise the smallest
    non-negative root is reported; a ray starting inside the sphere reports
    the exit point. A tangent ray has a double root and reports one hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord. The normal is normalize(P - C), the outward normal.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    result = make_miss()

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        s_near, s_far = _solve_quadratic(a, b, c, sqrt_d)

        # s_far < 0 means both roots are behind the origin
        if s_far >= 0.0:
            s = s_near
            if s < 0.0:
                # Origin is inside the sphere: report the exit point
                s = s_far
            point = ray_origin + s * ray_direction
            result = HitRecord(
                hit=1,
                t=s,
                point=point,
                normal=sphere_normal_at(sphere, point),
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
