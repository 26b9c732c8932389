"""Ray data structure and vector utilities for the ray tracer.

This module provides the Ray dataclass and the small set of vector helpers
the tracer needs. The helpers are Taichi functions so they can be used from
any kernel; ``validate_direction`` is the Python-side guard used by every
public entry point that accepts a ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import math
from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). It does not have
            to be normalized, but it must be non-zero.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incident direction about a surface normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The outgoing mirror direction, incident - 2 (incident . n) n.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def reflect_in(v: vec3, normal: vec3) -> vec3:
    """Reflect a vector that points away from the surface about the normal.

    This is the form used for Phong highlights: with ``v`` pointing from the
    surface toward a light, the result points along the mirror direction on
    the other side of the normal. ``reflect_in(v, n) == reflect(-v, n)``.
    """
    return 2.0 * tm.dot(v, normal) * normal - v


# =============================================================================
# Python-side helpers
# =============================================================================


def validate_direction(direction: Sequence[float]) -> tuple[float, float, float]:
    """Check that a ray direction is usable and return it as a float tuple.

    A zero-length direction has no defined view vector and would only feed
    NaNs into the shading, so it is rejected up front.

    Args:
        direction: The direction as an (x, y, z) sequence.

    Returns:
        The direction as a tuple of three floats.

    Raises:
        ValueError: If the direction does not have three components, has a
            non-finite component, or has zero length.
    """
    if len(direction) != 3:
        raise ValueError(f"Ray direction must have 3 components, got {len(direction)}")
    dx, dy, dz = (float(c) for c in direction)
    if not all(math.isfinite(c) for c in (dx, dy, dz)):
        raise ValueError(f"Ray direction must be finite, got {direction}")
    if dx * dx + dy * dy + dz * dz == 0.0:
        raise ValueError("Ray direction must be non-zero")
    return dx, dy, dz


def as_point(point: Sequence[float]) -> tuple[float, float, float]:
    """Convert an (x, y, z) sequence to a tuple of floats.

    Raises:
        ValueError: If the point does not have three components.
    """
    if len(point) != 3:
        raise ValueError(f"Point must have 3 components, got {len(point)}")
    return float(point[0]), float(point[1]), float(point[2])
