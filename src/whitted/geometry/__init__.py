"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, the shared HitRecord, and ray-sphere intersection
    plane: Infinite plane primitive with ray-plane intersection

All intersection routines are Taichi functions (@ti.func) that take the ray
origin and direction plus the shape and return a HitRecord:
    rec = hit_shape(ray_origin, ray_direction, shape)

A miss is an ordinary result (hit == 0, t == +inf), never an error.
"""

from .plane import Plane, hit_plane, make_plane, plane_normal_at
from .sphere import HitRecord, Sphere, hit_sphere, make_miss, make_sphere, sphere_normal_at

__all__ = [
    "HitRecord",
    "make_miss",
    "Sphere",
    "hit_sphere",
    "make_sphere",
    "sphere_normal_at",
    "Plane",
    "hit_plane",
    "make_plane",
    "plane_normal_at",
]
