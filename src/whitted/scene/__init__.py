"""Scene module for object storage, lighting and scene construction.

Components:
    intersection: Object table (spheres and planes) and closest-hit queries
    lights: Point lights, their falloff and the ambient lighting colour
    manager: SceneManager for building, querying and serializing scenes
    demo: Factory for the demo scene

The scene is stored in module-level Taichi fields so that kernels can read
it directly; SceneManager keeps the matching Python-side records.
"""

from .intersection import (
    MAX_OBJECTS,
    MAX_PLANES,
    MAX_SPHERES,
    Intersection,
    SceneHitRecord,
    ShapeKind,
    add_plane,
    add_sphere,
    clear_scene,
    find_closest_intersection,
    get_object_count,
    get_plane_count,
    get_sphere_count,
    intersect_object,
    intersect_scene,
    normal_at,
    query_object_intersection,
)
from .lights import (
    MAX_POINT_LIGHTS,
    LightFalloff,
    PointLightInfo,
    add_point_light,
    clear_lights,
    get_point_light_count,
    set_ambient_lighting,
)
from .manager import MaterialInfo, PlaneInfo, SceneConfig, SceneManager, SphereInfo
from .demo import DemoSceneParams, create_demo_scene

__all__ = [
    # Intersection module
    "ShapeKind",
    "SceneHitRecord",
    "Intersection",
    "add_sphere",
    "add_plane",
    "clear_scene",
    "get_object_count",
    "get_sphere_count",
    "get_plane_count",
    "intersect_object",
    "intersect_scene",
    "normal_at",
    "find_closest_intersection",
    "query_object_intersection",
    "MAX_SPHERES",
    "MAX_PLANES",
    "MAX_OBJECTS",
    # Lights module
    "LightFalloff",
    "PointLightInfo",
    "add_point_light",
    "clear_lights",
    "get_point_light_count",
    "set_ambient_lighting",
    "MAX_POINT_LIGHTS",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    "PlaneInfo",
    "SceneConfig",
    # Demo scene
    "DemoSceneParams",
    "create_demo_scene",
]
