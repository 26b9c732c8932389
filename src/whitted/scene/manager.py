"""Scene manager for coordinating objects, materials and lights.

This module provides a high-level scene management API on top of the
module-level Taichi fields that hold the object table, the Phong material
registry and the point lights. It keeps Python-side records of everything
added so that a scene can be inspected and serialized.

The SceneManager maintains:
- Phong materials, referenced by material ID
- Spheres and planes in insertion order (the object ID order)
- Point lights and the ambient lighting colour
- Scene serialization to a SceneConfig or a JSON-ready dict

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> mat_id = scene.add_phong_material(color=(0.8, 0.3, 0.3))
    >>> scene.add_sphere(center=(0, 0, -5), radius=1.0, material_id=mat_id)
    >>> scene.add_point_light(position=(2, 2, 0), color=(1, 1, 1), intensity=100.0)
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from src.whitted.materials.phong import (
    MAX_PHONG_MATERIALS,
    PLANE_ALPHA,
    PLANE_K_D,
    PLANE_K_S,
    PLANE_REFLECTIVITY,
    SPHERE_ALPHA,
    SPHERE_K_D,
    SPHERE_K_S,
    SPHERE_REFLECTIVITY,
    add_phong_material,
    clear_phong_materials,
    get_phong_material_count,
)
from src.whitted.scene.intersection import (
    MAX_PLANES,
    MAX_SPHERES,
    Intersection,
    ShapeKind,
    add_plane,
    add_sphere,
    clear_scene,
    find_closest_intersection,
    get_object_count,
    get_plane_count,
    get_sphere_count,
)
from src.whitted.scene.lights import (
    MAX_POINT_LIGHTS,
    LightFalloff,
    PointLightInfo,
    add_point_light,
    clear_lights,
    get_ambient_lighting_python,
    get_point_light_count,
    set_ambient_lighting,
)

logger = logging.getLogger(__name__)


def _vec3(values: Sequence[float]) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return float(values[0]), float(values[1]), float(values[2])


@dataclass
class MaterialInfo:
    """Information about a registered Phong material.

    Attributes:
        material_id: The material ID.
        color: Diffuse colour (R, G, B).
        k_d: Diffuse coefficient.
        k_s: Specular coefficient.
        alpha: Specular exponent.
        reflectivity: Mirror reflectivity in [0, 1].
    """

    material_id: int
    color: tuple[float, float, float]
    k_d: float
    k_s: float
    alpha: float
    reflectivity: float


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        object_id: The sphere's position in the object table.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    object_id: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        object_id: The plane's position in the object table.
        point: A point in the plane.
        normal: The plane normal as given (stored normalized).
        material_id: The material ID assigned to the plane.
    """

    object_id: int
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    material_id: int


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations, in material ID order.
        objects: List of object configurations, in object ID order. Each
            has a "type" key ("sphere" or "plane").
        lights: List of point light configurations.
        ambient: Ambient lighting colour.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    objects: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    ambient: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])


class SceneManager:
    """Scene manager coordinating objects, materials and lights.

    There is one scene per process: the manager clears the shared Taichi
    fields when created and when clear() is called.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        objects: List of SphereInfo / PlaneInfo in object ID order.
        lights: List of PointLightInfo for all point lights.

    Example:
        >>> scene = SceneManager()
        >>> red = scene.add_phong_material(color=(0.8, 0.1, 0.1))
        >>> scene.add_sphere((0, 0, -5), 1.0, red)
        >>> scene.add_phong_plane((0, -1, 0), (0, 1, 0), color=(0.5, 0.5, 0.5))
        >>> scene.set_ambient_lighting((0.05, 0.05, 0.05))
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.objects: list[SphereInfo | PlaneInfo] = []
        self.lights: list[PointLightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_phong_materials()
        clear_lights()
        self.materials.clear()
        self.objects.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (objects, materials, lights, ambient)."""
        self._clear_all()
        logger.debug("Scene cleared")

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_phong_material(
        self,
        color: tuple[float, float, float],
        k_d: float = SPHERE_K_D,
        k_s: float = SPHERE_K_S,
        alpha: float = SPHERE_ALPHA,
        reflectivity: float = SPHERE_REFLECTIVITY,
    ) -> int:
        """Add a Phong material to the scene.

        Returns:
            The material ID.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is out of range.
        """
        color = _vec3(color)
        material_id = add_phong_material(color, k_d, k_s, alpha, reflectivity)
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                color=color,
                k_d=k_d,
                k_s=k_s,
                alpha=alpha,
                reflectivity=reflectivity,
            )
        )
        logger.debug("Added material %d: %s", material_id, self.materials[-1])
        return material_id

    def get_material_count(self) -> int:
        """Get the number of materials in the scene."""
        return get_phong_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= get_phong_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Object Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The material ID to assign to the sphere.

        Returns:
            The object ID of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius or material_id is invalid.
        """
        self._check_material_id(material_id)
        center = _vec3(center)
        object_id = add_sphere(center, radius, material_id)
        self.objects.append(
            SphereInfo(object_id=object_id, center=center, radius=radius, material_id=material_id)
        )
        logger.debug("Added sphere %d at %s, r=%g", object_id, center, radius)
        return object_id

    def add_plane(
        self,
        point: tuple[float, float, float],
        normal: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add an infinite plane to the scene.

        Args:
            point: Any point in the plane as (x, y, z).
            normal: The plane normal (non-zero, need not be unit length).
            material_id: The material ID to assign to the plane.

        Returns:
            The object ID of the added plane.

        Raises:
            RuntimeError: If the maximum number of planes is exceeded.
            ValueError: If the normal is zero or material_id is invalid.
        """
        self._check_material_id(material_id)
        point = _vec3(point)
        normal = _vec3(normal)
        object_id = add_plane(point, normal, material_id)
        self.objects.append(
            PlaneInfo(object_id=object_id, point=point, normal=normal, material_id=material_id)
        )
        logger.debug("Added plane %d through %s, n=%s", object_id, point, normal)
        return object_id

    # =========================================================================
    # Convenience Methods (add object with material in one call)
    # =========================================================================

    def add_phong_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        color: tuple[float, float, float],
        k_d: float = SPHERE_K_D,
        k_s: float = SPHERE_K_S,
        alpha: float = SPHERE_ALPHA,
        reflectivity: float = SPHERE_REFLECTIVITY,
    ) -> tuple[int, int]:
        """Add a sphere with a new Phong material.

        The material defaults are the usual sphere finish: glossy and
        slightly reflective.

        Returns:
            Tuple of (object_id, material_id).
        """
        material_id = self.add_phong_material(color, k_d, k_s, alpha, reflectivity)
        object_id = self.add_sphere(center, radius, material_id)
        return object_id, material_id

    def add_phong_plane(
        self,
        point: tuple[float, float, float],
        normal: tuple[float, float, float],
        color: tuple[float, float, float],
        k_d: float = PLANE_K_D,
        k_s: float = PLANE_K_S,
        alpha: float = PLANE_ALPHA,
        reflectivity: float = PLANE_REFLECTIVITY,
    ) -> tuple[int, int]:
        """Add a plane with a new Phong material.

        The material defaults are the usual plane finish: matte and
        barely reflective.

        Returns:
            Tuple of (object_id, material_id).
        """
        material_id = self.add_phong_material(color, k_d, k_s, alpha, reflectivity)
        object_id = self.add_plane(point, normal, material_id)
        return object_id, material_id

    # =========================================================================
    # Lighting
    # =========================================================================

    def add_point_light(
        self,
        position: tuple[float, float, float],
        color: tuple[float, float, float],
        intensity: float = 1.0,
        falloff: LightFalloff = LightFalloff.INVERSE_SQUARE,
    ) -> int:
        """Add a point light to the scene.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the color or intensity is negative.
        """
        position = _vec3(position)
        color = _vec3(color)
        falloff = LightFalloff(falloff)
        light_index = add_point_light(position, color, intensity, falloff)
        self.lights.append(
            PointLightInfo(
                light_index=light_index,
                position=position,
                color=color,
                intensity=intensity,
                falloff=falloff,
            )
        )
        logger.debug("Added %s point light %d at %s", falloff.name, light_index, position)
        return light_index

    def get_point_lights(self) -> list[PointLightInfo]:
        """Get the point lights in insertion order."""
        return list(self.lights)

    def set_ambient_lighting(self, color: tuple[float, float, float]) -> None:
        """Set the ambient lighting colour.

        Raises:
            ValueError: If any component is negative.
        """
        set_ambient_lighting(_vec3(color))

    def get_ambient_lighting(self) -> tuple[float, float, float]:
        """Get the ambient lighting colour."""
        return get_ambient_lighting_python()

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def find_closest_intersection(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
    ) -> Intersection:
        """Find the closest object hit by a ray.

        Raises:
            ValueError: If the direction is zero.
        """
        return find_closest_intersection(origin, direction)

    def get_object_count(self) -> int:
        """Get the total number of objects in the scene."""
        return get_object_count()

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return get_plane_count()

    def get_light_count(self) -> int:
        """Get the number of point lights in the scene."""
        return get_point_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all materials, objects and lights.
        """
        config = SceneConfig()

        for mat in self.materials:
            config.materials.append(
                {
                    "color": list(mat.color),
                    "k_d": mat.k_d,
                    "k_s": mat.k_s,
                    "alpha": mat.alpha,
                    "reflectivity": mat.reflectivity,
                }
            )

        for obj in self.objects:
            if isinstance(obj, SphereInfo):
                config.objects.append(
                    {
                        "type": ShapeKind.SPHERE.name.lower(),
                        "center": list(obj.center),
                        "radius": obj.radius,
                        "material_id": obj.material_id,
                    }
                )
            else:
                config.objects.append(
                    {
                        "type": ShapeKind.PLANE.name.lower(),
                        "point": list(obj.point),
                        "normal": list(obj.normal),
                        "material_id": obj.material_id,
                    }
                )

        for light in self.lights:
            config.lights.append(
                {
                    "position": list(light.position),
                    "color": list(light.color),
                    "intensity": light.intensity,
                    "falloff": light.falloff.name.lower(),
                }
            )

        config.ambient = list(self.get_ambient_lighting())
        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        # Materials first, objects refer to them by ID
        for mat_config in config.materials:
            self.add_phong_material(
                mat_config.get("color", [0.5, 0.5, 0.5]),
                k_d=mat_config.get("k_d", SPHERE_K_D),
                k_s=mat_config.get("k_s", SPHERE_K_S),
                alpha=mat_config.get("alpha", SPHERE_ALPHA),
                reflectivity=mat_config.get("reflectivity", SPHERE_REFLECTIVITY),
            )

        for obj_config in config.objects:
            obj_type = str(obj_config.get("type", "")).lower()
            material_id = obj_config.get("material_id", 0)
            if obj_type == "sphere":
                self.add_sphere(
                    obj_config.get("center", [0.0, 0.0, 0.0]),
                    obj_config.get("radius", 1.0),
                    material_id,
                )
            elif obj_type == "plane":
                self.add_plane(
                    obj_config.get("point", [0.0, 0.0, 0.0]),
                    obj_config.get("normal", [0.0, 1.0, 0.0]),
                    material_id,
                )
            else:
                raise ValueError(f"Unknown object type: {obj_type}")

        for light_config in config.lights:
            falloff_name = str(light_config.get("falloff", "inverse_square")).upper()
            if falloff_name not in LightFalloff.__members__:
                raise ValueError(f"Unknown light falloff: {falloff_name.lower()}")
            self.add_point_light(
                light_config.get("position", [0.0, 0.0, 0.0]),
                light_config.get("color", [1.0, 1.0, 1.0]),
                intensity=light_config.get("intensity", 1.0),
                falloff=LightFalloff[falloff_name],
            )

        self.set_ambient_lighting(config.ambient)

        logger.info(
            "Loaded scene: %d materials, %d objects, %d lights",
            len(self.materials),
            len(self.objects),
            len(self.lights),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "materials": config.materials,
            "objects": config.objects,
            "lights": config.lights,
            "ambient": config.ambient,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'objects', 'lights' and
                'ambient' keys. Missing keys mean empty.
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            objects=data.get("objects", []),
            lights=data.get("lights", []),
            ambient=data.get("ambient", [0.0, 0.0, 0.0]),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_planes() -> int:
        """Get the maximum number of planes supported."""
        return MAX_PLANES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_PHONG_MATERIALS

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of point lights supported."""
        return MAX_POINT_LIGHTS
