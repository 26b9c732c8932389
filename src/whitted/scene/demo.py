"""Demo scene configuration.

A small scene that exercises every feature of the tracer:

- A matte grey floor plane at y = -1 (slightly reflective)
- Three glossy spheres resting on the floor: red, green and blue, the
  middle one a strong mirror
- Two white point lights with inverse-square falloff, placed so that each
  sphere casts a visible shadow on the floor
- A dim ambient term so shadowed regions are not pure black

The camera sits at the origin looking down -z, the usual ray tracing
set-up.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.demo import create_demo_scene
    >>> from src.whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
"""

from dataclasses import dataclass

from src.whitted.camera.pinhole import PinholeCamera
from src.whitted.scene.manager import SceneManager


@dataclass
class DemoSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        light_intensity: Intensity of each point light. With inverse-square
            falloff the lights sit about 6 units from the spheres, so a few
            hundred gives a well exposed image.
        light_color: RGB colour of both lights.
        ambient: Ambient lighting colour.
        mirror_reflectivity: Reflectivity of the middle sphere.
    """

    light_intensity: float = 400.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    ambient: tuple[float, float, float] = (0.05, 0.05, 0.05)
    mirror_reflectivity: float = 0.6


def create_demo_scene(
    aspect_ratio: float = 1.0,
    params: DemoSceneParams | None = None,
) -> tuple[SceneManager, PinholeCamera]:
    """Create the demo scene and a camera looking at it.

    Clears any existing scene data.

    Args:
        aspect_ratio: Width divided by height of the image to render.
        params: Optional scene parameters. Defaults to DemoSceneParams().

    Returns:
        Tuple of (scene_manager, camera).
    """
    if params is None:
        params = DemoSceneParams()

    scene = SceneManager()

    scene.add_phong_plane(point=(0.0, -1.0, 0.0), normal=(0.0, 1.0, 0.0), color=(0.6, 0.6, 0.6))

    scene.add_phong_sphere(center=(-2.2, 0.0, -6.0), radius=1.0, color=(0.8, 0.15, 0.1))
    scene.add_phong_sphere(
        center=(0.0, 0.0, -7.0),
        radius=1.0,
        color=(0.1, 0.7, 0.2),
        reflectivity=params.mirror_reflectivity,
    )
    scene.add_phong_sphere(center=(2.2, 0.0, -6.0), radius=1.0, color=(0.1, 0.2, 0.85))

    scene.add_point_light((-4.0, 5.0, -2.0), params.light_color, params.light_intensity)
    scene.add_point_light((4.0, 4.0, -3.0), params.light_color, params.light_intensity * 0.5)

    scene.set_ambient_lighting(params.ambient)

    camera = PinholeCamera(
        lookfrom=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=60.0,
        aspect_ratio=aspect_ratio,
    )

    return scene, camera
