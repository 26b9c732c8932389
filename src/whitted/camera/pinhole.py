"""Pinhole camera: one primary ray per pixel, through the pixel centre.

The camera is positioned with look-at parameters (eye, target, up vector)
and a vertical field of view. From these it derives a right-handed frame

    right: points right in the image
    up:    points up in the image
    back:  points from the target toward the eye

and an image plane at unit distance in front of the eye, described by its
upper-left corner and the two vectors spanning it to the right and down.
Pixel (0, 0) is the top-left pixel and y grows downward, so a pixel maps to
a point on the plane without any flipping.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.pinhole import PinholeCamera, setup_camera, cast_ray
    >>>
    >>> setup_camera(PinholeCamera(
    ...     lookfrom=(0.0, 0.0, 0.0),
    ...     lookat=(0.0, 0.0, -1.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=60.0,
    ...     aspect_ratio=4.0 / 3.0,
    ... ))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = cast_ray(0, 0, 320, 240)  # Ray through the top-left pixel
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import Ray, make_ray


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        lookfrom: Eye position in world space (x, y, z).
        lookat: Point the camera is aimed at (x, y, z).
        vup: Approximate up direction, usually (0, 1, 0).
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Image width divided by image height.
    """

    lookfrom: tuple[float, float, float]
    lookat: tuple[float, float, float]
    vup: tuple[float, float, float]
    vfov: float
    aspect_ratio: float


_eye = ti.Vector.field(3, dtype=ti.f32, shape=())
_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_back = ti.Vector.field(3, dtype=ti.f32, shape=())

# Image plane: upper-left corner and the full extents to the right and down
_upper_left = ti.Vector.field(3, dtype=ti.f32, shape=())
_span_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_span_down = ti.Vector.field(3, dtype=ti.f32, shape=())


def _unit(vector: np.ndarray, message: str) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length < 1e-12:
        raise ValueError(message)
    return vector / length


def setup_camera(camera: PinholeCamera) -> None:
    """Load a camera configuration into the kernel-side camera state.

    Must be called before rendering, and again whenever the camera changes.

    Raises:
        ValueError: If lookfrom equals lookat, vup is parallel to the view
            direction, the field of view is outside (0, 180) degrees, or the
            aspect ratio is not positive.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"vfov must be in (0, 180) degrees, got {camera.vfov}")
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"aspect_ratio must be positive, got {camera.aspect_ratio}")

    eye = np.asarray(camera.lookfrom, dtype=np.float64)
    target = np.asarray(camera.lookat, dtype=np.float64)
    vup = np.asarray(camera.vup, dtype=np.float64)

    back = _unit(eye - target, "Camera lookfrom and lookat must differ")
    right = _unit(
        np.cross(vup, back), "Camera vup must not be parallel to the view direction"
    )
    up = np.cross(back, right)

    plane_height = 2.0 * math.tan(math.radians(camera.vfov) / 2.0)
    plane_width = camera.aspect_ratio * plane_height

    span_right = plane_width * right
    span_down = -plane_height * up
    upper_left = eye - back - span_right / 2.0 - span_down / 2.0

    _eye[None] = eye.tolist()
    _right[None] = right.tolist()
    _up[None] = up.tolist()
    _back[None] = back.tolist()
    _upper_left[None] = upper_left.tolist()
    _span_right[None] = span_right.tolist()
    _span_down[None] = span_down.tolist()


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Ray from the eye through image coordinates (s, t).

    Args:
        s: Horizontal position, 0 at the left edge and 1 at the right edge.
        t: Vertical position, 0 at the top edge and 1 at the bottom edge.

    Returns:
        A Ray starting at the eye with a unit direction.
    """
    target = _upper_left[None] + s * _span_right[None] + t * _span_down[None]
    eye = _eye[None]
    return make_ray(eye, tm.normalize(target - eye))


@ti.func
def cast_ray(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Primary ray through the centre of pixel (pixel_x, pixel_y).

    Pixel (0, 0) is the top-left pixel.
    """
    s = (ti.cast(pixel_x, ti.f32) + 0.5) / ti.cast(width, ti.f32)
    t = (ti.cast(pixel_y, ti.f32) + 0.5) / ti.cast(height, ti.f32)
    return get_ray(s, t)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Current camera state, for debugging and tests.

    Returns:
        Dictionary with eye, right, up, back, upper_left, span_right and
        span_down.
    """
    fields = {
        "eye": _eye,
        "right": _right,
        "up": _up,
        "back": _back,
        "upper_left": _upper_left,
        "span_right": _span_right,
        "span_down": _span_down,
    }
    return {
        name: (float(field[None][0]), float(field[None][1]), float(field[None][2]))
        for name, field in fields.items()
    }
