"""Point lights and ambient lighting.

Point lights are stored in Taichi fields in the order they were added. Each
light has a position, a color, a scalar intensity and a falloff rule that
gives the illumination reaching a surface at a given distance:

    INVERSE_SQUARE:  I(d) = color * intensity / (4 * pi * d^2)
    NONE:            I(d) = color * intensity

The scene's ambient lighting is a single RGB color, black by default.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


class LightFalloff(IntEnum):
    """How a point light's illumination falls off with distance."""

    INVERSE_SQUARE = 0
    NONE = 1


@dataclass(frozen=True)
class PointLightInfo:
    """Python-side description of a point light.

    Attributes:
        light_index: The index of the light in the light fields.
        position: World-space position.
        color: Light color (R, G, B).
        intensity: Scalar intensity multiplier.
        falloff: Distance falloff rule.
    """

    light_index: int
    position: tuple[float, float, float]
    color: tuple[float, float, float]
    intensity: float
    falloff: LightFalloff


# Maximum number of point lights in the scene
MAX_POINT_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_POINT_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_POINT_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_POINT_LIGHTS)
light_falloffs = ti.field(dtype=ti.i32, shape=MAX_POINT_LIGHTS)
num_point_lights = ti.field(dtype=ti.i32, shape=())

_ambient_lighting = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_lights() -> None:
    """Remove all point lights and reset ambient lighting to black."""
    num_point_lights[None] = 0
    _ambient_lighting[None] = vec3(0.0, 0.0, 0.0)


def _check_color(name: str, color: Sequence[float]) -> None:
    if len(color) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if not math.isfinite(component) or component < 0.0:
            raise ValueError(f"{name} component {i} = {component} must be non-negative")


def add_point_light(
    position: Sequence[float],
    color: Sequence[float],
    intensity: float = 1.0,
    falloff: LightFalloff = LightFalloff.INVERSE_SQUARE,
) -> int:
    """Add a point light to the scene.

    Args:
        position: World-space position (x, y, z).
        color: Light color (R, G, B), non-negative.
        intensity: Scalar intensity multiplier, non-negative.
        falloff: Distance falloff rule.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If the color or intensity is negative.
    """
    _check_color("Light color", color)
    if not math.isfinite(intensity) or intensity < 0.0:
        raise ValueError(f"Light intensity must be non-negative, got {intensity}")

    idx = num_point_lights[None]
    if idx >= MAX_POINT_LIGHTS:
        raise RuntimeError(f"Maximum number of point lights ({MAX_POINT_LIGHTS}) exceeded")

    light_positions[idx] = vec3(position[0], position[1], position[2])
    light_colors[idx] = vec3(color[0], color[1], color[2])
    light_intensities[idx] = intensity
    light_falloffs[idx] = int(LightFalloff(falloff))
    num_point_lights[None] = idx + 1
    return idx


def get_point_light_count() -> int:
    """Get the number of point lights in the scene."""
    return int(num_point_lights[None])


def set_ambient_lighting(color: Sequence[float]) -> None:
    """Set the scene's ambient lighting color.

    Raises:
        ValueError: If any component is negative.
    """
    _check_color("Ambient lighting", color)
    _ambient_lighting[None] = vec3(color[0], color[1], color[2])


def get_ambient_lighting_python() -> tuple[float, float, float]:
    """Get the ambient lighting color from Python."""
    c = _ambient_lighting[None]
    return float(c[0]), float(c[1]), float(c[2])


@ti.func
def get_ambient_lighting() -> vec3:
    """Get the ambient lighting color inside a kernel."""
    return _ambient_lighting[None]


@ti.func
def illumination_at(light_index: ti.i32, distance: ti.f32) -> vec3:
    """Illumination a light delivers at a given distance.

    Args:
        light_index: Index of the light.
        distance: Distance from the light to the surface point.

    Returns:
        The attenuated light intensity (RGB).
    """
    base = light_colors[light_index] * light_intensities[light_index]
    result = base
    if light_falloffs[light_index] == int(LightFalloff.INVERSE_SQUARE):
        result = base / (4.0 * tm.pi * distance * distance)
    return result
