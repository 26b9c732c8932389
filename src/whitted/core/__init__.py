"""Core rendering module.

Components:
    ray: Ray data structure and vector helpers
    config: RenderConfig and the default rendering constants
    tracer: Phong illumination with shadow rays, and the reflection tracer
    renderer: Render target and the row-band render loop

All compute-intensive operations use Taichi kernels.
"""

from .config import (
    DEFAULT_BACKGROUND,
    DEFAULT_BRIGHTNESS,
    DEFAULT_CONTRAST,
    DEFAULT_EPSILON,
    DEFAULT_GAMMA,
    RenderConfig,
)
from .ray import Ray, make_ray, ray_at, reflect, reflect_in, validate_direction

# Note: tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from src.whitted.core.tracer or src.whitted.core.renderer.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "reflect",
    "reflect_in",
    "validate_direction",
    "RenderConfig",
    "DEFAULT_BACKGROUND",
    "DEFAULT_BRIGHTNESS",
    "DEFAULT_CONTRAST",
    "DEFAULT_EPSILON",
    "DEFAULT_GAMMA",
]
