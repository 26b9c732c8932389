"""Render configuration.

All tunable rendering constants live in a single frozen dataclass that is
passed explicitly to the renderer, the tracer entry points and the tone
mapper. Nothing here is process-wide state.

Example:
    >>> config = RenderConfig(width=320, height=240, bounces=3)
    >>> config.aspect_ratio
    1.3333333333333333
"""

import math
from dataclasses import dataclass

# Bias for shadow and reflected ray origins (world units)
DEFAULT_EPSILON = 1e-4

# Radiance returned for rays that leave the scene
DEFAULT_BACKGROUND = (0.001, 0.001, 0.001)

# Sigmoidal tone mapping constants
DEFAULT_BRIGHTNESS = 2.0
DEFAULT_CONTRAST = 1.3

# Display encoding gamma
DEFAULT_GAMMA = 2.2


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for a render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        bounces: Maximum reflection depth per primary ray. Zero disables
            reflection entirely.
        epsilon: Offset applied to the origin of shadow and reflected rays
            so they do not re-hit the surface they start on. It is an
            absolute distance, so very small or very large scenes may need
            a different value.
        background: Radiance (R, G, B) of rays that hit nothing.
        brightness: Tone mapping brightness ``a``.
        contrast: Tone mapping contrast ``b``.
        gamma: Display gamma.
    """

    width: int = 512
    height: int = 512
    bounces: int = 3
    epsilon: float = DEFAULT_EPSILON
    background: tuple[float, float, float] = DEFAULT_BACKGROUND
    brightness: float = DEFAULT_BRIGHTNESS
    contrast: float = DEFAULT_CONTRAST
    gamma: float = DEFAULT_GAMMA

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.bounces < 0:
            raise ValueError(f"Bounce budget must be non-negative, got {self.bounces}")
        if not (math.isfinite(self.epsilon) and self.epsilon > 0.0):
            raise ValueError(f"epsilon must be a positive number, got {self.epsilon}")
        if len(self.background) != 3 or any(c < 0.0 for c in self.background):
            raise ValueError(
                f"background must be 3 non-negative components, got {self.background}"
            )
        for name in ("brightness", "contrast", "gamma"):
            value = getattr(self, name)
            if value <= 0.0:
                raise ValueError(f"{name} must be positive, got {value}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height
