"""Tone mapping and Matplotlib-based preview display.

The renderer produces unbounded linear radiance. For display it is
compressed by a sigmoidal tone curve and then gamma encoded:

    pow     = L ** b
    display = pow / (pow + (0.5 / a) ** b)
    encoded = display ** (1 / gamma)

where ``a`` is the brightness (default 2.0), ``b`` the contrast (default
1.3) and ``gamma`` the display gamma (default 2.2). The curve maps 0 to 0,
is monotonic, and approaches 1 without reaching it. A radiance of
0.5 / a lands at display value 0.5.

All functions work component-wise on any NumPy array whose last axis holds
the RGB channels, a single colour included.

Example:
    >>> from src.whitted.preview.display import show_preview
    >>> renderer.render()
    >>> show_preview(renderer)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.whitted.core.config import DEFAULT_BRIGHTNESS, DEFAULT_CONTRAST, DEFAULT_GAMMA

if TYPE_CHECKING:
    from src.whitted.core.renderer import Renderer


def _check_positive(name: str, value: float) -> None:
    if not value > 0.0:
        raise ValueError(f"{name} must be positive, got {value}")


def tone_map_sigmoid(
    image: npt.ArrayLike,
    brightness: float = DEFAULT_BRIGHTNESS,
    contrast: float = DEFAULT_CONTRAST,
) -> npt.NDArray[np.float32]:
    """Apply sigmoidal tone mapping: L^b / (L^b + (0.5/a)^b).

    Args:
        image: Linear HDR values, shape (..., 3).
        brightness: Brightness ``a``; higher values brighten the image.
        contrast: Contrast ``b``; higher values steepen the curve.

    Returns:
        Tone mapped values in [0, 1]. Radiance far above 0.5 / a rounds
        to 1.0 in float32.

    Raises:
        ValueError: If brightness or contrast is not positive.
    """
    _check_positive("brightness", brightness)
    _check_positive("contrast", contrast)

    # Negative radiance is numerical noise
    image = np.maximum(np.asarray(image, dtype=np.float64), 0.0)

    powered = np.power(image, contrast)
    result = powered / (powered + (0.5 / brightness) ** contrast)

    return result.astype(np.float32)


def apply_gamma(
    image: npt.ArrayLike,
    gamma: float = DEFAULT_GAMMA,
) -> npt.NDArray[np.float32]:
    """Apply gamma encoding for display: out = in^(1/gamma).

    Args:
        image: Image values in [0, 1].
        gamma: Gamma value (default 2.2).

    Returns:
        Gamma encoded image.

    Raises:
        ValueError: If gamma is not positive.
    """
    _check_positive("gamma", gamma)
    image = np.asarray(image, dtype=np.float32)
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)

    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.ArrayLike,
    brightness: float = DEFAULT_BRIGHTNESS,
    contrast: float = DEFAULT_CONTRAST,
    gamma: float = DEFAULT_GAMMA,
) -> npt.NDArray[np.float32]:
    """Tone map and gamma encode a linear image.

    Args:
        image: Linear HDR values, shape (..., 3).
        brightness: Tone mapping brightness.
        contrast: Tone mapping contrast.
        gamma: Display gamma.

    Returns:
        Display values in [0, 1].
    """
    result = tone_map_sigmoid(image, brightness=brightness, contrast=contrast)
    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    renderer: Renderer,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display the current render as a Matplotlib figure.

    Args:
        renderer: A Renderer that has rendered an image.
        title: Custom title (default shows size and bounce budget).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = renderer.get_display_image()

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        title = (
            f"Render Preview - {renderer.width}x{renderer.height}, "
            f"{renderer.config.bounces} bounces"
        )
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
