"""Image export utilities for rendered images.

Images are written as 8-bit RGB PNG files via Pillow, after sigmoidal tone
mapping and gamma encoding. Each pixel is written exactly once.

Example:
    >>> from src.whitted.preview.export import save_png
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.whitted.core.config import DEFAULT_BRIGHTNESS, DEFAULT_CONTRAST, DEFAULT_GAMMA
from src.whitted.preview.display import process_image_for_display

if TYPE_CHECKING:
    from src.whitted.core.renderer import Renderer


def image_to_uint8(
    image: npt.ArrayLike,
    *,
    brightness: float = DEFAULT_BRIGHTNESS,
    contrast: float = DEFAULT_CONTRAST,
    gamma: float = DEFAULT_GAMMA,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 for display/export.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        brightness: Tone mapping brightness.
        contrast: Tone mapping contrast.
        gamma: Display gamma.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image, brightness=brightness, contrast=contrast, gamma=gamma
    )
    return np.round(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.ArrayLike,
    filepath: str,
    *,
    brightness: float = DEFAULT_BRIGHTNESS,
    contrast: float = DEFAULT_CONTRAST,
    gamma: float = DEFAULT_GAMMA,
) -> None:
    """Save a linear NumPy image as a PNG file.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
        brightness: Tone mapping brightness.
        contrast: Tone mapping contrast.
        gamma: Display gamma.
    """
    image_uint8 = image_to_uint8(
        image, brightness=brightness, contrast=contrast, gamma=gamma
    )
    pil_image = PILImage.fromarray(image_uint8, mode="RGB")
    pil_image.save(filepath)


def save_png(renderer: Renderer, filepath: str) -> None:
    """Save a renderer's image as a PNG, using its tone mapping settings.

    Raises:
        RuntimeError: If the renderer has not rendered yet.
    """
    config = renderer.config
    save_png_from_array(
        renderer.get_image_numpy(),
        filepath,
        brightness=config.brightness,
        contrast=config.contrast,
        gamma=config.gamma,
    )
