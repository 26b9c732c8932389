"""Display transform, preview window and PNG export.

display: sigmoidal tone mapping, display gamma and a Matplotlib preview
export: 8-bit conversion and PNG export via Pillow
"""

from src.whitted.preview.display import (
    apply_gamma,
    process_image_for_display,
    show_preview,
    tone_map_sigmoid,
)
from src.whitted.preview.export import image_to_uint8, save_png, save_png_from_array

__all__ = [
    "tone_map_sigmoid",
    "apply_gamma",
    "process_image_for_display",
    "show_preview",
    "image_to_uint8",
    "save_png",
    "save_png_from_array",
]
