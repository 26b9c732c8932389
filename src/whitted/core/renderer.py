"""Render target and the image render loop.

The renderer shoots one primary ray through the centre of every pixel,
traces it with the Whitted tracer and stores the unclamped linear radiance
in a preallocated Taichi field. Pixels are visited row-major, top to bottom,
in bands of PROGRESS_ROWS rows. Each band is one kernel launch, after which
progress is logged and the optional callback is invoked.

The pixel loop inside a band is serialized, so the whole image is produced
by a single thread in a deterministic order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.pinhole import setup_camera
    >>> from src.whitted.core.config import RenderConfig
    >>> from src.whitted.core.renderer import Renderer
    >>> from src.whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> renderer = Renderer(RenderConfig(width=320, height=240))
    >>> renderer.render()
    >>> renderer.save_png("demo.png")
"""

import logging
import time
from collections.abc import Callable

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.whitted.camera.pinhole import cast_ray
from src.whitted.core.config import RenderConfig
from src.whitted.core.tracer import trace

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Rows traced per kernel launch, and so per progress report
PROGRESS_ROWS = 10

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Linear radiance per pixel, indexed [x, y] with y = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


def check_image_size(width: int, height: int) -> None:
    """Raise ValueError if an image does not fit the render target."""
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )


@ti.kernel
def _render_rows(
    y_start: ti.i32,
    y_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    bounces: ti.i32,
    epsilon: ti.f32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
):
    background = vec3(bg_r, bg_g, bg_b)
    ti.loop_config(serialize=True)
    for idx in range((y_end - y_start) * width):
        x = idx % width
        y = y_start + idx // width
        ray = cast_ray(x, y, width, height)
        _color_buffer[x, y] = trace(ray.origin, ray.direction, bounces, epsilon, background)


class Renderer:
    """Renders the current scene through the current camera.

    The scene (objects, materials, lights) and the camera live in module
    level Taichi fields; set them up before calling render().

    Attributes:
        config: The render configuration.
    """

    def __init__(self, config: RenderConfig) -> None:
        """Initialize the renderer.

        Raises:
            ValueError: If the image does not fit the render target.
        """
        check_image_size(config.width, config.height)
        self.config = config
        self._rendered = False

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def render(self, callback: ProgressCallback | None = None) -> None:
        """Render the full image.

        Args:
            callback: Optional function called after each band of rows with
                (rows_done, total_rows).
        """
        config = self.config
        bg_r, bg_g, bg_b = config.background

        logger.info(
            "Rendering %dx%d, %d bounces", config.width, config.height, config.bounces
        )
        start = time.perf_counter()

        for y_start in range(0, config.height, PROGRESS_ROWS):
            y_end = min(y_start + PROGRESS_ROWS, config.height)
            _render_rows(
                y_start,
                y_end,
                config.width,
                config.height,
                config.bounces,
                config.epsilon,
                bg_r,
                bg_g,
                bg_b,
            )
            logger.info("%.2f%% completed", 100.0 * y_end / config.height)
            if callback is not None:
                callback(y_end, config.height)

        self._rendered = True
        logger.info("Render finished in %.2fs", time.perf_counter() - start)

    def _check_rendered(self) -> None:
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the linear radiance image.

        Returns:
            Unclamped float32 array of shape (height, width, 3), row 0 at
            the top.

        Raises:
            RuntimeError: If render() has not been called.
        """
        self._check_rendered()
        full_image = _color_buffer.to_numpy()
        image = full_image[: self.width, : self.height, :]
        # (width, height, 3) -> (height, width, 3)
        return np.ascontiguousarray(np.transpose(image, (1, 0, 2))).astype(np.float32)

    def get_display_image(self) -> npt.NDArray[np.float32]:
        """Get the tone mapped, gamma encoded image in [0, 1]."""
        from src.whitted.preview.display import process_image_for_display

        return process_image_for_display(
            self.get_image_numpy(),
            brightness=self.config.brightness,
            contrast=self.config.contrast,
            gamma=self.config.gamma,
        )

    def save_png(self, filepath: str) -> None:
        """Save the display image as an 8-bit PNG."""
        from src.whitted.preview.export import save_png

        save_png(self, filepath)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"bounces={self.config.bounces})"
        )
