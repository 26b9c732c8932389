"""Pinhole camera and primary ray generation.

setup_camera() loads a PinholeCamera into kernel-side state; cast_ray()
then turns a pixel into its primary ray. Pixel (0, 0) is the top-left
pixel and every pixel gets exactly one ray, through its centre.
"""

from .pinhole import PinholeCamera, cast_ray, get_camera_info, get_ray, setup_camera

__all__ = ["PinholeCamera", "setup_camera", "get_ray", "cast_ray", "get_camera_info"]
