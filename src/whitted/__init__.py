"""Whitted-style ray tracer built on Taichi.

This package renders scenes of spheres and planes lit by point lights, using:
- Phong local illumination (ambient, diffuse, specular)
- Binary shadows from shadow rays toward each point light
- Mirror reflection with a bounded bounce budget
- Sigmoidal tone mapping and display gamma

Subpackages:
    core: Ray type, render configuration, shading/tracing and the render loop
    geometry: Sphere and plane primitives with their intersection routines
    materials: Phong material registry
    scene: Object table, closest-hit queries, point lights and the scene manager
    camera: Pinhole camera with per-pixel ray generation
    preview: Tone mapping, preview display and PNG export
"""

__version__ = "0.1.0"
