"""Taichi-based Whitted-style ray tracer.

This package renders scenes of spheres and planes using Taichi, with support for:
- Directional and spherical (point) lights
- Lambertian direct lighting with hard shadows
- Mirror reflection blended by per-shape reflectivity
- Row-batched rendering with PPM/PNG output

Subpackages:
    core: Ray and color utilities, the integrator, and the rendering loop
    geometry: Sphere and plane primitives and intersection algorithms
    lighting: Light models and light storage
    scene: Shape storage, hit queries and scene management
    camera: Pinhole camera with primary ray generation
    preview: Image export and preview utilities
"""

__version__ = "0.1.0"
