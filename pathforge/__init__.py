"""
PathForge - A Python Monte Carlo Path Tracer

A small, complete path tracer with support for:
- Ray/sphere intersection with nearest-hit scene queries
- Diffuse, metal and glass materials
- Thin-lens camera with depth of field
- Reproducible multi-threaded rendering from a seed
- PPM and Pillow image output
"""

__version__ = "0.1.0"
__author__ = "PathForge Team"

from .errors import PathForgeError, ConfigurationError, SceneParseError, SamplingError, RenderCancelled
from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .camera import Camera
from .renderer import Renderer, RenderSettings, estimate_color, sky_color
from .image_io import to_ldr, write_ppm, save_image
from .scene_parser import SceneParser, load_scene, parse_scene
from .scenes import ScenePreset, SCENES, two_spheres, material_showcase, random_spheres
