"""
Camera module for generating primary rays.

Supports:
- Perspective projection
- Depth of field (defocus blur)
- Configurable field of view
- Arbitrary positioning via look-at
"""

from __future__ import annotations
import math

import numpy as np

from .errors import ConfigurationError
from .vec3 import Vec3, Point3
from .ray import Ray


class Camera:
    """A thin-lens camera with perspective projection and depth of field."""

    def __init__(
        self,
        look_from: Point3,
        look_at: Point3,
        vup: Vec3 = Vec3(0, 1, 0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
        aperture: float = 0.0,
        focus_dist: float = 1.0,
    ):
        """Create a camera.

        Args:
            look_from: Camera position in world space
            look_at: Point the camera is looking at
            vup: World up vector (usually (0, 1, 0))
            vfov: Vertical field of view in degrees
            aspect_ratio: Width / Height ratio
            aperture: Lens aperture for depth of field (0 = pinhole)
            focus_dist: Distance to the focus plane

        Raises:
            ConfigurationError: for a degenerate view or out-of-range parameter
        """
        if not 0.0 < vfov < 180.0:
            raise ConfigurationError(f"Vertical field of view must be in (0, 180) degrees, got {vfov}")
        if not math.isfinite(aspect_ratio) or aspect_ratio <= 0:
            raise ConfigurationError(f"Aspect ratio must be a positive number, got {aspect_ratio}")
        if not math.isfinite(aperture) or aperture < 0:
            raise ConfigurationError(f"Aperture must be a non-negative number, got {aperture}")
        if not math.isfinite(focus_dist) or focus_dist <= 0:
            raise ConfigurationError(f"Focus distance must be a positive number, got {focus_dist}")

        view = look_from - look_at
        if view.near_zero():
            raise ConfigurationError("look_from and look_at must be different points")
        if vup.cross(view).near_zero():
            raise ConfigurationError("vup must not be parallel to the viewing direction")

        theta = math.radians(vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        # Compute orthonormal camera basis
        self.w = view.normalize()                  # Points backward from camera
        self.u = vup.cross(self.w).normalize()     # Points right
        self.v = self.w.cross(self.u)              # Points up

        self.origin = look_from
        self.horizontal = self.u * (viewport_width * focus_dist)
        self.vertical = self.v * (viewport_height * focus_dist)
        self.lower_left_corner = (
            self.origin
            - self.horizontal / 2
            - self.vertical / 2
            - self.w * focus_dist
        )

        self.lens_radius = aperture / 2

    def get_ray(self, s: float, t: float, rng: np.random.Generator) -> Ray:
        """Generate a ray for the given coordinates on the image plane.

        Args:
            s: Horizontal coordinate [0, 1] (0 = left, 1 = right)
            t: Vertical coordinate [0, 1] (0 = bottom, 1 = top)
            rng: Random generator used for the lens sample

        Returns:
            A ray from the lens through the specified point on the focal plane
        """
        if self.lens_radius > 0:
            rd = Vec3.random_in_unit_disk(rng) * self.lens_radius
            offset = self.u * rd.x + self.v * rd.y
        else:
            offset = Vec3(0, 0, 0)

        direction = (
            self.lower_left_corner
            + self.horizontal * s
            + self.vertical * t
            - self.origin
            - offset
        )

        return Ray(self.origin + offset, direction)

    def __repr__(self) -> str:
        return f"Camera(origin={self.origin}, looking_at={self.lower_left_corner + self.horizontal/2 + self.vertical/2})"
