"""
Renderer module - the heart of the path tracer.

Implements:
- Depth-limited Monte Carlo path tracing
- Multi-sample anti-aliasing
- Multi-threaded scanline rendering with per-scanline random streams
"""

from __future__ import annotations
import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .errors import ConfigurationError, RenderCancelled
from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable

logger = logging.getLogger(__name__)

# Ignore hits closer than this to suppress self-intersection ("shadow acne").
T_MIN = 0.001

WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


@dataclass
class RenderSettings:
    """Configuration for the renderer.

    ``height`` is derived from ``width / aspect_ratio`` (truncated) when not
    given explicitly. ``num_threads=0`` uses one worker per CPU.
    """
    width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    height: Optional[int] = None
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 0
    seed: Optional[int] = None

    def __post_init__(self):
        if not math.isfinite(self.aspect_ratio) or self.aspect_ratio <= 0:
            raise ConfigurationError(f"Aspect ratio must be a positive number, got {self.aspect_ratio}")
        if self.width <= 0:
            raise ConfigurationError(f"Image width must be positive, got {self.width}")
        if self.height is None:
            self.height = int(self.width / self.aspect_ratio)
        if self.height <= 0:
            raise ConfigurationError(
                f"Image height must be positive, got {self.height} "
                f"(width={self.width}, aspect_ratio={self.aspect_ratio})"
            )
        if self.samples_per_pixel <= 0:
            raise ConfigurationError(f"Samples per pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth <= 0:
            raise ConfigurationError(f"Max depth must be positive, got {self.max_depth}")
        if self.num_threads < 0:
            raise ConfigurationError(f"Thread count must not be negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


def sky_color(ray: Ray) -> Color:
    """Background gradient from white (down) to sky blue (up)."""
    unit_direction = ray.direction.normalize()
    t = 0.5 * (unit_direction.y + 1.0)
    return WHITE * (1.0 - t) + SKY_BLUE * t


def estimate_color(ray: Ray, scene: Hittable, depth: int, rng: np.random.Generator) -> Color:
    """Estimate the color carried back along a ray.

    Follows scattered rays for at most ``depth`` bounces. Each bounce
    multiplies in the material's attenuation; the path ends at the
    background, on absorption (black) or when the bounce budget runs out
    (black). This is the iterative form of
    ``attenuation * estimate_color(scattered, scene, depth - 1)``.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        depth: Maximum number of bounces
        rng: Random generator for material sampling

    Returns:
        The linear color estimate for this ray
    """
    throughput = WHITE
    for _ in range(depth):
        hit_record = scene.hit(ray, T_MIN, math.inf)
        if hit_record is None:
            return throughput * sky_color(ray)

        # Surfaces without a material absorb everything
        if hit_record.material is None:
            return BLACK

        scatter_result = hit_record.material.scatter(ray, hit_record, rng)
        if scatter_result is None:
            return BLACK

        throughput = throughput * scatter_result.attenuation
        ray = scatter_result.scattered_ray

    return BLACK


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None
        self._cancelled = threading.Event()

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        The callback is called once per finished scanline, never
        concurrently, with non-decreasing values.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def cancel(self) -> None:
        """Ask a running render to stop before its next scanline."""
        self._cancelled.set()

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Every scanline draws from its own generator spawned from
        ``settings.seed``, so the result does not depend on the thread count.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Linear image as numpy array of shape (height, width, 3), row 0 at the top

        Raises:
            RenderCancelled: if ``cancel()`` was called during the render
        """
        width = self.settings.width
        height = self.settings.height
        samples = self.settings.samples_per_pixel
        max_depth = self.settings.max_depth

        self._cancelled.clear()
        image = np.zeros((height, width, 3), dtype=np.float64)
        row_seeds = np.random.SeedSequence(self.settings.seed).spawn(height)

        # A one-pixel axis has no span to divide
        u_scale = max(width - 1, 1)
        v_scale = max(height - 1, 1)

        progress_lock = threading.Lock()
        completed = 0

        def render_scanline(row: int) -> None:
            nonlocal completed
            if self._cancelled.is_set():
                return

            rng = np.random.default_rng(row_seeds[row])
            j = height - 1 - row
            for i in range(width):
                pixel_color = BLACK
                for _ in range(samples):
                    u = (i + rng.random()) / u_scale
                    v = (j + rng.random()) / v_scale
                    ray = camera.get_ray(u, v, rng)
                    pixel_color = pixel_color + estimate_color(ray, scene, max_depth, rng)
                image[row, i] = pixel_color.to_array() / samples

            # The callback runs under the lock so progress arrives in order
            with progress_lock:
                completed += 1
                logger.debug("Scanlines remaining: %d", height - completed)
                if self._progress_callback:
                    self._progress_callback(completed / height)

        logger.info(
            "Rendering %dx%d, %d spp, depth %d, %d thread(s)",
            width, height, samples, max_depth, self.settings.num_threads,
        )

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                # list() re-raises any worker exception here
                list(executor.map(render_scanline, range(height)))
        else:
            for row in range(height):
                render_scanline(row)

        if self._cancelled.is_set():
            raise RenderCancelled(f"Render cancelled after {completed} of {height} scanlines")

        logger.info("Render finished")
        return image
