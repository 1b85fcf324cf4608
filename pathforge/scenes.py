"""
Built-in scenes.

Each factory returns a `ScenePreset`: the world plus the camera placement
that frames it. The aspect ratio is supplied at render time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import numpy as np

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric


@dataclass
class ScenePreset:
    """A world together with its default camera placement."""
    world: HittableList
    camera_args: Dict[str, Any] = field(default_factory=dict)

    def camera(self, aspect_ratio: float, **overrides: Any) -> Camera:
        """Build the preset's camera, with any argument overridden."""
        args = dict(self.camera_args)
        args.update({k: v for k, v in overrides.items() if v is not None})
        return Camera(aspect_ratio=aspect_ratio, **args)


def two_spheres() -> ScenePreset:
    """A small diffuse sphere resting on a huge ground sphere."""
    world = HittableList()
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.5, 0.5, 0.5))))
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.5, 0.5, 0.5))))

    return ScenePreset(world, dict(
        look_from=Point3(0, 0, 0),
        look_at=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        vfov=90.0,
        aperture=0.0,
        focus_dist=1.0,
    ))


def material_showcase() -> ScenePreset:
    """One sphere of each material, with a shallow depth of field."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    gold = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world.add(Sphere(Point3(0, -100.5, -1), 100, ground))
    world.add(Sphere(Point3(0, 0, -1), 0.5, center))
    world.add(Sphere(Point3(-1, 0, -1), 0.5, glass))
    world.add(Sphere(Point3(1, 0, -1), 0.5, gold))

    look_from = Point3(3, 3, 2)
    look_at = Point3(0, 0, -1)
    return ScenePreset(world, dict(
        look_from=look_from,
        look_at=look_at,
        vup=Vec3(0, 1, 0),
        vfov=20.0,
        aperture=2.0,
        focus_dist=(look_from - look_at).length(),
    ))


def random_spheres(rng: Optional[np.random.Generator] = None) -> ScenePreset:
    """A field of small random spheres around three large ones."""
    if rng is None:
        rng = np.random.default_rng()

    world = HittableList()
    world.add(Sphere(Point3(0, -1000, 0), 1000, Lambertian(Color(0.5, 0.5, 0.5))))

    clearing = Point3(4, 0.2, 0)
    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())
            if (center - clearing).length() <= 0.9:
                continue

            material: Material
            if choose_mat < 0.8:
                albedo = Color.random(rng) * Color.random(rng)
                material = Lambertian(albedo)
            elif choose_mat < 0.95:
                albedo = Color.random(rng, 0.5, 1.0)
                material = Metal(albedo, rng.uniform(0.0, 0.5))
            else:
                material = Dielectric(1.5)
            world.add(Sphere(center, 0.2, material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return ScenePreset(world, dict(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20.0,
        aperture=0.1,
        focus_dist=10.0,
    ))


SCENES: Dict[str, Callable[..., ScenePreset]] = {
    'two-spheres': two_spheres,
    'showcase': material_showcase,
    'random': random_spheres,
}
