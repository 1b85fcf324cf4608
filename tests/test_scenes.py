"""Tests for the built-in scenes."""

import pytest
import numpy as np

from pathforge.vec3 import Point3
from pathforge.camera import Camera
from pathforge.materials import Lambertian, Metal, Dielectric
from pathforge.scenes import SCENES, ScenePreset, two_spheres, material_showcase, random_spheres


class TestTwoSpheres:

    def test_layout(self):
        preset = two_spheres()
        ground, small = preset.world.objects
        assert ground.center == Point3(0, -100.5, -1)
        assert ground.radius == 100
        assert small.center == Point3(0, 0, -1)
        assert small.radius == 0.5

    def test_camera(self):
        camera = two_spheres().camera(16 / 9)
        assert isinstance(camera, Camera)
        assert camera.origin == Point3(0, 0, 0)
        assert camera.lens_radius == 0.0


class TestMaterialShowcase:

    def test_has_each_material(self):
        kinds = {type(obj.material) for obj in material_showcase().world}
        assert kinds == {Lambertian, Metal, Dielectric}

    def test_camera_override(self):
        camera = material_showcase().camera(1.0, aperture=0.0, vfov=None)
        assert camera.lens_radius == 0.0


class TestRandomSpheres:

    def test_seeded_scene_is_reproducible(self):
        a = random_spheres(np.random.default_rng(3))
        b = random_spheres(np.random.default_rng(3))
        assert len(a.world) == len(b.world)
        for sa, sb in zip(a.world, b.world):
            assert sa.center == sb.center
            assert type(sa.material) is type(sb.material)

    def test_contents(self):
        world = random_spheres(np.random.default_rng(0)).world
        # Ground + three feature spheres + most of the 22x22 grid
        assert 300 < len(world) <= 1 + 22 * 22 + 3
        for obj in world.objects[1:-3]:
            assert obj.radius == 0.2
            assert (obj.center - Point3(4, 0.2, 0)).length() > 0.9
            if isinstance(obj.material, Metal):
                assert 0.0 <= obj.material.fuzz <= 0.5


class TestRegistry:

    @pytest.mark.parametrize("name", sorted(SCENES))
    def test_factories(self, name):
        preset = SCENES[name]()
        assert isinstance(preset, ScenePreset)
        assert len(preset.world) > 0
        assert isinstance(preset.camera(1.5), Camera)
