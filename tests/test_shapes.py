"""Tests for geometric shapes."""

import pytest
import math
import numpy as np

from pathforge.errors import ConfigurationError
from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.shapes import Sphere, HittableList, HitRecord
from pathforge.materials import Lambertian, Metal


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        center = Point3(0, 0, 0)
        sphere = Sphere(center, 1.0)
        assert sphere.center == center
        assert sphere.radius == 1.0

    @pytest.mark.parametrize("radius", [0.0, -1.0, float('nan'), float('inf')])
    def test_rejects_bad_radius(self, radius):
        with pytest.raises(ConfigurationError, match="radius"):
            Sphere(Point3(0, 0, 0), radius)

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 4.0) < 1e-12
        assert abs(hit.point.z - (-1.0)) < 1e-12

    def test_hit_from_outside(self):
        center = Point3(1, 2, -7)
        radius = 2.0
        sphere = Sphere(center, radius)
        ray = Ray(Point3(0, 0, 0), center - Point3(0, 0, 0))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert hit.t > 0
        assert abs(hit.normal.length() - 1.0) < 1e-12
        assert hit.normal == (hit.point - center) / radius
        assert hit.front_face is True

    def test_unnormalized_direction(self):
        sphere = Sphere(Point3(0, 0, -10), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -3))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert abs(hit.t - 3.0) < 1e-12
        assert hit.point == Point3(0, 0, -9)

    def test_hit_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        hit = sphere.hit(ray, 0.001, float('inf'))

        assert hit is not None
        assert hit.front_face is False
        assert hit.normal == Vec3(0, 0, -1)

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))  # Ray passes above sphere
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_miss_just_outside_radius(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(1.0001, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))  # Ray points away from sphere
        assert sphere.hit(ray, 0.001, float('inf')) is None

    def test_t_min_selects_far_root(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))

        hit = sphere.hit(ray, 4.5, float('inf'))
        assert hit is not None
        assert abs(hit.t - 6.0) < 1e-12

    def test_t_max_excludes_both_roots(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, -5), Vec3(0, 0, 1))
        assert sphere.hit(ray, 0.001, 3.9) is None

    def test_with_material(self):
        material = Lambertian(Color(1, 0, 0))
        sphere = Sphere(Point3(0, 0, 0), 1.0, material)
        hit = sphere.hit(Ray(Point3(0, 0, -5), Vec3(0, 0, 1)), 0.001, float('inf'))

        assert hit is not None
        assert hit.material is material


class TestNormalOrientation:
    """The stored normal always opposes the incoming ray."""

    def test_random_rays_inside_and_outside(self, rng):
        sphere = Sphere(Point3(0.5, -0.25, -2), 1.5)
        hits = 0
        for _ in range(300):
            origin = Vec3.random(rng, -4, 4)
            direction = Vec3.random_unit_vector(rng)
            hit = sphere.hit(Ray(origin, direction), 0.001, float('inf'))
            if hit is None:
                continue
            hits += 1
            assert direction.dot(hit.normal) <= 0
            outward = (hit.point - sphere.center) / sphere.radius
            assert hit.front_face == (direction.dot(outward) < 0)

        assert hits > 0

    def test_set_face_normal(self):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        record = HitRecord(point=Point3(0, 0, 1), normal=Vec3(0, 0, 1), t=1.0)
        record.set_face_normal(ray, Vec3(0, 0, 1))
        assert record.front_face is False
        assert record.normal == Vec3(0, 0, -1)


class TestHittableList:
    """Test HittableList scene queries."""

    def test_empty_list(self):
        world = HittableList()
        assert len(world) == 0
        assert world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, float('inf')) is None

    def test_add_and_iterate(self):
        world = HittableList()
        a = Sphere(Point3(0, 0, -1), 0.5)
        b = Sphere(Point3(0, 0, -3), 0.5)
        world.add(a)
        world.add(b)
        assert len(world) == 2
        assert list(world) == [a, b]

        world.clear()
        assert len(world) == 0

    def test_returns_nearest_regardless_of_order(self):
        near_mat = Lambertian(Color(1, 0, 0))
        far_mat = Lambertian(Color(0, 0, 1))
        near = Sphere(Point3(0, 0, -2), 0.5, near_mat)
        far = Sphere(Point3(0, 0, -6), 0.5, far_mat)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        for objects in ([near, far], [far, near]):
            hit = HittableList(objects).hit(ray, 0.001, float('inf'))
            assert hit is not None
            assert hit.material is near_mat
            assert abs(hit.t - 1.5) < 1e-12

    def test_overlapping_spheres(self):
        big = Sphere(Point3(0, 0, -5), 2.0, Lambertian(Color(1, 1, 1)))
        small = Sphere(Point3(0, 0, -3.5), 1.0, Metal(Color(1, 1, 1)))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))

        hit = HittableList([big, small]).hit(ray, 0.001, float('inf'))
        assert hit is not None
        assert abs(hit.t - 2.5) < 1e-12
        assert hit.material is small.material

    def test_equal_t_first_wins(self):
        first = Lambertian(Color(1, 0, 0))
        second = Lambertian(Color(0, 1, 0))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        world = HittableList([
            Sphere(Point3(0, 0, -3), 1.0, first),
            Sphere(Point3(0, 0, -3), 1.0, second),
        ])

        hit = world.hit(ray, 0.001, float('inf'))
        assert hit.material is first

    def test_respects_t_range(self):
        world = HittableList([Sphere(Point3(0, 0, -10), 1.0)])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert world.hit(ray, 0.001, 5.0) is None
