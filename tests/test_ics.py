"""Tests for initial body distributions."""

import numpy as np
import pytest

from celestial.core import ICGenerator
from celestial.ICs import PlummerSphere, UniformSphere


class TestUniformSphere:

    def test_shapes_and_mass(self):
        positions, velocities, masses = UniformSphere(radius=2.0, total_mass=5.0).generate(500)
        assert positions.shape == (500, 3)
        assert velocities.shape == (500, 3)
        assert masses.shape == (500,)
        np.testing.assert_allclose(masses.sum(), 5.0)
        np.testing.assert_allclose(masses, masses[0])

    def test_within_radius(self):
        positions, _, _ = UniformSphere(radius=2.0).generate(1000)
        assert np.all(np.linalg.norm(positions, axis=1) <= 2.0 + 1e-12)

    def test_uniform_density(self):
        """Half the bodies lie inside r = R / 2^(1/3)."""
        positions, _, _ = UniformSphere(radius=1.0).generate(4000)
        r = np.linalg.norm(positions, axis=1)
        assert np.mean(r < 0.5 ** (1.0 / 3.0)) == pytest.approx(0.5, abs=0.05)

    def test_offset_and_velocity(self):
        positions, velocities, _ = UniformSphere(radius=1.0).generate(
            200, position=[10.0, 0.0, 0.0], velocity=[0.0, 1.0, 0.0]
        )
        assert np.all(positions[:, 0] > 8.99)
        np.testing.assert_allclose(velocities, np.tile([0.0, 1.0, 0.0], (200, 1)))

    def test_seed_reproducible(self):
        a, _, _ = UniformSphere(random_seed=1).generate(50)
        b, _, _ = UniformSphere(random_seed=1).generate(50)
        c, _, _ = UniformSphere(random_seed=2).generate(50)
        np.testing.assert_array_equal(a, b)
        assert not np.array_equal(a, c)

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            UniformSphere(radius=0.0)
        with pytest.raises(ValueError):
            UniformSphere(total_mass=-1.0)
        with pytest.raises(ValueError):
            UniformSphere().generate(0)

    def test_is_ic_generator(self):
        assert isinstance(UniformSphere(), ICGenerator)


class TestPlummerSphere:

    def test_shapes_and_mass(self):
        positions, velocities, masses = PlummerSphere(total_mass=2.0).generate(300)
        assert positions.shape == (300, 3)
        np.testing.assert_array_equal(velocities, 0.0)
        np.testing.assert_allclose(masses.sum(), 2.0)

    def test_truncation(self):
        positions, _, _ = PlummerSphere(scale_radius=0.5, truncation=4.0).generate(2000)
        assert np.all(np.linalg.norm(positions, axis=1) <= 2.0 + 1e-9)

    def test_median_radius(self):
        """Median radius of a 10a-truncated Plummer sphere is ~1.29a."""
        positions, _, _ = PlummerSphere(scale_radius=1.0).generate(4000)
        r = np.linalg.norm(positions, axis=1)
        assert np.median(r) == pytest.approx(1.29, rel=0.1)

    def test_enclosed_mass_fraction(self):
        plummer = PlummerSphere(scale_radius=1.0)
        assert plummer.enclosed_mass_fraction(0.0) == 0.0
        assert plummer.enclosed_mass_fraction(1.0) == pytest.approx(2.0**-1.5)
        assert plummer.enclosed_mass_fraction(1e6) == pytest.approx(1.0)

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            PlummerSphere(scale_radius=-1.0)
        with pytest.raises(ValueError):
            PlummerSphere(truncation=0.0)
