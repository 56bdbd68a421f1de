import math

import numpy as np
import pytest

from plasmatree.distributions import (
    ChargeDistribution,
    ConstantChargeDistribution,
    ConstDistribution,
    CylindricalDistribution,
    MaxwellDistribution,
    SinusoidalDistribution,
    SphericalDistribution,
    UniformDistribution,
    VectorDistribution,
)


def test_base_classes_are_abstract():
    with pytest.raises(TypeError):
        VectorDistribution()
    with pytest.raises(TypeError):
        ChargeDistribution()


def test_const_distribution_returns_copy():
    dist = ConstDistribution([1.0, -2.0, 3.0])
    first = dist.sample()
    first[0] = 42.0
    assert np.array_equal(dist.sample(), [1.0, -2.0, 3.0])


def test_constant_charge():
    assert ConstantChargeDistribution(-1).sample() == -1
    assert ConstantChargeDistribution(1).sample() == 1


def test_uniform_within_bounds_and_reproducible():
    lo = [-1.0, 0.0, 5.0]
    hi = [1.0, 0.5, 6.0]
    a = UniformDistribution(np.random.default_rng(7), lo, hi)
    b = UniformDistribution(np.random.default_rng(7), lo, hi)
    samples = np.array([a.sample() for _ in range(500)])
    assert np.all(samples >= lo) and np.all(samples <= hi)
    again = np.array([b.sample() for _ in range(500)])
    assert np.array_equal(samples, again)


def test_uniform_shape_mismatch():
    with pytest.raises(ValueError):
        UniformDistribution(np.random.default_rng(0), [0.0, 0.0], [1.0])


def test_spherical_inside_sphere():
    centre = np.array([1.0, 2.0, 3.0])
    dist = SphericalDistribution(np.random.default_rng(1), 3, centre, 0.5)
    for _ in range(300):
        v = dist.sample()
        assert v.shape == (3,)
        assert np.linalg.norm(v - centre) <= 0.5


def test_spherical_centre_dims_mismatch():
    with pytest.raises(ValueError):
        SphericalDistribution(np.random.default_rng(0), 3, [0.0, 0.0], 1.0)


def test_cylindrical_inside_cylinder():
    base = np.array([0.5, -0.5])
    dist = CylindricalDistribution(np.random.default_rng(2), base, 2.0, 3.0)
    for _ in range(300):
        v = dist.sample()
        assert v.shape == (3,)
        assert np.linalg.norm(v[:2] - base) <= 2.0
        assert 0.0 <= v[2] <= 3.0


def test_maxwell_spread_matches_temperature():
    mass, temperature = 4.0, 9.0
    dist = MaxwellDistribution(np.random.default_rng(5), mass, temperature, 3)
    samples = np.array([dist.sample() for _ in range(20000)])
    assert samples.shape == (20000, 3)
    expected = math.sqrt(temperature / mass)
    assert np.allclose(samples.std(axis=0), expected, rtol=0.05)
    assert np.allclose(samples.mean(axis=0), 0.0, atol=0.1)


def test_maxwell_rejects_bad_parameters():
    rng = np.random.default_rng(0)
    with pytest.raises(ValueError):
        MaxwellDistribution(rng, 0.0, 1.0, 3)
    with pytest.raises(ValueError):
        MaxwellDistribution(rng, 1.0, -1.0, 3)


def test_sinusoidal_within_bounds_and_shaped():
    lo = [0.0, 0.0, 0.0]
    hi = [1.0, 1.0, 1.0]
    dist = SinusoidalDistribution(
        np.random.default_rng(11), 0, lo, hi, 1.0, math.pi / 2
    )
    samples = np.array([dist.sample() for _ in range(4000)])
    assert np.all(samples >= 0.0) and np.all(samples <= 1.0)
    x = samples[:, 0]
    # Density follows cos(2*pi*x) + 1: highest at the edges, vanishing in the middle.
    edges = np.count_nonzero((x < 0.1) | (x > 0.9))
    middle = np.count_nonzero((x > 0.4) & (x < 0.6))
    assert edges > 5 * middle
    # Other dimensions stay uniform.
    y = samples[:, 1]
    assert abs(np.count_nonzero(y < 0.5) - np.count_nonzero(y >= 0.5)) < 400


def test_sinusoidal_dimension_out_of_range():
    with pytest.raises(ValueError):
        SinusoidalDistribution(
            np.random.default_rng(0), 3, [0.0, 0.0, 0.0], [1.0, 1.0, 1.0], 1.0, 0.0
        )