"""Distributions used to set up initial particle charges, positions and velocities."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

import numpy as np


def _vector(value) -> np.ndarray:
    return np.array(value, dtype=float, copy=True).reshape(-1)


class VectorDistribution(ABC):
    """A source of random (or fixed) vectors."""

    @abstractmethod
    def sample(self) -> np.ndarray:
        """Return one vector from the distribution."""


class ChargeDistribution(ABC):
    """A source of particle charges."""

    @abstractmethod
    def sample(self) -> int:
        """Return one charge from the distribution."""


class ConstDistribution(VectorDistribution):
    """Always returns the same vector."""

    def __init__(self, constant) -> None:
        self._constant = _vector(constant)

    def sample(self) -> np.ndarray:
        return self._constant.copy()


class ConstantChargeDistribution(ChargeDistribution):
    """Always returns the same charge."""

    def __init__(self, charge: int) -> None:
        self._charge = int(charge)

    def sample(self) -> int:
        return self._charge


class UniformDistribution(VectorDistribution):
    """Vectors whose components are uniform between ``minimum`` and ``maximum``."""

    def __init__(self, rng: np.random.Generator, minimum, maximum) -> None:
        self._rng = rng
        self._minimum = _vector(minimum)
        self._maximum = _vector(maximum)
        if self._minimum.shape != self._maximum.shape:
            raise ValueError("minimum and maximum must have the same length")

    def sample(self) -> np.ndarray:
        u = self._rng.random(self._minimum.shape[0])
        return u * (self._maximum - self._minimum) + self._minimum


class SphericalDistribution(VectorDistribution):
    """Points uniformly inside an n-sphere, found by rejection from the enclosing cube."""

    def __init__(self, rng: np.random.Generator, dims: int, centre, radius: float) -> None:
        self._rng = rng
        self._dims = int(dims)
        self._centre = _vector(centre)
        if self._centre.shape[0] != self._dims:
            raise ValueError("centre must have 'dims' components")
        self._radius = float(radius)

    def sample(self) -> np.ndarray:
        while True:
            v = self._rng.uniform(-self._radius, self._radius, self._dims)
            if np.linalg.norm(v) <= self._radius:
                return v + self._centre


class CylindricalDistribution(VectorDistribution):
    """Points inside a 3D cylinder standing on a circle in the xy plane.

    The height coordinate is uniform between 0 and ``height``.
    """

    def __init__(
        self, rng: np.random.Generator, bottom_centre, radius: float, height: float
    ) -> None:
        self._rng = rng
        self._circle = SphericalDistribution(rng, 2, bottom_centre, radius)
        self._height = float(height)

    def sample(self) -> np.ndarray:
        x, y = self._circle.sample()
        z = self._rng.uniform(0.0, self._height)
        return np.array([x, y, z])


class MaxwellDistribution(VectorDistribution):
    """Velocities following a Maxwell distribution at the given temperature."""

    def __init__(
        self, rng: np.random.Generator, mass: float, temperature: float, dims: int
    ) -> None:
        if mass <= 0:
            raise ValueError("mass must be positive")
        if temperature < 0:
            raise ValueError("temperature must not be negative")
        self._rng = rng
        self._sigma = math.sqrt(temperature / mass)
        self._dims = int(dims)

    def sample(self) -> np.ndarray:
        return self._rng.normal(0.0, self._sigma, self._dims)


class SinusoidalDistribution(VectorDistribution):
    """Density varying sinusoidally along one dimension, uniform in the others."""

    def __init__(
        self,
        rng: np.random.Generator,
        dimension: int,
        minimum,
        maximum,
        wavelengths: float,
        phase: float,
    ) -> None:
        self._rng = rng
        self._uniform = UniformDistribution(rng, minimum, maximum)
        self._minimum = _vector(minimum)
        self._maximum = _vector(maximum)
        if not 0 <= dimension < self._minimum.shape[0]:
            raise ValueError("dimension is out of range")
        self._dimension = int(dimension)
        self._wavelengths = float(wavelengths)
        self._phase = float(phase)

    def sample(self) -> np.ndarray:
        d = self._dimension
        wavelength = (self._maximum[d] - self._minimum[d]) / self._wavelengths
        k = 2.0 * math.pi / wavelength
        while True:
            u = self._rng.uniform(0.0, 2.0)
            v = self._uniform.sample()
            if math.sin(v[d] * k + self._phase) + 1 >= u:
                return v