"""Ewald summation for infinitely periodic systems, direct and interpolated.

Boundary conditions are expected to provide ``origin``, ``size`` (the side
length of the cubic cell) and ``displacement(a, b)``, the minimum-image vector
from ``b`` to ``a``. Nodes provide ``charge``, ``centre_of_charge``,
``dipole_moments`` and ``quadrupole_moments``. Only three dimensions are
supported.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import numpy as np

from plasmatree.coulomb import CoulombForce, Potential, Precision
from plasmatree.particle import Particle

_SQRT_PI = math.sqrt(math.pi)
_erfc = np.vectorize(math.erfc, otypes=[float])


class _Node(Protocol):
    charge: float
    centre_of_charge: np.ndarray
    dipole_moments: np.ndarray
    quadrupole_moments: np.ndarray


class _Bounds(Protocol):
    origin: np.ndarray
    size: float

    def displacement(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...


def _image_indices(n: int, skip_zero: bool) -> np.ndarray:
    span = range(-n, n + 1)
    images = [
        ijk for ijk in itertools.product(span, span, span)
        if not (skip_zero and ijk == (0, 0, 0))
    ]
    return np.array(images, dtype=float).reshape(-1, 3)


def _vec3(value) -> np.ndarray:
    vec = np.asarray(value, dtype=float).reshape(-1)
    if vec.shape != (3,):
        raise ValueError("Ewald sums are only defined in three dimensions")
    return vec


@dataclass
class EwaldNode:
    """Lattice-sum coefficients at one point: scalar, vector and matrix parts."""

    t0: float = 0.0
    t1: np.ndarray = field(default_factory=lambda: np.zeros(3))
    t2: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))

    def __add__(self, other: EwaldNode) -> EwaldNode:
        return EwaldNode(self.t0 + other.t0, self.t1 + other.t1, self.t2 + other.t2)

    def __mul__(self, factor: float) -> EwaldNode:
        return EwaldNode(self.t0 * factor, self.t1 * factor, self.t2 * factor)

    __rmul__ = __mul__


def _combine_potential(coeffs: EwaldNode, node: _Node) -> float:
    dipole = np.asarray(node.dipole_moments, dtype=float)
    quad = np.asarray(node.quadrupole_moments, dtype=float)
    return (
        float(node.charge) * coeffs.t0
        + float(dipole @ coeffs.t1)
        + 0.5 * float(np.sum(quad * coeffs.t2))
    )


def _combine_force(coeffs: EwaldNode, node: _Node) -> np.ndarray:
    dipole = np.asarray(node.dipole_moments, dtype=float)
    return float(node.charge) * coeffs.t1 + coeffs.t2 @ dipole


class EwaldForce(Potential):
    """Potential of a node and all its periodic images, by Ewald summation.

    The potential is expanded to quadrupole order, the force to dipole order;
    the ``precision`` argument is accepted but not used. ``alpha`` is the
    coupling parameter, usually about ``2 / L``.
    """

    def __init__(
        self,
        force_softening: float,
        bounds: _Bounds,
        alpha: float,
        real_space_iterations: int,
        fourier_space_iterations: int,
    ) -> None:
        if real_space_iterations < 0 or fourier_space_iterations < 0:
            raise ValueError("iteration counts must not be negative")
        self.force_softening = float(force_softening)
        self.bounds = bounds
        self.alpha = float(alpha)
        self.real_space_iterations = int(real_space_iterations)
        self.fourier_space_iterations = int(fourier_space_iterations)
        self._real_images = _image_indices(self.real_space_iterations, skip_zero=False)
        self._real_reach = np.max(np.abs(self._real_images), axis=1)
        self._fourier_images = _image_indices(self.fourier_space_iterations, skip_zero=True)

    @property
    def self_energy(self) -> float:
        """Self-energy coefficient, multiplied by the node charge."""
        return 2.0 * self.alpha / _SQRT_PI

    def _lattice_sum(self, r0: np.ndarray, soften_within: int) -> EwaldNode:
        """Sum the real- and Fourier-space coefficients at displacement ``r0``.

        Images whose largest index magnitude is at most ``soften_within``
        have their distance softened.
        """
        length = float(self.bounds.size)
        alpha = self.alpha
        fs2 = self.force_softening**2
        eye = np.eye(3)

        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            r_n = self._real_images * length + r0
            norms = np.sqrt(np.einsum("ij,ij->i", r_n, r_n))
            norms = np.where(
                self._real_reach <= soften_within, np.sqrt(norms * norms + fs2), norms
            )
            gauss = np.exp(-(alpha * norms) ** 2)
            erfc = _erfc(alpha * norms)
            b1 = erfc + 2.0 * alpha * norms / _SQRT_PI * gauss
            b2 = alpha**3 / _SQRT_PI * gauss
            r2 = norms * norms
            r3 = r2 * norms
            r5 = r3 * r2
            outer = r_n[:, :, None] * r_n[:, None, :]

            t0 = float(np.sum(erfc / norms))
            t1 = np.sum(r_n * (b1 / r3)[:, None], axis=0)
            t2 = np.sum(
                b1[:, None, None] * ((3.0 / r5)[:, None, None] * outer - eye / r3[:, None, None])
                + (4.0 * b2 / r2)[:, None, None] * outer,
                axis=0,
            )

            h = self._fourier_images
            if len(h):
                h2 = np.einsum("ij,ij->i", h, h)
                a = np.exp(-math.pi**2 * h2 / (alpha**2 * length**2)) / h2
                phase = 2.0 * math.pi / length * (h @ r0)
                cos_a = a * np.cos(phase)
                sin_a = a * np.sin(phase)
                h_outer = h[:, :, None] * h[:, None, :]
                t0 += float(np.sum(cos_a)) / (math.pi * length)
                t1 = t1 + 2.0 / length**2 * np.sum(h * sin_a[:, None], axis=0)
                t2 = t2 - 4.0 * math.pi / length**3 * np.sum(
                    h_outer * cos_a[:, None, None], axis=0
                )

        return EwaldNode(t0, t1, t2)

    def _coefficients(self, particle: Particle, node: _Node) -> EwaldNode:
        r0 = _vec3(particle.position) - _vec3(node.centre_of_charge)
        return self._lattice_sum(r0, soften_within=1)

    def potential(self, particle: Particle, node: _Node, precision: Precision) -> float:
        coeffs = self._coefficients(particle, node)
        return _combine_potential(coeffs, node) - self.self_energy * float(node.charge)

    def force(self, particle: Particle, node: _Node, precision: Precision) -> np.ndarray:
        coeffs = self._coefficients(particle, node)
        return particle.charge * _combine_force(coeffs, node)


class InterpolatedEwaldSum(Potential):
    """Ewald sum read from a precomputed grid, plus the direct main-cell term.

    The grid holds the contribution of the periodic images alone; the
    interaction within the main cell comes from ``coulomb_pot``. ``init`` must
    be called before the potential is used.
    """

    def __init__(
        self,
        force_softening: float,
        bounds: _Bounds,
        divisions: int,
        ewald_pot: EwaldForce,
        coulomb_pot: CoulombForce,
    ) -> None:
        if divisions < 1:
            raise ValueError("divisions must be at least 1")
        self.force_softening = float(force_softening)
        self.bounds = bounds
        self.divisions = int(divisions)
        self.ewald_pot = ewald_pot
        self.coulomb_pot = coulomb_pot
        self.length_per_div = float(bounds.size) / self.divisions
        n = self.divisions + 1
        self._t0 = np.zeros((n, n, n))
        self._t1 = np.zeros((n, n, n, 3))
        self._t2 = np.zeros((n, n, n, 3, 3))
        self._ready = False

    def _centre(self) -> np.ndarray:
        return _vec3(self.bounds.origin) + float(self.bounds.size) / 2.0

    def init(self) -> None:
        """Fill the grid with image contributions relative to the cell centre."""
        origin = _vec3(self.bounds.origin)
        centre = self._centre()
        span = range(self.divisions + 1)
        for i, j, k in itertools.product(span, span, span):
            point = origin + np.array([i, j, k], dtype=float) * self.length_per_div
            coeffs = self.calculate_node(point - centre)
            self._t0[i, j, k] = coeffs.t0
            self._t1[i, j, k] = coeffs.t1
            self._t2[i, j, k] = coeffs.t2
        self._ready = True

    def calculate_node(self, disp_vec) -> EwaldNode:
        """Lattice-sum coefficients at ``disp_vec`` with the main cell removed."""
        d = _vec3(disp_vec)
        coeffs = self.ewald_pot._lattice_sum(d, soften_within=0)
        with np.errstate(divide="ignore", invalid="ignore"):
            r = 1.0 / math.sqrt(float(d @ d) + self.force_softening**2) if (
                float(d @ d) + self.force_softening**2
            ) > 0 else math.inf
            r3 = r * r * r
            r5 = r3 * r * r
            t0 = coeffs.t0 - r
            t1 = coeffs.t1 - d * r3
            t2 = coeffs.t2 - 3.0 * r5 * np.outer(d, d) + np.eye(3) * r3
        return EwaldNode(t0, t1, t2)

    def _grid_node(self, i: int, j: int, k: int) -> EwaldNode:
        return EwaldNode(
            float(self._t0[i, j, k]), self._t1[i, j, k].copy(), self._t2[i, j, k].copy()
        )

    def interpolate(self, r) -> EwaldNode:
        """Trilinearly interpolate the grid at point ``r``."""
        if not self._ready:
            raise RuntimeError("init() must be called before the grid is used")
        scaled = (_vec3(r) - _vec3(self.bounds.origin)) / self.length_per_div
        lo = np.floor(scaled).astype(int)
        hi = np.ceil(scaled).astype(int)
        if np.any(lo < 0) or np.any(hi > self.divisions):
            raise ValueError(f"point {r!r} lies outside the interpolation grid")
        xd, yd, zd = scaled - lo
        x0, y0, z0 = lo
        x1, y1, z1 = hi

        i1 = self._grid_node(x0, y0, z0) * (1 - zd) + self._grid_node(x0, y0, z1) * zd
        i2 = self._grid_node(x0, y1, z0) * (1 - zd) + self._grid_node(x0, y1, z1) * zd
        j1 = self._grid_node(x1, y0, z0) * (1 - zd) + self._grid_node(x1, y0, z1) * zd
        j2 = self._grid_node(x1, y1, z0) * (1 - zd) + self._grid_node(x1, y1, z1) * zd

        w1 = i1 * (1 - yd) + i2 * yd
        w2 = j1 * (1 - yd) + j2 * yd
        return w1 * (1 - xd) + w2 * xd

    def output_field(self, path="field.csv") -> None:
        """Write the scalar coefficient of the z=0 plane as ``x<TAB>y<TAB>t0`` lines."""
        if not self._ready:
            raise RuntimeError("init() must be called before the grid is used")
        with Path(path).open("w") as out:
            for x in range(self.divisions + 1):
                for y in range(self.divisions + 1):
                    out.write(f"{x}\t{y}\t{self._t0[x, y, 0]:g}\n")
                out.write("\n")

    def _interpolated(self, particle: Particle, node: _Node) -> EwaldNode:
        disp = np.asarray(
            self.bounds.displacement(particle.position, node.centre_of_charge), dtype=float
        )
        return self.interpolate(disp + self._centre())

    def potential(self, particle: Particle, node: _Node, precision: Precision) -> float:
        coeffs = self._interpolated(particle, node)
        result = _combine_potential(coeffs, node)
        result -= self.ewald_pot.self_energy * float(node.charge)
        return result + self.coulomb_pot.potential(particle, node, precision)

    def force(self, particle: Particle, node: _Node, precision: Precision) -> np.ndarray:
        coeffs = self._interpolated(particle, node)
        result = particle.charge * _combine_force(coeffs, node)
        return result + self.coulomb_pot.force(particle, node, precision)