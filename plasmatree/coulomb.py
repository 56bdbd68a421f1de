"""Softened Coulomb interactions between particles and multipole tree nodes.

A node is expected to provide ``charge``, ``centre_of_charge``,
``dipole_moments`` and ``quadrupole_moments`` (the intrinsic, not traceless,
quadrupole). Boundary conditions are expected to provide
``displacement(a, b)``, the vector from ``b`` to ``a``.
"""

from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod
from typing import Protocol

import numpy as np

from plasmatree.particle import Particle


class _Node(Protocol):
    charge: float
    centre_of_charge: np.ndarray
    dipole_moments: np.ndarray
    quadrupole_moments: np.ndarray


class _Bounds(Protocol):
    def displacement(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...


def _matrix_trace(matrix: np.ndarray) -> float:
    return float(np.diagonal(matrix).sum())


class Precision(enum.Enum):
    """Order to which the multipole expansion is carried."""

    MONOPOLE = 0
    DIPOLE = 1
    QUADRUPOLE = 2


class Potential(ABC):
    """Interaction between a particle and a node."""

    @abstractmethod
    def force(self, particle: Particle, node: _Node, precision: Precision) -> np.ndarray:
        """Force exerted by ``node`` on ``particle``."""

    @abstractmethod
    def potential(self, particle: Particle, node: _Node, precision: Precision) -> float:
        """Electric potential of ``node`` at the position of ``particle``."""


class CoulombForce(Potential):
    """Inverse-square Coulomb force with Plummer-style force softening."""

    def __init__(self, force_softening: float, bounds: _Bounds) -> None:
        self.force_softening = float(force_softening)
        self.bounds = bounds

    def _displacement(self, particle: Particle, node: _Node) -> np.ndarray:
        return np.asarray(
            self.bounds.displacement(particle.position, node.centre_of_charge),
            dtype=float,
        )

    def _inverse_distance(self, disp: np.ndarray) -> float:
        return 1.0 / math.sqrt(float(disp @ disp) + self.force_softening**2)

    def force(self, particle: Particle, node: _Node, precision: Precision) -> np.ndarray:
        disp = self._displacement(particle, node)
        s = self._inverse_distance(disp)
        s2 = s * s
        s3 = s2 * s

        total = float(node.charge) * disp * s3

        if precision in (Precision.DIPOLE, Precision.QUADRUPOLE):
            s5 = s3 * s2
            dipole = np.asarray(node.dipole_moments, dtype=float)
            total = total - s3 * dipole + 3.0 * s5 * disp * float(disp @ dipole)

            if precision is Precision.QUADRUPOLE:
                s7 = s5 * s2
                quad = np.asarray(node.quadrupole_moments, dtype=float)
                q_disp = quad @ disp
                total = (
                    total
                    + 7.5 * s7 * float(disp @ q_disp) * disp
                    - 3.0 * s5 * q_disp
                    - 1.5 * s5 * _matrix_trace(quad) * disp
                )

        return particle.charge * total

    def potential(self, particle: Particle, node: _Node, precision: Precision) -> float:
        disp = self._displacement(particle, node)
        s = self._inverse_distance(disp)
        s2 = s * s

        result = float(node.charge) * s

        if precision in (Precision.DIPOLE, Precision.QUADRUPOLE):
            s3 = s2 * s
            dipole = np.asarray(node.dipole_moments, dtype=float)
            result += s3 * float(disp @ dipole)
            if precision is Precision.QUADRUPOLE:
                s5 = s3 * s2
                quad = np.asarray(node.quadrupole_moments, dtype=float)
                result += 1.5 * s5 * float(disp @ (quad @ disp))
                result -= 0.5 * s3 * _matrix_trace(quad)
        return result


class CoulombForceEField(CoulombForce):
    """Coulomb force plus a uniform external electric field."""

    def __init__(self, force_softening: float, bounds: _Bounds, e_field) -> None:
        super().__init__(force_softening, bounds)
        self.e_field = np.array(e_field, dtype=float, copy=True)

    def force(self, particle: Particle, node: _Node, precision: Precision) -> np.ndarray:
        return super().force(particle, node, precision) + particle.charge * self.e_field


class DampingCoulombForce(CoulombForce):
    """Coulomb force plus a drag proportional to the particle's velocity."""

    def __init__(self, force_softening: float, bounds: _Bounds, damping: float) -> None:
        super().__init__(force_softening, bounds)
        self.damping = float(damping)

    def force(self, particle: Particle, node: _Node, precision: Precision) -> np.ndarray:
        return super().force(particle, node, precision) - self.damping * particle.velocity