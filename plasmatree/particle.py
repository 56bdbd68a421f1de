"""Point particles carrying charge, mass, position and velocity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from plasmatree.distributions import ChargeDistribution, VectorDistribution


def _as_vector(value) -> np.ndarray:
    return np.array(value, dtype=float, copy=True)


@dataclass(eq=False)
class Particle:
    """A charged particle: charge, mass, position and velocity."""

    charge: float
    mass: float
    position: np.ndarray = field(repr=False)
    velocity: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        self.charge = float(self.charge)
        self.mass = float(self.mass)
        self.position = _as_vector(self.position)
        self.velocity = _as_vector(self.velocity)
        if self.position.shape != self.velocity.shape:
            raise ValueError(
                f"position shape {self.position.shape} does not match "
                f"velocity shape {self.velocity.shape}"
            )

    @property
    def dimensions(self) -> int:
        """Number of spatial dimensions the particle lives in."""
        return self.position.shape[0]

    def update_velocity(self, dv) -> None:
        """Add ``dv`` to the velocity."""
        self.velocity = self.velocity + np.asarray(dv, dtype=float)

    def update_position(self, dx) -> None:
        """Add ``dx`` to the position."""
        self.position = self.position + np.asarray(dx, dtype=float)

    @classmethod
    def generate(
        cls,
        num_particles: int,
        mass: float,
        position_dist: VectorDistribution,
        velocity_dist: VectorDistribution,
        charge_dist: ChargeDistribution,
    ) -> list[Particle]:
        """Create ``num_particles`` particles drawn from the given distributions.

        For each particle the charge is drawn first, then the position,
        then the velocity.
        """
        if num_particles < 0:
            raise ValueError("num_particles must not be negative")
        particles = []
        for _ in range(int(num_particles)):
            charge = charge_dist.sample()
            position = position_dist.sample()
            velocity = velocity_dist.sample()
            particles.append(cls(charge, mass, position, velocity))
        return particles