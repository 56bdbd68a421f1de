"""Multipole acceptance criteria deciding whether a tree node may be used whole.

A node is expected to provide ``centre_of_charge``, ``size`` and ``is_leaf``;
boundary conditions are expected to provide ``displacement(a, b)``, the
vector from ``b`` to ``a`` under those boundaries.
"""

from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod
from typing import Protocol

import numpy as np

from plasmatree.particle import Particle


class _Node(Protocol):
    centre_of_charge: np.ndarray
    size: float
    is_leaf: bool


class _Bounds(Protocol):
    def displacement(self, a: np.ndarray, b: np.ndarray) -> np.ndarray: ...


class AcceptResult(enum.Enum):
    """Outcome of testing a node against an acceptance criterion."""

    ACCEPT = "accept"
    CONTINUE = "continue"
    REJECT = "reject"


class AcceptanceCriterion(ABC):
    """Decides whether a node interacts with a particle as a single multipole."""

    @abstractmethod
    def accept(self, particle: Particle, node: _Node) -> AcceptResult:
        """Return whether to accept the node, descend into it, or reject it."""


class BarnesHutMAC(AcceptanceCriterion):
    """The Barnes-Hut opening-angle criterion.

    A node is accepted when ``size**2 / d**2 < theta**2``, where ``d`` is the
    distance from the particle to the node's centre of charge, or when the
    node is a leaf. Otherwise its children must be examined.
    """

    def __init__(self, theta: float, bounds: _Bounds) -> None:
        self.theta = float(theta)
        self.bounds = bounds

    def accept(self, particle: Particle, node: _Node) -> AcceptResult:
        disp = np.asarray(
            self.bounds.displacement(particle.position, node.centre_of_charge),
            dtype=float,
        )
        d_squared = float(disp @ disp)
        size_squared = float(node.size) ** 2
        ratio = size_squared / d_squared if d_squared > 0 else math.inf
        if ratio < self.theta * self.theta or node.is_leaf:
            return AcceptResult.ACCEPT
        return AcceptResult.CONTINUE