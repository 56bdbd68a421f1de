"""Generate files of initial particle positions and velocities.

Each file is a flat sequence of tab-terminated numbers in scientific
notation, one vector after another. The files are read back as initial
conditions for a simulation.
"""

from __future__ import annotations

import math
import sys
from typing import TextIO

import numpy as np

from plasmatree.distributions import (
    ConstDistribution,
    MaxwellDistribution,
    SinusoidalDistribution,
    SphericalDistribution,
    UniformDistribution,
    VectorDistribution,
)
from plasmatree.options import OptionError, OptionParser, parse_vector

POSITION_DISTRIBUTIONS = ("uniform", "spherical", "sinusoidal")
VELOCITY_DISTRIBUTIONS = ("maxwell", "constant")


def build_position_distribution(
    name: str,
    rng: np.random.Generator,
    origin,
    length: float,
    dimension: int = 0,
    wavelengths: float = 1.0,
    phase: float = math.pi / 2,
) -> VectorDistribution:
    """Create the named position distribution for a system at ``origin`` of side ``length``."""
    origin = np.asarray(origin, dtype=float).reshape(-1)
    far_corner = origin + length
    if name == "uniform":
        return UniformDistribution(rng, origin, far_corner)
    if name == "spherical":
        return SphericalDistribution(rng, origin.shape[0], origin, length)
    if name == "sinusoidal":
        return SinusoidalDistribution(
            rng, dimension, origin, far_corner, wavelengths, phase
        )
    raise ValueError(
        "Position distribution must be 'uniform', 'spherical' or 'sinusoidal'."
    )


def build_velocity_distribution(
    name: str,
    rng: np.random.Generator,
    dims: int,
    mass: float | None = None,
    temperature: float | None = None,
    velocity=None,
) -> VectorDistribution:
    """Create the named velocity distribution in ``dims`` dimensions."""
    if name == "maxwell":
        if mass is None or temperature is None:
            raise ValueError(
                "Must specify temperature and mass for maxwell distribution"
            )
        return MaxwellDistribution(rng, mass, temperature, dims)
    if name == "constant":
        if velocity is None:
            raise ValueError(
                "Must specify a velocity with the constant velocity distribution"
            )
        velocity = np.asarray(velocity, dtype=float).reshape(-1)
        if velocity.shape[0] != dims:
            raise ValueError(
                f"velocity has {velocity.shape[0]} components, expected {dims}"
            )
        return ConstDistribution(velocity)
    raise ValueError("Velocity distribution must be 'maxwell' or 'constant'.")


def _format_vector(vector: np.ndarray) -> str:
    return "".join(f"{component:.20e}\t" for component in vector)


def write_particles(
    position_dist: VectorDistribution,
    velocity_dist: VectorDistribution,
    count: int,
    pos_out: TextIO,
    vel_out: TextIO,
) -> None:
    """Draw ``count`` particles and write their positions and velocities.

    For each particle the position is drawn before the velocity.
    """
    for _ in range(int(count)):
        position = np.asarray(position_dist.sample(), dtype=float)
        velocity = np.asarray(velocity_dist.sample(), dtype=float)
        if position.shape != velocity.shape:
            raise ValueError(
                "position and velocity distributions give vectors of different sizes"
            )
        pos_out.write(_format_vector(position))
        vel_out.write(_format_vector(velocity))


def _build_parser() -> OptionParser:
    parser = OptionParser("Options")
    parser.use_config_file()
    (
        parser.add_group("Main options")
        .add("num-particles,N", int, "Number of particles", required=True)
        .add("origin,O", parse_vector, "Origin of system", required=True)
        .add("length,L", float, "Length of system", required=True)
        .add(
            "pos-dist,p",
            str,
            "Position distribution: uniform, spherical or sinusoidal",
            required=True,
        )
        .add(
            "vel-dist,v", str, "Velocity distribution: maxwell or constant", required=True
        )
        .add("pos-out,P", str, "Position output file", required=True)
        .add("vel-out,V", str, "Velocity output file", required=True)
        .add("seed,s", int, "Random seed", required=True)
    )
    (
        parser.add_group("Sinusoidal distribution options")
        .add("dimension", int, "Dimension to oscillate in: x=0, y=1, z=2", default=0)
        .add("wavelengths", float, "Number of wavelengths in the distribution", default=1.0)
        .add("phase", float, "Phase offset of distribution", default=math.pi / 2)
    )
    (
        parser.add_group("Maxwell distribution options")
        .add("temperature,T", float, "Temperature")
        .add("mass,m", float, "Mass of particles")
    )
    parser.add_group("Constant distribution options").add(
        "velocity", parse_vector, "Constant velocity"
    )
    return parser


def _optional(parser: OptionParser, name: str):
    return parser.get(name) if name in parser else None


def main(argv: list[str] | None = None) -> int:
    """Parse options, build the distributions and write the output files."""
    parser = _build_parser()
    try:
        parser.parse(argv)
    except OptionError as exc:
        print(exc, file=sys.stderr)
        print("Use --help for a list of all options.", file=sys.stderr)
        return 1

    origin = parser.get("origin")
    rng = np.random.default_rng(parser.get("seed"))
    try:
        position_dist = build_position_distribution(
            parser.get("pos-dist"),
            rng,
            origin,
            parser.get("length"),
            parser.get("dimension"),
            parser.get("wavelengths"),
            parser.get("phase"),
        )
        velocity_dist = build_velocity_distribution(
            parser.get("vel-dist"),
            rng,
            origin.shape[0],
            _optional(parser, "mass"),
            _optional(parser, "temperature"),
            _optional(parser, "velocity"),
        )
        with open(parser.get("pos-out"), "w") as pos_out, open(
            parser.get("vel-out"), "w"
        ) as vel_out:
            write_particles(
                position_dist, velocity_dist, parser.get("num-particles"), pos_out, vel_out
            )
    except (ValueError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())