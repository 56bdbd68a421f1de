"""Tree-code building blocks for plasma simulations: particles, distributions,
acceptance criteria, Coulomb and Ewald potentials, option parsing and an
initial-condition generator."""

__version__ = "0.1.0"

__all__ = [
    "coulomb",
    "distributions",
    "ewald",
    "flags",
    "generator",
    "mac",
    "options",
    "particle",
]