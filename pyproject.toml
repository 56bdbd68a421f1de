[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "plasmatree"
version = "0.1.0"
description = "Tree-code building blocks for plasma simulations: particle distributions, multipole Coulomb and Ewald potentials, and initial-condition generation."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "plasma",
    "n-body",
    "barnes-hut",
    "tree code",
    "coulomb",
    "ewald summation",
    "particle simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
plasmatree-generate = "plasmatree.generator:main"

[tool.hatch.build.targets.wheel]
packages = ["plasmatree"]

[tool.pytest.ini_options]
addopts = "-ra"
