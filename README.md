# plasmatree

Building blocks for tree-code plasma simulations, and a command that writes
files of initial particle positions and velocities.

## What is in the package

- **`plasmatree.particle`**: `Particle` holds a charge, a mass, and position
  and velocity as NumPy vectors. `update_position(dx)` and
  `update_velocity(dv)` add to them. `Particle.generate(num_particles, mass,
  position_dist, velocity_dist, charge_dist)` builds a list of particles,
  drawing for each one the charge, then the position, then the velocity.
- **`plasmatree.distributions`**: every distribution has a `sample()` method.
  - `UniformDistribution(rng, minimum, maximum)`: components uniform between
    the two corners.
  - `SphericalDistribution(rng, dims, centre, radius)`: points inside an
    n-sphere, found by rejection from the enclosing cube.
  - `CylindricalDistribution(rng, bottom_centre, radius, height)`: points in a
    3D cylinder on a circle in the xy plane, with height uniform in
    `[0, height]`.
  - `MaxwellDistribution(rng, mass, temperature, dims)`: each component normal
    with standard deviation `sqrt(temperature / mass)`.
  - `SinusoidalDistribution(rng, dimension, minimum, maximum, wavelengths,
    phase)`: density proportional to `sin(k x + phase) + 1` along one axis,
    uniform along the others.
  - `ConstDistribution(vector)` and `ConstantChargeDistribution(charge)`:
    always return the same value.

  `rng` is a `numpy.random.Generator`.
- **`plasmatree.mac`**: `BarnesHutMAC(theta, bounds)` accepts a node when
  `size**2 / d**2 < theta**2` or when the node is a leaf, and otherwise
  answers `AcceptResult.CONTINUE`.
- **`plasmatree.coulomb`**: `CoulombForce(force_softening, bounds)` gives the
  softened Coulomb `force` and `potential` of a node at a particle, to
  `Precision.MONOPOLE`, `Precision.DIPOLE` or `Precision.QUADRUPOLE` order
  (quadrupoles are intrinsic, not traceless). `CoulombForceEField` adds a
  uniform external electric field to the force; `DampingCoulombForce`
  subtracts `damping * velocity`.
- **`plasmatree.ewald`**: `EwaldForce(force_softening, bounds, alpha,
  real_space_iterations, fourier_space_iterations)` sums a node and all its
  periodic images in a cubic cell (potential to quadrupole order, force to
  dipole order; the `precision` argument is not used).
  `InterpolatedEwaldSum(force_softening, bounds, divisions, ewald_pot,
  coulomb_pot)` precomputes the image contribution on a grid with `init()`,
  reads it by trilinear `interpolate(r)`, and adds the main-cell term from
  `coulomb_pot`. Using the grid before `init()` raises `RuntimeError`; a point
  off the grid raises `ValueError`. `output_field(path="field.csv")` writes
  the z=0 plane of the scalar coefficient. Only three dimensions are
  supported.
- **`plasmatree.options`**: `OptionParser` with titled groups
  (`add_group(title).add(...)`), required options, defaults, multi-valued
  options, `--help`, and an optional `--config-file`
  (`use_config_file()`). `parse_vector("(x,y,z)")` turns such a string into a
  NumPy array and raises `ValueError` when it is malformed; as an option
  converter, that is reported as an `OptionError`.
- **`plasmatree.flags`**: `FlagParser` with `ArgOption` and `BoolOption`,
  which looks for each option anywhere in the argument list and raises
  `MissingOptionError` when a compulsory one is absent.

### Nodes and boundaries

The potentials and the acceptance criterion take tree nodes and boundary
conditions from the caller. A node provides `charge`, `centre_of_charge`,
`dipole_moments`, `quadrupole_moments`, and, for `BarnesHutMAC`, `size` and
`is_leaf`. Boundaries provide `displacement(a, b)`, the vector from `b` to
`a`; the Ewald classes also need `origin` and `size` (the cell side).

```python
import numpy as np
from types import SimpleNamespace

from plasmatree.coulomb import CoulombForce, Precision
from plasmatree.distributions import (
    ConstantChargeDistribution, MaxwellDistribution, UniformDistribution,
)
from plasmatree.particle import Particle

rng = np.random.default_rng(1)
electrons = Particle.generate(
    100, 1.0,
    UniformDistribution(rng, [0, 0, 0], [10, 10, 10]),
    MaxwellDistribution(rng, 1.0, 1.0, 3),
    ConstantChargeDistribution(-1),
)

open_bounds = SimpleNamespace(displacement=lambda a, b: a - b)
ion = SimpleNamespace(
    charge=1.0,
    centre_of_charge=np.array([5.0, 5.0, 5.0]),
    dipole_moments=np.zeros(3),
    quadrupole_moments=np.zeros((3, 3)),
)
pot = CoulombForce(0.1, open_bounds)
f = pot.force(electrons[0], ion, Precision.MONOPOLE)
```

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Generating initial conditions

`plasmatree-generate` writes particle positions to one file and velocities
to another. Each component is written in scientific notation with 20 digits
after the decimal point and followed by a tab; vectors follow one another
with no line breaks.

```
plasmatree-generate -N 1000 -O "(0,0,0)" -L 10 \
    -p uniform -v maxwell -T 1 -m 1 \
    -P positions.txt -V velocities.txt -s 42
```

Required options:

| Option | Meaning |
| --- | --- |
| `--num-particles`, `-N` | number of particles |
| `--origin`, `-O` | origin of the system, written as `(x,y,z)` |
| `--length`, `-L` | side length of the system |
| `--pos-dist`, `-p` | `uniform`, `spherical` or `sinusoidal` |
| `--vel-dist`, `-v` | `maxwell` or `constant` |
| `--pos-out`, `-P` | position output file |
| `--vel-out`, `-V` | velocity output file |
| `--seed`, `-s` | random seed |

`uniform` fills the box from the origin to origin + length; `spherical`
fills a sphere of radius `length` centred on the origin; `sinusoidal` fills
the same box as `uniform` with a sinusoidal density along one axis:

| Option | Default | Meaning |
| --- | --- | --- |
| `--dimension` | `0` | axis to oscillate along (x=0, y=1, z=2) |
| `--wavelengths` | `1` | number of wavelengths across the system |
| `--phase` | π/2 | phase offset |

The `maxwell` velocity distribution needs `--temperature`/`-T` and
`--mass`/`-m`; the `constant` one needs `--velocity`, written as
`(vx,vy,vz)` with as many components as the origin.

Options may also be read from a file named with `--config-file`. Each line
is `name = value` (with `#` starting a comment); values given on the command
line take priority over those in the file. `--help` lists every option. On
a missing or invalid option, or an unknown distribution name, the command
prints a message to standard error and exits with status 1.

## What this package does not do

It has no tree construction, no boundary-condition classes, no particle
pusher or time integrator, and no command that runs a simulation or
analyses its output. Those have to be supplied by the caller; the classes
here take nodes and boundaries as described above.