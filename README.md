# isingsim

Monte Carlo simulation of the two-dimensional Ising model with periodic
boundaries, on a square lattice (four nearest neighbours, T_c ≈ 2.269) or a
hexagonal lattice (three nearest neighbours, T_c ≈ 1.519).

Three update schemes are available:

- Metropolis with a random spin chosen at each step (`--algorithm random`)
- Metropolis sweeping the spins in order (`--algorithm sequential`)
- Wolff cluster updates (`--algorithm wolff`, the default)

For every temperature the simulation records the absolute magnetisation, the
magnetic susceptibility, the specific heat, the Binder ratio and the mean
Wolff cluster size (zero for Metropolis), and estimates their statistical
errors with the blocking method.

## Installation

```
pip install .
```

## Running

```
isingsim
```

By default this sweeps the temperatures around T_c for lattices of size 8, 16,
32 and 64 with the Wolff algorithm on the square lattice. Options:

- `--algorithm {random,sequential,wolff}`
- `--coordination N`: 4 for the square lattice, 3 for the hexagonal one; any
  other value falls back to the square lattice
- `--sizes L [L ...]`: the linear sizes to simulate
- `--size-index I`: simulate only `sizes[I]`
- `--fixed-temperature`: run a single temperature, T_c + 0.5, with no
  equilibration cut, recording the running averages after every step and
  writing blocking and jackknife error curves
- `--coupling J`, `--seed S`, `--out-dir DIR`
- `--steps N`, `--equilibration N`: override the built-in step counts
- `--no-plot`: do not call gnuplot

Results are written to the output directory (`out/` by default):

- `risultati.txt`: per lattice size, one line per temperature with T,
  ⟨|m|⟩ and its error, χ and its error, the Binder ratio and its error, L,
  c_v and its error, and the mean cluster size per spin and its error
- `results_scaled.txt`: (T−T_c)/T_c·L, χ/L^1.75 and its error
- `dati_blocking.txt`: the per-step samples of the last temperature
- `osservabili.txt`, `dati.txt`, `blocking.txt`, `jackknife.txt`: only with
  `--fixed-temperature`
- `reticolo.txt`, `primivicini.txt`: the lattice and its neighbour table

## Plots

Plotting is done by running `gnuplot`, which must be on your `PATH`; the
numbers do not need it. When a single size is chosen on the square lattice,
the package writes `config.plt` in the output directory and renders spin
configurations into its `config/` subdirectory.

After a run, `isingsim` calls `gnuplot plot_osservabili_T.plt` (or
`plot_osservabili.plt` with `--fixed-temperature`) in the current directory.
`isingsim.plots` also has `plot_lattice()` and `plot_blocking()`, which run
`plot_reticolo.plt` and `plot_blocking.plt`. The package does not ship these
four gnuplot scripts: supply your own, or use `--no-plot`.

## Using the library

```python
import numpy as np
from isingsim.lattice import square_lattice, nearest_neighbours
from isingsim.dynamics import IsingState

lattice = square_lattice(16)
table = nearest_neighbours(lattice, 16, 4)
state = IsingState.from_spins(lattice.spins, table, 1.0)

rng = np.random.default_rng(1)
for _ in range(1000):
    state.wolff_step(2.0, rng)
print(state.magnetisation, state.energy)
```

`IsingState.metropolis_step(temperature, rng, site=None)` tries a single
spin flip and returns whether it was accepted.

Error analysis works on any array of samples with one row per step and one
column per observable:

```python
from isingsim.errors import max_blocking_error, blocking_errors, jackknife_errors

sigma = max_blocking_error(samples)        # largest error per column
curve = blocking_errors(samples)           # [(block size, errors), ...]
jack = jackknife_errors(samples)
```

The `isingsim.simulation` module exposes `SimulationConfig`, `Algorithm`,
`Observables`, `temperature_schedule`, `step_counts`, `run_temperature` and
`run` to drive the full temperature sweep from Python.