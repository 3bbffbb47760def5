"""Temperature sweeps of the 2D Ising model and the command that runs them."""

from __future__ import annotations

import argparse
import contextlib
import dataclasses
import math
import time
from dataclasses import dataclass, field
from enum import IntEnum
from os import PathLike
from pathlib import Path
from typing import Iterator, Optional, Union

import numpy as np

from .dynamics import IsingState, total_energy
from .errors import max_blocking_error, write_blocking, write_jackknife
from .lattice import (
    hexagonal_lattice,
    nearest_neighbours,
    square_lattice,
    write_lattice,
    write_neighbours,
)
from .plots import (
    plot_observables,
    save_configuration_at_iteration,
    save_configuration_at_temperature,
)

PathType = Union[str, PathLike]

SNAPSHOT_ITERATIONS = frozenset(
    {0, 9, 10, 11, 12, 13, 99, 999, 9999, 99999, 999999, 9999999, 99999999}
)


class Algorithm(IntEnum):
    RANDOM_METROPOLIS = 0
    SEQUENTIAL_METROPOLIS = 1
    WOLFF = 2


@dataclass
class SimulationConfig:
    """Settings for a run.

    ``size_index`` picks one lattice size from ``sizes`` (all when None);
    ``fixed_temperature`` runs a single temperature just above T_c and records
    the observables after every step.
    """

    sizes: tuple = (8, 16, 32, 64)
    coordination: int = 4
    coupling: float = 1.0
    algorithm: Algorithm = Algorithm.WOLFF
    size_index: Optional[int] = None
    fixed_temperature: bool = False
    square_critical: float = 2.269
    hexagonal_critical: float = 1.519
    seed: int = 1
    out_dir: str = "out"
    total_steps: Optional[int] = None
    equilibration_steps: Optional[int] = None
    plot: bool = True
    rng: np.random.Generator = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.algorithm = Algorithm(self.algorithm)
        self.rng = np.random.default_rng(self.seed)

    @property
    def critical_temperature(self) -> float:
        return self.hexagonal_critical if self.coordination == 3 else self.square_critical


@dataclass
class Observables:
    """Averages and blocking errors measured at one temperature."""

    temperature: float
    size: int
    magnetisation: float
    magnetisation_error: float
    susceptibility: float
    susceptibility_error: float
    binder: float
    binder_error: float
    specific_heat: float
    specific_heat_error: float
    cluster_size: float
    cluster_size_error: float
    scaled_temperature: float
    scaled_susceptibility: float
    scaled_susceptibility_error: float

    def result_line(self) -> str:
        values = (
            self.temperature, self.magnetisation, self.magnetisation_error,
            self.susceptibility, self.susceptibility_error, self.binder,
            self.binder_error,
        )
        tail = (
            self.specific_heat, self.specific_heat_error,
            self.cluster_size, self.cluster_size_error,
        )
        fields = [f"{v:g}" for v in values] + [str(self.size)] + [f"{v:g}" for v in tail]
        return "\t".join(fields) + "\n"

    def scaled_line(self) -> str:
        return (
            f"{self.scaled_temperature:g}\t{self.scaled_susceptibility:g}\t"
            f"{self.scaled_susceptibility_error:g}\n"
        )


def temperature_schedule(critical: float) -> Iterator[float]:
    """Temperatures of a sweep, denser close to ``critical``."""
    t = critical - 1.2
    while t < critical + 6:
        if critical - 2 < t < critical + 2:
            t -= 0.25
            if critical - 0.6 < t < critical + 0.6:
                t -= 0.2
        yield t
        t += 0.5


def step_counts(algorithm, temperature: float, critical: float, size: int, spin_count: int) -> tuple:
    """Return (total steps, equilibration steps) for one temperature."""
    algorithm = Algorithm(algorithm)
    if algorithm is Algorithm.WOLFF:
        equilibration = 5 * spin_count
        total = 20000 + equilibration + int(temperature * 300)
        if size == 32:
            equilibration += 9 * spin_count
            total = 50000 + equilibration + int(temperature * 1000)
        elif size == 64:
            equilibration += 12 * spin_count
            total = 70000 + equilibration + int(temperature * 2000)
        return total, equilibration

    equilibration = 70 * spin_count * spin_count
    base, extra = {64: (40000000, 20000000), 32: (10000000, 7000000), 16: (5000000, 3000000)}.get(
        size, (2000000, 2000000)
    )
    total = base + equilibration
    if critical - 0.6 < temperature < critical + 0.4:
        total += extra
    total += int(temperature * 50000)
    return total, equilibration


def _ratio(num: float, den: float) -> float:
    if den == 0:
        return math.nan
    return num / den


def run_temperature(state: IsingState, temperature: float, config: SimulationConfig,
                    size: int, critical: float, out_dir: PathType) -> Observables:
    """Simulate ``state`` at one temperature and return the measured observables."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    count = len(state.spins)
    total, equilibration = step_counts(config.algorithm, temperature, critical, size, count)
    if config.total_steps is not None:
        total = config.total_steps
    if config.equilibration_steps is not None:
        equilibration = config.equilibration_steps
    if config.fixed_temperature:
        equilibration = 0

    rng = config.rng
    state.energy = total_energy(state.spins, state.neighbours, state.coupling)
    state.magnetisation = float(state.spins.mean())
    snapshots = (
        config.plot and config.coordination == 4
        and config.fixed_temperature and config.size_index is not None
    )
    print(f"Computing T = {temperature:g}")

    sum_v = sum_v2 = sum_m = sum_m2 = sum_m4 = sum_dim = 0.0
    mean_v = mean_m = mean_m2 = dim_mean = 0.0
    chi = c_v = binder = 0.0
    samples = []
    pow_175 = size ** 1.75

    with contextlib.ExitStack() as stack:
        blocking_out = stack.enter_context(open(out / "dati_blocking.txt", "w", encoding="ascii"))
        trace_data = trace_obs = None
        if config.fixed_temperature:
            trace_data = stack.enter_context(open(out / "dati.txt", "w", encoding="ascii"))
            trace_obs = stack.enter_context(open(out / "osservabili.txt", "w", encoding="ascii"))

        for i in range(total):
            if config.algorithm is Algorithm.RANDOM_METROPOLIS:
                state.metropolis_step(temperature, rng)
            elif config.algorithm is Algorithm.SEQUENTIAL_METROPOLIS:
                state.metropolis_step(temperature, rng, i)
            else:
                state.wolff_step(temperature, rng)

            if i > equilibration:
                energy = state.energy
                abs_m = abs(state.magnetisation)
                m2 = abs_m * abs_m
                cluster = state.cluster_size
                sum_v += energy
                sum_v2 += energy * energy
                sum_dim += cluster
                sum_m += abs_m
                sum_m2 += m2
                sum_m4 += m2 * m2

                n = i - equilibration
                mean_v = sum_v / n
                mean_v2 = sum_v2 / n
                dim_mean = sum_dim / n / count
                mean_m = sum_m / n
                mean_m2 = sum_m2 / n
                mean_m4 = sum_m4 / n

                chi_now = count * (abs_m - mean_m) ** 2 / temperature
                chi = count * (mean_m2 - mean_m * mean_m) / temperature
                c_v_now = (energy - mean_v) ** 2 / count / temperature ** 2
                c_v = (mean_v2 - mean_v * mean_v) / count / temperature ** 2
                denominator = 3.0 * mean_m2 * mean_m2
                binder = 1.0 - _ratio(mean_m4, denominator)
                binder_now = 1.0 - _ratio(m2 * m2, denominator)

                samples.append((abs_m, chi_now, c_v_now, binder_now, cluster))
                blocking_out.write(
                    f"{abs_m:g}\t{chi_now:g}\t{c_v_now:g}\t{binder_now:g}\t{cluster}\n"
                )
                if trace_data is not None:
                    trace_data.write(f"{i}\t{dim_mean * count:g}\t{c_v:g}\n")
                    trace_obs.write(f"{i}\t{mean_m:g}\t{chi:g}\t{binder:g}\n")

            if snapshots and i in SNAPSHOT_ITERATIONS:
                save_configuration_at_iteration(state.spins, i, size, out / "config.plt")

    data = np.array(samples, dtype=float) if samples else np.empty((0, 5))
    sigma = max_blocking_error(data)
    reduced = (temperature - critical) / critical
    result = Observables(
        temperature=temperature,
        size=size,
        magnetisation=mean_m,
        magnetisation_error=float(sigma[0]),
        susceptibility=chi,
        susceptibility_error=float(sigma[1]),
        binder=binder,
        binder_error=float(sigma[3]),
        specific_heat=c_v,
        specific_heat_error=float(sigma[2]),
        cluster_size=dim_mean,
        cluster_size_error=float(sigma[4]) / count,
        scaled_temperature=reduced * size,
        scaled_susceptibility=chi / pow_175,
        scaled_susceptibility_error=float(sigma[1]) / pow_175,
    )

    if config.fixed_temperature:
        write_blocking(data, out / "blocking.txt")
        write_jackknife(data, out / "jackknife.txt")
    elif config.plot and config.coordination == 4 and config.size_index is not None:
        save_configuration_at_temperature(state.spins, temperature, size, out / "config.plt")
    return result


def run(config: SimulationConfig) -> dict:
    """Run the sweep for every chosen size; returns observables keyed by size."""
    if config.coordination not in (3, 4):
        print("Lattice not available, the square lattice is going to be presented")
        config = dataclasses.replace(config, coordination=4)
    if config.size_index is not None and not 0 <= config.size_index < len(config.sizes):
        raise ValueError(f"size index {config.size_index} out of range")

    out = Path(config.out_dir)
    out.mkdir(parents=True, exist_ok=True)
    indices = range(len(config.sizes)) if config.size_index is None else [config.size_index]
    critical = config.critical_temperature
    results: dict = {}

    with open(out / "risultati.txt", "w", encoding="ascii") as plain, \
            open(out / "results_scaled.txt", "w", encoding="ascii") as scaled:
        for index in indices:
            size = int(config.sizes[index])
            lattice = square_lattice(size) if config.coordination == 4 else hexagonal_lattice(size)
            write_lattice(lattice, out / "reticolo.txt")
            table = nearest_neighbours(lattice, size, config.coordination)
            write_neighbours(table, out / "primivicini.txt")

            if config.size_index is None:
                print(f"Executing lattice of N = {size}x{size}")
                if index != 0:
                    plain.write("\n\n")
                    scaled.write("\n\n")
            plain.write(f"L={size}\n")
            scaled.write(f"L={size}\n")

            state = IsingState.from_spins(lattice.spins, table, config.coupling)
            temperatures = (
                [critical + 0.5] if config.fixed_temperature else temperature_schedule(critical)
            )
            measured = []
            for temperature in temperatures:
                obs = run_temperature(state, temperature, config, size, critical, out)
                scaled.write(obs.scaled_line())
                plain.write(obs.result_line())
                measured.append(obs)
            results[size] = measured
            if config.fixed_temperature:
                break
    return results


_ALGORITHMS = {
    "random": Algorithm.RANDOM_METROPOLIS,
    "sequential": Algorithm.SEQUENTIAL_METROPOLIS,
    "wolff": Algorithm.WOLFF,
}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Monte Carlo simulation of the 2D Ising model.")
    parser.add_argument("--algorithm", choices=sorted(_ALGORITHMS), default="wolff")
    parser.add_argument("--coordination", type=int, default=4, help="3 (honeycomb) or 4 (square)")
    parser.add_argument("--sizes", type=int, nargs="+", default=[8, 16, 32, 64])
    parser.add_argument("--size-index", type=int, default=None)
    parser.add_argument("--fixed-temperature", action="store_true")
    parser.add_argument("--coupling", type=float, default=1.0)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--out-dir", default="out")
    parser.add_argument("--steps", type=int, default=None)
    parser.add_argument("--equilibration", type=int, default=None)
    parser.add_argument("--no-plot", action="store_true")
    args = parser.parse_args(argv)

    config = SimulationConfig(
        sizes=tuple(args.sizes),
        coordination=args.coordination,
        coupling=args.coupling,
        algorithm=_ALGORITHMS[args.algorithm],
        size_index=args.size_index,
        fixed_temperature=args.fixed_temperature,
        seed=args.seed,
        out_dir=args.out_dir,
        total_steps=args.steps,
        equilibration_steps=args.equilibration,
        plot=not args.no_plot,
    )
    start = time.perf_counter()
    run(config)
    print(f"Elapsed time: {time.perf_counter() - start:g} s")
    if config.plot:
        plot_observables(config.fixed_temperature)
    return 0