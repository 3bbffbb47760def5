"""Gnuplot helpers: run plot scripts and draw spin configurations."""

from __future__ import annotations

import subprocess
import sys
from os import PathLike
from pathlib import Path
from typing import Sequence, Union

PathType = Union[str, PathLike]

LATTICE_SCRIPT = "plot_reticolo.plt"
BLOCKING_SCRIPT = "plot_blocking.plt"
OBSERVABLES_SCRIPT = "plot_osservabili.plt"
OBSERVABLES_T_SCRIPT = "plot_osservabili_T.plt"
CONFIG_SCRIPT = "out/config.plt"


def run_gnuplot(script: PathType) -> bool:
    """Run gnuplot on ``script``; returns whether it finished successfully."""
    command = ["gnuplot", str(script)]
    print(" ".join(command))
    try:
        completed = subprocess.run(command, check=False)
    except FileNotFoundError:
        print("gnuplot: command not found", file=sys.stderr)
        return False
    return completed.returncode == 0


def plot_lattice() -> bool:
    """Plot the lattice written by the last simulation."""
    return run_gnuplot(LATTICE_SCRIPT)


def plot_blocking() -> bool:
    """Plot the blocking error estimates."""
    return run_gnuplot(BLOCKING_SCRIPT)


def plot_observables(single_temperature: bool) -> bool:
    """Plot the observables, over iterations or as functions of temperature."""
    return run_gnuplot(OBSERVABLES_SCRIPT if single_temperature else OBSERVABLES_T_SCRIPT)


def plot_config() -> bool:
    """Render the configuration script last written to the output directory."""
    return run_gnuplot(CONFIG_SCRIPT)


def configuration_script(spins: Sequence[float], size: int, title: str, output: PathType) -> str:
    """Gnuplot script drawing each up spin white and each down spin black."""
    size = int(size)
    if len(spins) < size * size:
        raise ValueError(f"expected {size * size} spins, got {len(spins)}")
    lines = [
        "set term png",
        f'set output "{Path(output).as_posix()}"',
        f"set xrange [ 0 :   {size} ]",
        f"set yrange [ 0 :   {size} ]",
        "set nokey",
        f'set title "{title}"',
        "unset tics",
        "set size ratio    1.00000",
    ]
    for i in range(size):
        for j in range(size):
            colour = "white" if spins[i * size + j] == 1 else "black"
            lines.append(
                f'set object rectangle from {i}, {j} to {i + 1}, {j + 1} fc rgb "{colour}"'
            )
    lines += ["plot 1", "quit"]
    return "\n".join(lines) + "\n"


def _save_configuration(spins, size: int, title: str, image_name: str, path: PathType) -> Path:
    script = Path(path)
    image_dir = script.parent / "config"
    image_dir.mkdir(parents=True, exist_ok=True)
    image = image_dir / image_name
    script.write_text(configuration_script(spins, size, title, image), encoding="ascii")
    run_gnuplot(script)
    return image


def save_configuration_at_iteration(spins, iteration: int, size: int, path: PathType) -> Path:
    """Write and render the configuration after ``iteration + 1`` steps; returns the image path."""
    size = int(size)
    title = f"Configuration at {iteration + 1} iterations for N={size}x{size}"
    return _save_configuration(spins, size, title, f"ising_2d_iter_{iteration + 1}.png", path)


def save_configuration_at_temperature(spins, temperature: float, size: int, path: PathType) -> Path:
    """Write and render the configuration reached at ``temperature``; returns the image path."""
    size = int(size)
    title = f"Configuration at temperature {temperature:g} for N={size}x{size}"
    return _save_configuration(spins, size, title, f"ising_2d_T_{temperature:g}.png", path)