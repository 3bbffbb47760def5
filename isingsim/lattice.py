"""Lattice geometry: site coordinates, spins and nearest-neighbour tables."""

from __future__ import annotations

import math
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Union

import numpy as np

PathType = Union[str, PathLike]

HEX_HEIGHT = 0.86602540378
"""Height of the equilateral triangle of unit side (sqrt(3)/2)."""

NEIGHBOUR_CUTOFF_SQ = 1.21
"""Squared distance within which two sites count as nearest neighbours."""


@dataclass
class Lattice:
    """Site coordinates together with the spin on each site."""

    x: np.ndarray
    y: np.ndarray
    spins: np.ndarray

    def __len__(self) -> int:
        return len(self.spins)


def square_lattice(size: int) -> Lattice:
    """Build a size x size square lattice with all spins up.

    Site ``i * size + j`` sits at ``(i, j)``.
    """
    if size < 1:
        raise ValueError("lattice size must be positive")
    index = np.arange(size * size)
    return Lattice(
        x=(index // size).astype(float),
        y=(index % size).astype(float),
        spins=np.ones(size * size),
    )


def hexagonal_lattice(size: int) -> Lattice:
    """Build a honeycomb lattice of size*size sites, laid out in zig-zag chains."""
    if size < 1:
        raise ValueError("lattice size must be positive")
    total = size * size
    xs: list[float] = []
    ys: list[float] = []
    x, y = 0.0, HEX_HEIGHT
    step_x = 0
    step_y = 0
    for placed in range(1, total + 1):
        xs.append(x)
        ys.append(y)
        x += 0.5 if step_x == 0 else 1.0
        if step_y == 0:
            y -= HEX_HEIGHT
        elif step_y == 2:
            y += HEX_HEIGHT
        step_y = (step_y + 1) % 4
        step_x = 1 - step_x
        if placed % size == 0 and placed != total:
            x = 0.0
            y += 2 * HEX_HEIGHT
            step_x = 0
            step_y = 0
    return Lattice(x=np.array(xs), y=np.array(ys), spins=np.ones(total))


def _square_neighbours(size: int) -> np.ndarray:
    index = np.arange(size * size)
    row = index // size
    col = index % size
    return np.column_stack(
        (
            row * size + (col - 1) % size,
            row * size + (col + 1) % size,
            ((row - 1) % size) * size + col,
            ((row + 1) % size) * size + col,
        )
    ).astype(int)


def nearest_neighbours(lattice: Lattice, size: int, coordination: int) -> np.ndarray:
    """Return an (N, coordination) table of neighbour indices with periodic boundaries.

    Coordination 4 uses the square-lattice layout directly; any other value
    searches the lattice geometrically, keeping the first matches in index order.
    """
    if coordination < 1:
        raise ValueError("coordination must be positive")
    if coordination == 4:
        return _square_neighbours(size)

    if coordination == 3:
        box_x = size * 3.0 / 4.0
        box_y = math.sqrt(3) * size
    else:
        box_x = box_y = float(size)

    xs = np.asarray(lattice.x, dtype=float)
    ys = np.asarray(lattice.y, dtype=float)
    table = np.empty((len(xs), coordination), dtype=int)
    for site, (x0, y0) in enumerate(zip(xs, ys)):
        dx = xs - x0
        dy = ys - y0
        dx -= box_x * np.floor(dx / box_x + 0.5)
        dy -= box_y * np.floor(dy / box_y + 0.5)
        close = (dx * dx + dy * dy) <= NEIGHBOUR_CUTOFF_SQ
        close[site] = False
        found = np.flatnonzero(close)[:coordination]
        if len(found) < coordination:
            raise ValueError(
                f"site {site} has only {len(found)} neighbours, {coordination} required"
            )
        table[site] = found
    return table


def write_lattice(lattice: Lattice, path: PathType) -> None:
    """Write one 'x<TAB>y<TAB>spin' line per site."""
    with open(path, "w", encoding="ascii") as out:
        for x, y, s in zip(lattice.x, lattice.y, lattice.spins):
            out.write(f"{x:g}\t{y:g}\t{s:g}\n")


def write_neighbours(table: np.ndarray, path: PathType) -> None:
    """Write one tab-separated line of neighbour indices per site."""
    with open(path, "w", encoding="ascii") as out:
        for row in np.asarray(table, dtype=int):
            out.write("\t".join(str(v) for v in row) + "\n")


def read_neighbours(path: PathType, count: int, coordination: int) -> np.ndarray:
    """Read a neighbour table of ``count`` sites written by :func:`write_neighbours`."""
    tokens = Path(path).read_text(encoding="ascii").split()
    needed = count * coordination
    if len(tokens) < needed:
        raise ValueError(f"expected {needed} neighbour indices, found {len(tokens)}")
    values = np.array(tokens[:needed], dtype=float).astype(int)
    return values.reshape(count, coordination)