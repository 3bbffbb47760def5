"""Ising energy and Monte Carlo updates (Metropolis and Wolff)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np


def site_energy(spins: np.ndarray, neighbours: np.ndarray, coupling: float, site: int) -> float:
    """Energy of the bonds between ``site`` and its neighbours."""
    return float(-coupling * spins[site] * spins[neighbours[site]].sum())


def total_energy(spins: np.ndarray, neighbours: np.ndarray, coupling: float) -> float:
    """Total energy of the configuration, each bond counted once."""
    local = spins * spins[neighbours].sum(axis=1)
    return float(-0.5 * coupling * local.sum())


@dataclass
class IsingState:
    """Spin configuration with its running energy and magnetisation per spin."""

    spins: np.ndarray
    neighbours: np.ndarray
    coupling: float
    energy: float
    magnetisation: float
    cluster_size: int = 0

    @classmethod
    def from_spins(cls, spins, neighbours, coupling: float = 1.0) -> "IsingState":
        spin_array = np.array(spins, dtype=float)
        table = np.asarray(neighbours, dtype=int)
        return cls(
            spins=spin_array,
            neighbours=table,
            coupling=float(coupling),
            energy=total_energy(spin_array, table, coupling),
            magnetisation=float(spin_array.mean()),
        )

    def metropolis_step(
        self, temperature: float, rng: np.random.Generator, site: Optional[int] = None
    ) -> bool:
        """Try to flip one spin; a random one unless ``site`` is given.

        Returns whether the flip was accepted.
        """
        count = len(self.spins)
        m = int(rng.integers(count)) if site is None else site % count
        spins = self.spins
        delta = 2.0 * self.coupling * spins[m] * spins[self.neighbours[m]].sum()
        accept = delta <= 0 or math.exp(-delta / temperature) > rng.random()
        if accept:
            spins[m] = -spins[m]
            self.magnetisation += 2.0 * spins[m] / count
            self.energy += float(delta)
        return bool(accept)

    def wolff_step(self, temperature: float, rng: np.random.Generator) -> int:
        """Grow and flip one Wolff cluster; returns its size."""
        count = len(self.spins)
        spins = self.spins
        seed = int(rng.integers(count))
        prob = 1.0 - math.exp(-2.0 * self.coupling / temperature)

        old_spin = spins[seed]
        spins[seed] = -old_spin
        self.magnetisation += 2.0 * spins[seed] / count
        size = 1
        stack = [seed]
        while stack:
            current = stack.pop()
            for neighbour in self.neighbours[current]:
                if spins[neighbour] == old_spin and rng.random() < prob:
                    spins[neighbour] = -spins[neighbour]
                    self.magnetisation += 2.0 * spins[neighbour] / count
                    size += 1
                    stack.append(int(neighbour))

        self.cluster_size = size
        self.energy = total_energy(spins, self.neighbours, self.coupling)
        return size