"""Monte Carlo simulation of the two-dimensional Ising model: lattices, updates, error analysis."""

__version__ = "0.1.0"