"""Statistical error estimates by the blocking and jackknife methods."""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Iterator, Union

import numpy as np

PathType = Union[str, PathLike]
BlockResult = tuple[int, np.ndarray]


def read_samples(path: PathType, count: int, columns: int) -> np.ndarray:
    """Read ``count`` rows of ``columns`` whitespace-separated values."""
    tokens = Path(path).read_text(encoding="ascii").split()
    needed = count * columns
    if len(tokens) < needed:
        raise ValueError(f"expected {needed} values, found {len(tokens)}")
    return np.array(tokens[:needed], dtype=float).reshape(count, columns)


def _as_samples(samples) -> np.ndarray:
    data = np.asarray(samples, dtype=float)
    if data.ndim == 1:
        data = data[:, None]
    if data.ndim != 2:
        raise ValueError("samples must be a sequence of rows")
    return data


def _block_means(data: np.ndarray, block: int) -> np.ndarray:
    blocks = len(data) // block
    return data[: blocks * block].reshape(blocks, block, -1).mean(axis=1)


def _blocking_scan(data: np.ndarray, first: int) -> Iterator[BlockResult]:
    total = len(data)
    previous = 0
    for block in range(first, total // 4, 10):
        blocks = total // block
        if blocks == previous:
            continue
        previous = blocks
        means = _block_means(data, block)
        variance = ((means - means.mean(axis=0)) ** 2).mean(axis=0)
        yield block, np.sqrt(variance / blocks)


def blocking_errors(samples) -> list[BlockResult]:
    """Error of the mean of each column for block sizes 10, 20, ... below N/4."""
    return list(_blocking_scan(_as_samples(samples), 10))


def jackknife_errors(samples) -> list[BlockResult]:
    """Jackknife error of the mean of each column over a range of block sizes."""
    data = _as_samples(samples)
    total = len(data)
    results: list[BlockResult] = []
    previous = 1
    for block in range(int(total / 1e4) + 1, total // 2, 10):
        blocks = total // block
        if blocks == previous:
            continue
        previous = blocks
        means = _block_means(data, block)
        jack = (means.sum(axis=0) - means) / (blocks - 1.0)
        spread = ((jack - jack.mean(axis=0)) ** 2).sum(axis=0)
        results.append((block, np.sqrt((blocks - 1) * spread / blocks)))
    return results


def max_blocking_error(samples) -> np.ndarray:
    """Largest blocking error of each column over block sizes 1, 11, 21, ..."""
    data = _as_samples(samples)
    sigma = np.zeros(data.shape[1])
    for _, errors in _blocking_scan(data, 1):
        sigma = np.maximum(sigma, errors)
    return sigma


def _write_results(results: list[BlockResult], path: PathType) -> None:
    with open(path, "w", encoding="ascii") as out:
        for block, errors in results:
            out.write("\t".join([str(block), *(f"{e:g}" for e in errors)]) + "\n")


def write_blocking(samples, path: PathType) -> list[BlockResult]:
    """Write blocking errors, one 'B<TAB>errors...' line per block size."""
    results = blocking_errors(samples)
    _write_results(results, path)
    return results


def write_jackknife(samples, path: PathType) -> list[BlockResult]:
    """Write jackknife errors, one 'B<TAB>errors...' line per block size."""
    results = jackknife_errors(samples)
    _write_results(results, path)
    return results