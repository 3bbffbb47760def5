import numpy as np
import pytest

from isingsim.errors import (
    blocking_errors,
    jackknife_errors,
    max_blocking_error,
    read_samples,
    write_blocking,
    write_jackknife,
)


@pytest.fixture
def samples():
    return np.random.default_rng(7).normal(size=(200, 3))


def test_read_samples_round_trip(tmp_path, samples):
    path = tmp_path / "data.txt"
    np.savetxt(path, samples, delimiter="\t")
    loaded = read_samples(path, 200, 3)
    assert np.allclose(loaded, samples)


def test_read_samples_reads_prefix(tmp_path, samples):
    path = tmp_path / "data.txt"
    np.savetxt(path, samples)
    assert np.allclose(read_samples(path, 10, 3), samples[:10])


def test_read_samples_short_file(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("1 2 3\n")
    with pytest.raises(ValueError):
        read_samples(path, 2, 3)


def test_constant_data_has_zero_error():
    data = np.full((120, 2), 0.75)
    assert all(np.allclose(err, 0.0) for _, err in blocking_errors(data))
    assert all(np.allclose(err, 0.0) for _, err in jackknife_errors(data))
    assert np.allclose(max_blocking_error(data), 0.0)


def test_blocking_block_sizes(samples):
    results = blocking_errors(samples)
    sizes = [b for b, _ in results]
    assert sizes
    assert all(b % 10 == 0 and b < len(samples) // 4 for b in sizes)
    counts = [len(samples) // b for b in sizes]
    assert len(set(counts)) == len(counts)
    assert all(err.shape == (3,) for _, err in results)


def test_jackknife_single_sample_blocks(samples):
    results = jackknife_errors(samples)
    block, errors = results[0]
    assert block == 1
    expected = samples.std(axis=0, ddof=1) / np.sqrt(len(samples))
    assert np.allclose(errors, expected)


def test_jackknife_block_sizes_below_half(samples):
    sizes = [b for b, _ in jackknife_errors(samples)]
    assert all(b < len(samples) // 2 for b in sizes)
    assert all(len(samples) // b >= 2 for b in sizes)


def test_max_blocking_error_bounds_plain_error(samples):
    sigma = max_blocking_error(samples)
    plain = samples.std(axis=0) / np.sqrt(len(samples))
    assert np.all(sigma >= plain - 1e-12)
    assert sigma.shape == (3,)


def test_one_dimensional_samples():
    data = np.random.default_rng(2).normal(size=100)
    sigma = max_blocking_error(data)
    assert sigma.shape == (1,)
    assert sigma[0] >= data.std() / np.sqrt(len(data)) - 1e-12


def test_write_blocking_lines(tmp_path, samples):
    path = tmp_path / "blocking.txt"
    results = write_blocking(samples, path)
    lines = path.read_text().splitlines()
    assert len(lines) == len(results)
    for line, (block, errors) in zip(lines, results):
        fields = line.split("\t")
        assert int(fields[0]) == block
        assert np.allclose([float(f) for f in fields[1:]], errors, rtol=1e-5)


def test_write_jackknife_lines(tmp_path, samples):
    path = tmp_path / "jackknife.txt"
    results = write_jackknife(samples, path)
    lines = path.read_text().splitlines()
    assert len(lines) == len(results)
    assert [int(line.split("\t")[0]) for line in lines] == [b for b, _ in results]