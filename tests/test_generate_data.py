"""
Tests for generate_data.

Run with: pytest tests/test_generate_data.py -v
"""

import pytest

from generate_data import SparseMatrixGenerator, generate_preset_matrices, main
from sparse_matrix import SparseMatrix


@pytest.fixture
def generator(tmp_path):
    return SparseMatrixGenerator(str(tmp_path / "out"))


def test_creates_output_dir(tmp_path):
    SparseMatrixGenerator(str(tmp_path / "a" / "b"))
    assert (tmp_path / "a" / "b").is_dir()


class TestRandom:

    def test_loads_back(self, generator):
        path = generator.generate_random(20, 15, 40, "rand.txt", seed=1)
        m = SparseMatrix.from_file(path)
        assert m.shape == (20, 15)
        assert m.nnz() == 40
        assert all(v != 0 and -9 <= v <= 9 for v in m.data.values())
        assert all(0 <= r < 20 and 0 <= c < 15 for r, c in m.data)

    def test_value_range(self, generator):
        path = generator.generate_random(5, 5, 10, "range.txt", seed=2, value_range=(1, 3))
        values = set(SparseMatrix.from_file(path).data.values())
        assert values <= {1, 2, 3}

    def test_seed_is_reproducible(self, generator):
        first = generator.generate_random(10, 10, 30, "one.txt", seed=7).read_text()
        second = generator.generate_random(10, 10, 30, "two.txt", seed=7).read_text()
        assert first == second

    def test_full_matrix(self, generator):
        m = SparseMatrix.from_file(generator.generate_random(3, 4, 12, "full.txt", seed=3))
        assert m.nnz() == 12

    def test_too_many_entries(self, generator):
        with pytest.raises(ValueError):
            generator.generate_random(2, 2, 5, "bad.txt")

    def test_zero_only_value_range(self, generator):
        with pytest.raises(ValueError):
            generator.generate_random(2, 2, 1, "bad.txt", value_range=(0, 0))


class TestBanded:

    def test_band_structure(self, generator):
        m = SparseMatrix.from_file(generator.generate_banded(5, 1, "band.txt", seed=4))
        assert m.shape == (5, 5)
        assert m.nnz() == 13
        assert all(abs(r - c) <= 1 for r, c in m.data)

    def test_diagonal(self, generator):
        m = SparseMatrix.from_file(generator.generate_banded(4, 0, "diag.txt", seed=5))
        assert sorted(m.data) == [(0, 0), (1, 1), (2, 2), (3, 3)]


def test_presets(tmp_path):
    files = generate_preset_matrices(str(tmp_path))
    assert len(files) == 5
    small_a = SparseMatrix.from_file(tmp_path / "small_A.txt")
    assert small_a.shape == (10, 10)
    assert small_a.nnz() == 15


class TestMain:

    def test_random(self, tmp_path):
        rc = main(["--output-dir", str(tmp_path), "--random", "--rows", "6", "--cols", "4",
                   "--nnz", "5", "-o", "cli.txt"])
        assert rc == 0
        m = SparseMatrix.from_file(tmp_path / "cli.txt")
        assert m.shape == (6, 4)
        assert m.nnz() == 5

    def test_banded(self, tmp_path):
        rc = main(["--output-dir", str(tmp_path), "--banded", "--size", "3", "--bandwidth", "2",
                   "--min-value", "1", "--max-value", "1", "-o", "b.txt"])
        assert rc == 0
        m = SparseMatrix.from_file(tmp_path / "b.txt")
        assert m.nnz() == 9
        assert set(m.data.values()) == {1}

    def test_missing_arguments(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--output-dir", str(tmp_path), "--random", "--rows", "3"])
