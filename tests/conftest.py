import numpy as np
import pytest

from sparse_matrix import SparseMatrix


def make_matrix(rows, cols, entries):
    """Build a SparseMatrix from {(row, col): value}."""
    matrix = SparseMatrix(rows, cols)
    for (r, c), v in entries.items():
        matrix.set_element(r, c, v)
    return matrix


def random_matrix(rows, cols, density, seed, low=-5, high=5):
    """Random integer SparseMatrix; zeros drawn from the range are simply not stored."""
    rng = np.random.default_rng(seed)
    dense = rng.integers(low, high + 1, size=(rows, cols))
    mask = rng.random((rows, cols)) < density
    dense = np.where(mask, dense, 0)
    return SparseMatrix.from_scipy_sparse(dense), dense


@pytest.fixture
def write_matrix_file(tmp_path):
    """Write raw text to a file under tmp_path and return its path."""
    def _write(text, name="matrix.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
