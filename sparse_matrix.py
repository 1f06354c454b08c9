"""
Sparse Integer Matrix
Dictionary-of-keys storage for integer matrices with a plain-text file format.

Key Design:
- Only nonzero entries are stored, keyed by (row, col)
- Absence means zero: writing 0 deletes the entry
- No bounds checking against the declared shape
- scipy.sparse / NumPy conversion for verification and display

File format:
    rows=<rows>
    cols=<cols>
    (<row>, <col>, <value>)
    ...
"""

import logging
import re
from typing import Dict, Iterator, Optional, Tuple

import numpy as np
from scipy import sparse as sp


logger = logging.getLogger(__name__)


ROWS_PATTERN = re.compile(r"rows=(\d+)", re.ASCII)
COLS_PATTERN = re.compile(r"cols=(\d+)", re.ASCII)
ENTRY_PATTERN = re.compile(r"\((\d+),\s*(\d+),\s*(-?\d+)\)", re.ASCII)


class FormatError(ValueError):
    """Raised when a matrix file does not follow the expected format."""


class DimensionMismatchError(ValueError):
    """Raised when matrix shapes are incompatible for multiplication."""


class SparseMatrix:
    """
    Sparse matrix of integers stored as {(row, col): value}.

    The declared shape is informational: entries outside it can be read and
    written freely, reads of missing coordinates return 0.
    """

    def __init__(self, rows: int = 0, cols: int = 0):
        """
        Args:
            rows: Number of rows
            cols: Number of columns
        """
        self.rows = rows
        self.cols = cols
        self.data: Dict[Tuple[int, int], int] = {}

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @classmethod
    def from_file(cls, filepath) -> 'SparseMatrix':
        """
        Load a matrix from a text file.

        Entries are applied in file order, so a repeated coordinate keeps
        the last value seen.

        Args:
            filepath: Path to the matrix file

        Returns:
            SparseMatrix instance

        Raises:
            FileNotFoundError: If the file does not exist
            FormatError: On the first malformed header or entry line, or undecodable bytes
        """
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            raise FileNotFoundError(f"Matrix file not found: {filepath}") from None
        except UnicodeDecodeError as e:
            raise FormatError(f"{filepath}: not valid UTF-8 text ({e.reason} at byte {e.start})") from None

        if len(lines) < 2:
            raise FormatError(f"{filepath}: missing rows=/cols= header")

        rows = _parse_header(lines[0], ROWS_PATTERN, filepath, 1)
        cols = _parse_header(lines[1], COLS_PATTERN, filepath, 2)

        matrix = cls(rows, cols)

        for line_no, line in enumerate(lines[2:], start=3):
            line = line.strip()
            if not line:
                continue

            match = ENTRY_PATTERN.fullmatch(line)
            if match is None:
                raise FormatError(f"{filepath}, line {line_no}: malformed entry {line!r}")

            row, col, value = (int(group) for group in match.groups())
            matrix.set_element(row, col, value)

        logger.info(f"Loaded {filepath}: shape={matrix.shape}, nnz={matrix.nnz():,}")
        return matrix

    def get_element(self, row: int, col: int) -> int:
        """Return the value at (row, col), 0 if not stored."""
        return self.data.get((row, col), 0)

    def set_element(self, row: int, col: int, value: int):
        """
        Store value at (row, col). A zero value removes the entry.
        """
        if value == 0:
            self.data.pop((row, col), None)
        else:
            self.data[(row, col)] = value

    def nnz(self) -> int:
        """Return number of nonzeros."""
        return len(self.data)

    def iter_entries(self) -> Iterator[Tuple[int, int, int]]:
        """
        Iterate over stored entries sorted by (row, col).

        Yields:
            (row, col, value) tuples
        """
        for (row, col) in sorted(self.data):
            yield row, col, self.data[(row, col)]

    def save_to_file(self, filepath):
        """
        Write the matrix to a text file, overwriting it if present.

        Args:
            filepath: Output file path
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(f"rows={self.rows}\n")
            f.write(f"cols={self.cols}\n")
            for row, col, value in self.iter_entries():
                f.write(f"({row}, {col}, {value})\n")
        logger.info(f"Wrote {self.nnz():,} entries to {filepath}")

    def negate(self) -> 'SparseMatrix':
        """Return a new matrix with every stored value's sign flipped."""
        result = SparseMatrix(self.rows, self.cols)
        for (row, col), value in self.data.items():
            result.set_element(row, col, -value)
        return result

    def to_scipy_sparse(self, shape: Optional[Tuple[int, int]] = None) -> sp.coo_matrix:
        """
        Convert to scipy.sparse.coo_matrix (int64) for verification.

        Args:
            shape: Target shape, defaults to the declared shape

        Returns:
            scipy.sparse.coo_matrix

        Raises:
            ValueError: If an entry lies outside the target shape
        """
        shape = self.shape if shape is None else shape
        rows = [r for r, c in self.data]
        cols = [c for r, c in self.data]
        values = list(self.data.values())

        if any(r >= shape[0] for r in rows) or any(c >= shape[1] for c in cols):
            raise ValueError(f"Matrix has entries outside shape {shape}")

        return sp.coo_matrix(
            (np.array(values, dtype=np.int64),
             (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64))),
            shape=shape
        )

    @classmethod
    def from_scipy_sparse(cls, scipy_matrix) -> 'SparseMatrix':
        """
        Create SparseMatrix from any scipy.sparse matrix.

        Duplicate coordinates are summed, explicit zeros are dropped.
        """
        coo = sp.coo_matrix(scipy_matrix)
        coo.sum_duplicates()
        matrix = cls(*coo.shape)
        for i, j, v in zip(coo.row, coo.col, coo.data):
            matrix.set_element(int(i), int(j), int(v))
        return matrix

    def to_dense(self) -> np.ndarray:
        """
        Convert to a dense NumPy array.

        WARNING: Only use for small matrices!
        """
        return self.to_scipy_sparse().toarray()

    def __eq__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return self.shape == other.shape and self.data == other.data

    def __repr__(self):
        return f"SparseMatrix(shape={self.shape}, nnz={self.nnz()})"


def _parse_header(line: str, pattern, filepath, line_no: int) -> int:
    match = pattern.fullmatch(line.strip())
    if match is None:
        raise FormatError(f"{filepath}, line {line_no}: malformed header {line.strip()!r}")
    return int(match.group(1))
