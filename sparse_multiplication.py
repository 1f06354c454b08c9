"""
Sparse Matrix Multiplication (A × B)
Implements row × column inner products restricted to the nonzero supports.

Algorithm: Row/Column Grouping + Two-Pointer Intersection
1. Rank the inner indices (A's columns and B's rows) in sorted order
2. Group A's entries by row (sorted column ranks + values)
3. Group B's entries by column (sorted row ranks + values)
4. For each populated row i of A and populated column k of B whose rank
   ranges overlap: intersect the ranks (Numba two-pointer)
5. Sum A[i,j] * B[j,k] over the intersection, store only nonzero sums

Ranks keep the kernel on int64 for arbitrarily large coordinates.
Products are accumulated as Python ints, so results are exact.

Time Complexity: O(nnz(A) + nnz(B) + R·C·avg_intersection_scan)
where R, C are the number of populated rows of A and columns of B.
"""

import logging
import time
from collections import defaultdict

import numba
import numpy as np

from sparse_matrix import DimensionMismatchError, SparseMatrix


logger = logging.getLogger(__name__)


# ============================================================================
# Numba-Accelerated Intersection
# ============================================================================

@numba.jit(nopython=True, cache=True)
def _intersect_sorted(indices1, indices2):
    """
    Find matching positions of two sorted index arrays using two pointers.

    Args:
        indices1: First sorted index array
        indices2: Second sorted index array

    Returns:
        (positions1, positions2) such that
        indices1[positions1[m]] == indices2[positions2[m]]
    """
    n1, n2 = len(indices1), len(indices2)
    max_size = min(n1, n2)
    pos1 = np.empty(max_size, dtype=np.int64)
    pos2 = np.empty(max_size, dtype=np.int64)

    i, j, k = 0, 0, 0

    while i < n1 and j < n2:
        if indices1[i] < indices2[j]:
            i += 1
        elif indices1[i] > indices2[j]:
            j += 1
        else:  # Match found
            pos1[k] = i
            pos2[k] = j
            i += 1
            j += 1
            k += 1

    return pos1[:k], pos2[:k]


# ============================================================================
# Grouping
# ============================================================================

def _rank_inner_indices(mat_a: SparseMatrix, mat_b: SparseMatrix):
    """
    Map every inner index (A's columns, B's rows) to its position in sorted order.

    Coordinates are unbounded Python ints; ranks always fit in int64.
    """
    inner = {col for _, col in mat_a.data} | {row for row, _ in mat_b.data}
    return {index: rank for rank, index in enumerate(sorted(inner))}


def _group_entries(matrix: SparseMatrix, by_row: bool, inner_rank):
    """
    Group a matrix's entries by row (or by column).

    Args:
        matrix: Matrix to group
        by_row: Group by row (inner index = column) or by column (inner index = row)
        inner_rank: {inner_index: rank} from _rank_inner_indices

    Returns:
        {outer_index: (sorted inner ranks as int64 array, values list)}
    """
    groups = defaultdict(dict)
    for (row, col), value in matrix.data.items():
        if by_row:
            groups[row][inner_rank[col]] = value
        else:
            groups[col][inner_rank[row]] = value

    grouped = {}
    for outer, inner in groups.items():
        ranks = sorted(inner)
        grouped[outer] = (np.array(ranks, dtype=np.int64), [inner[r] for r in ranks])
    return grouped


# ============================================================================
# Main Multiplication Function
# ============================================================================

def multiply_matrices(mat_a: SparseMatrix, mat_b: SparseMatrix) -> SparseMatrix:
    """
    Multiply sparse matrices: C = A × B

    Args:
        mat_a: Matrix A (m × n)
        mat_b: Matrix B (n × p)

    Returns:
        SparseMatrix result (m × p)

    Raises:
        DimensionMismatchError: If A's columns != B's rows
    """
    logger.info(f"Sparse multiplication: A({mat_a.shape}) × B({mat_b.shape})")

    if mat_a.cols != mat_b.rows:
        raise DimensionMismatchError(
            f"Incompatible dimensions: A is {mat_a.shape}, B is {mat_b.shape}. "
            f"A's columns ({mat_a.cols}) must equal B's rows ({mat_b.rows})"
        )

    result = SparseMatrix(mat_a.rows, mat_b.cols)

    if mat_a.nnz() == 0 or mat_b.nnz() == 0:
        logger.info("Empty operand, result is all zeros")
        return result

    logger.info(f"A: {mat_a.nnz():,} nonzeros")
    logger.info(f"B: {mat_b.nnz():,} nonzeros")

    start = time.time()
    inner_rank = _rank_inner_indices(mat_a, mat_b)
    a_by_rows = _group_entries(mat_a, by_row=True, inner_rank=inner_rank)
    b_by_cols = _group_entries(mat_b, by_row=False, inner_rank=inner_rank)
    logger.info(f"Grouped {len(a_by_rows):,} rows of A, {len(b_by_cols):,} columns of B "
                f"in {time.time() - start:.4f}s")

    start = time.time()
    for row, (a_cols, a_vals) in a_by_rows.items():
        a_first, a_last = a_cols[0], a_cols[-1]
        for col, (b_rows, b_vals) in b_by_cols.items():
            # Disjoint index ranges cannot intersect
            if a_last < b_rows[0] or b_rows[-1] < a_first:
                continue

            pos_a, pos_b = _intersect_sorted(a_cols, b_rows)
            if len(pos_a) == 0:
                continue

            total = 0
            for i, j in zip(pos_a.tolist(), pos_b.tolist()):
                total += a_vals[i] * b_vals[j]

            result.set_element(row, col, total)

    logger.info(f"✓ Multiplication complete in {time.time() - start:.4f}s")
    logger.info(f"Result has {result.nnz():,} nonzeros")

    return result


# ============================================================================
# Verification Against scipy
# ============================================================================

def verify_multiplication_scipy(mat_a: SparseMatrix, mat_b: SparseMatrix, result: SparseMatrix) -> bool:
    """
    Verify multiplication result against scipy.sparse.

    Args:
        mat_a, mat_b: Input matrices
        result: Our result

    Returns:
        True if correct
    """
    logger.info("Verifying result against scipy.sparse...")

    expected_shape = (mat_a.rows, mat_b.cols)
    if result.shape != expected_shape:
        logger.error(f"✗ Shape mismatch: result={result.shape}, expected={expected_shape}")
        return False

    try:
        # Entries may sit outside the declared shapes, so widen consistently
        rows = max([mat_a.rows, result.rows] + [r + 1 for r, _ in mat_a.data] +
                   [r + 1 for r, _ in result.data])
        inner = max([mat_a.cols, mat_b.rows] + [c + 1 for _, c in mat_a.data] +
                    [r + 1 for r, _ in mat_b.data])
        cols = max([mat_b.cols, result.cols] + [c + 1 for _, c in mat_b.data] +
                   [c + 1 for _, c in result.data])

        scipy_a = mat_a.to_scipy_sparse((rows, inner)).tocsr()
        scipy_b = mat_b.to_scipy_sparse((inner, cols)).tocsc()
        scipy_result = result.to_scipy_sparse((rows, cols)).tocsr()

        expected = scipy_a @ scipy_b

        diff = scipy_result - expected
        max_diff = np.abs(diff.data).max() if diff.nnz > 0 else 0

        if max_diff != 0:
            logger.error(f"✗ Verification failed: max difference = {max_diff}")
            return False

        logger.info("✓ Verification passed! Result matches scipy.sparse")
        return True

    except Exception as e:
        logger.error(f"Verification error: {e}")
        return False
