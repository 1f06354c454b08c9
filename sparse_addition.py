"""
Sparse Matrix Addition and Subtraction (A + B, A - B)
Implements a coordinate join over the two nonzero supports.

Algorithm: Outer Join on (row, col)
1. For every entry of A: combine with B's value at the same coordinate (0 if absent)
2. For every entry of B that A does not have: combine 0 with B's value
3. Zero results are dropped (set_element never stores 0)

Shapes are not checked: the result takes the larger row and column count.

Time Complexity: O(nnz(A) + nnz(B))
"""

import logging
import operator
import time

import numpy as np

from sparse_matrix import SparseMatrix


logger = logging.getLogger(__name__)


# ============================================================================
# Coordinate Join
# ============================================================================

def _join_matrices(mat_a: SparseMatrix, mat_b: SparseMatrix, op) -> SparseMatrix:
    """
    Combine two matrices entry-wise over the union of their supports.

    Args:
        mat_a, mat_b: Input matrices (not modified)
        op: Binary function applied as op(a_value, b_value)

    Returns:
        New SparseMatrix with shape (max rows, max cols)
    """
    result = SparseMatrix(max(mat_a.rows, mat_b.rows), max(mat_a.cols, mat_b.cols))

    for (row, col), value in mat_a.data.items():
        result.set_element(row, col, op(value, mat_b.get_element(row, col)))

    for (row, col), value in mat_b.data.items():
        if (row, col) not in mat_a.data:
            result.set_element(row, col, op(0, value))

    return result


# ============================================================================
# Main Functions
# ============================================================================

def add_matrices(mat_a: SparseMatrix, mat_b: SparseMatrix) -> SparseMatrix:
    """
    Add two sparse matrices: C = A + B

    Args:
        mat_a: First matrix
        mat_b: Second matrix

    Returns:
        SparseMatrix result
    """
    logger.info(f"Sparse addition: A({mat_a.shape}) + B({mat_b.shape})")
    start = time.time()

    result = _join_matrices(mat_a, mat_b, operator.add)

    logger.info(f"✓ Addition complete in {time.time() - start:.4f}s")
    logger.info(f"Result has {result.nnz():,} entries")
    return result


def subtract_matrices(mat_a: SparseMatrix, mat_b: SparseMatrix) -> SparseMatrix:
    """
    Subtract two sparse matrices: C = A - B

    Args:
        mat_a: First matrix
        mat_b: Matrix to subtract

    Returns:
        SparseMatrix result
    """
    logger.info(f"Sparse subtraction: A({mat_a.shape}) - B({mat_b.shape})")
    start = time.time()

    result = _join_matrices(mat_a, mat_b, operator.sub)

    logger.info(f"✓ Subtraction complete in {time.time() - start:.4f}s")
    logger.info(f"Result has {result.nnz():,} entries")
    return result


# ============================================================================
# Verification Against scipy
# ============================================================================

def _bounding_shape(*matrices):
    """Smallest shape holding every declared shape and every stored entry."""
    rows = max(m.rows for m in matrices)
    cols = max(m.cols for m in matrices)
    for m in matrices:
        for r, c in m.data:
            rows = max(rows, r + 1)
            cols = max(cols, c + 1)
    return rows, cols


def _verify_elementwise(mat_a, mat_b, result, scipy_op, name) -> bool:
    logger.info(f"Verifying {name} result against scipy.sparse...")

    expected_shape = (max(mat_a.rows, mat_b.rows), max(mat_a.cols, mat_b.cols))
    if result.shape != expected_shape:
        logger.error(f"✗ Shape mismatch: result={result.shape}, expected={expected_shape}")
        return False

    try:
        shape = _bounding_shape(mat_a, mat_b, result)
        scipy_a = mat_a.to_scipy_sparse(shape).tocsr()
        scipy_b = mat_b.to_scipy_sparse(shape).tocsr()
        scipy_result = result.to_scipy_sparse(shape).tocsr()

        expected = scipy_op(scipy_a, scipy_b)

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


def verify_addition_scipy(mat_a: SparseMatrix, mat_b: SparseMatrix, result: SparseMatrix) -> bool:
    """
    Verify addition result against scipy.sparse.

    Args:
        mat_a, mat_b: Input matrices
        result: Our result

    Returns:
        True if correct
    """
    return _verify_elementwise(mat_a, mat_b, result, operator.add, "addition")


def verify_subtraction_scipy(mat_a: SparseMatrix, mat_b: SparseMatrix, result: SparseMatrix) -> bool:
    """Verify subtraction result against scipy.sparse."""
    return _verify_elementwise(mat_a, mat_b, result, operator.sub, "subtraction")
