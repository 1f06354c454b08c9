"""
Tests for sparse_addition: element-wise addition and subtraction.

Run with: pytest tests/test_sparse_addition.py -v
"""

import numpy as np
import pytest

from conftest import make_matrix, random_matrix
from sparse_addition import (
    add_matrices,
    subtract_matrices,
    verify_addition_scipy,
    verify_subtraction_scipy,
)
from sparse_matrix import SparseMatrix


@pytest.fixture
def m1():
    return make_matrix(3, 3, {(0, 1): 5, (1, 2): 10})


@pytest.fixture
def m2():
    return make_matrix(3, 3, {(0, 1): 2, (1, 2): 8})


class TestAddition:

    def test_basic(self, m1, m2):
        result = add_matrices(m1, m2)
        assert result.get_element(0, 1) == 7
        assert result.get_element(1, 2) == 18
        assert result.nnz() == 2
        assert result.shape == (3, 3)

    def test_disjoint_supports(self):
        a = make_matrix(2, 2, {(0, 0): 1})
        b = make_matrix(2, 2, {(1, 1): -4})
        assert add_matrices(a, b).data == {(0, 0): 1, (1, 1): -4}

    def test_cancellation_not_stored(self):
        a = make_matrix(2, 2, {(0, 0): 5, (1, 0): 1})
        b = make_matrix(2, 2, {(0, 0): -5})
        result = add_matrices(a, b)
        assert (0, 0) not in result.data
        assert result.data == {(1, 0): 1}

    def test_absent_in_both_stays_absent(self, m1, m2):
        result = add_matrices(m1, m2)
        assert result.get_element(2, 2) == 0
        assert (2, 2) not in result.data

    def test_shapes_widen(self):
        a = make_matrix(2, 5, {(1, 4): 3})
        b = make_matrix(4, 1, {(3, 0): 2})
        result = add_matrices(a, b)
        assert result.shape == (4, 5)
        assert result.data == {(1, 4): 3, (3, 0): 2}

    def test_empty_operands(self):
        result = add_matrices(SparseMatrix(2, 3), SparseMatrix(1, 1))
        assert result.shape == (2, 3)
        assert result.nnz() == 0

    def test_inputs_not_mutated(self, m1, m2):
        before_a, before_b = dict(m1.data), dict(m2.data)
        result = add_matrices(m1, m2)
        assert m1.data == before_a
        assert m2.data == before_b
        assert result is not m1 and result is not m2

    def test_matches_dense_sum(self):
        a, dense_a = random_matrix(12, 9, 0.3, seed=1)
        b, dense_b = random_matrix(12, 9, 0.3, seed=2)
        result = add_matrices(a, b)
        np.testing.assert_array_equal(result.to_dense(), dense_a + dense_b)
        for r in range(12):
            for c in range(9):
                assert result.get_element(r, c) == a.get_element(r, c) + b.get_element(r, c)
        assert all(v != 0 for v in result.data.values())

    def test_verify_scipy(self, m1, m2):
        assert verify_addition_scipy(m1, m2, add_matrices(m1, m2))

    def test_verify_scipy_detects_wrong_result(self, m1, m2):
        wrong = add_matrices(m1, m2)
        wrong.set_element(2, 2, 1)
        assert not verify_addition_scipy(m1, m2, wrong)

    def test_verify_scipy_detects_wrong_shape(self, m1, m2):
        assert not verify_addition_scipy(m1, m2, make_matrix(2, 2, {}))

    def test_verify_with_entries_outside_declared_shape(self):
        a = make_matrix(1, 1, {(4, 4): 2})
        b = make_matrix(1, 1, {(0, 0): 1})
        assert verify_addition_scipy(a, b, add_matrices(a, b))


class TestSubtraction:

    def test_basic(self, m1, m2):
        result = subtract_matrices(m1, m2)
        assert result.get_element(0, 1) == 3
        assert result.get_element(1, 2) == 2

    def test_only_in_b_is_negated(self):
        a = make_matrix(2, 2, {(0, 0): 1})
        b = make_matrix(2, 2, {(1, 1): 4})
        assert subtract_matrices(a, b).data == {(0, 0): 1, (1, 1): -4}

    def test_equal_matrices_give_empty_result(self, m1):
        result = subtract_matrices(m1, m1)
        assert result.nnz() == 0
        assert result.shape == m1.shape

    def test_shapes_widen(self):
        result = subtract_matrices(SparseMatrix(1, 7), make_matrix(3, 2, {(2, 1): 5}))
        assert result.shape == (3, 7)
        assert result.data == {(2, 1): -5}

    def test_equals_adding_negation(self):
        a, _ = random_matrix(10, 10, 0.4, seed=3)
        b, _ = random_matrix(10, 10, 0.4, seed=4)
        assert subtract_matrices(a, b) == add_matrices(a, b.negate())

    def test_inputs_not_mutated(self, m1, m2):
        before_a, before_b = dict(m1.data), dict(m2.data)
        subtract_matrices(m1, m2)
        assert m1.data == before_a
        assert m2.data == before_b

    def test_verify_scipy(self):
        a, _ = random_matrix(8, 6, 0.5, seed=5)
        b, _ = random_matrix(8, 6, 0.5, seed=6)
        assert verify_subtraction_scipy(a, b, subtract_matrices(a, b))
        assert not verify_subtraction_scipy(a, b, add_matrices(a, b))
