"""
Unit tests for the Householder kernels
"""

import numpy as np
import pytest

from nla_svd.orthogonal_transforms.householder import (
    apply_row_reflector,
    column_reflector,
    hypot_norm,
    reflect_columns,
    row_reflector,
)


def reflection_matrix(v):
    """H = I - v v^T / v[0] for a stored reflection vector"""
    return np.eye(len(v)) - np.outer(v, v) / v[0]


class TestHypotNorm:

    def test_matches_norm(self, rng):
        x = rng.standard_normal(17)
        assert hypot_norm(x) == pytest.approx(np.linalg.norm(x), rel=1e-12)

    def test_keeps_dtype(self):
        x = np.array([3.0, 4.0], dtype=np.float32)
        nrm = hypot_norm(x)
        assert nrm.dtype == np.float32
        assert nrm == 5.0

    def test_no_overflow_in_single_precision(self):
        # squaring 3e30 overflows float32.
        x = np.array([3e30, 4e30], dtype=np.float32)
        assert np.isfinite(hypot_norm(x))
        assert hypot_norm(x) == pytest.approx(5e30, rel=1e-6)

    def test_empty_is_zero(self):
        assert hypot_norm(np.zeros(0)) == 0.0


class TestColumnReflector:

    def test_zeros_subdiagonal(self, rng):
        A = rng.standard_normal((6, 4))
        a1 = A[1:, 1].copy()
        pivot = column_reflector(A, 1)

        H = reflection_matrix(A[1:, 1])
        expected = np.zeros(5)
        expected[0] = pivot
        np.testing.assert_allclose(H @ a1, expected, atol=1e-12)
        assert abs(pivot) == pytest.approx(np.linalg.norm(a1))

    def test_reflection_is_orthogonal(self, rng):
        A = rng.standard_normal((5, 3))
        column_reflector(A, 0)
        H = reflection_matrix(A[:, 0])
        np.testing.assert_allclose(H @ H.T, np.eye(5), atol=1e-12)
        assert A[0, 0] >= 1.0

    def test_pivot_sign(self):
        A = np.array([[-3.0], [4.0]])
        # negative leading entry gives a positive pivot.
        assert column_reflector(A, 0) == pytest.approx(5.0)
        A = np.array([[3.0], [4.0]])
        assert column_reflector(A, 0) == pytest.approx(-5.0)

    def test_zero_column_untouched(self):
        A = np.zeros((4, 2))
        A[:, 1] = 1.0
        before = A.copy()
        assert column_reflector(A, 0) == 0.0
        np.testing.assert_array_equal(A, before)

    def test_reflect_columns_applies_h(self, rng):
        A = rng.standard_normal((6, 4))
        column_reflector(A, 0)
        block = A[:, 1:].copy()
        H = reflection_matrix(A[:, 0])

        reflect_columns(A, A[:, 0], slice(0, 6), slice(1, 4))
        np.testing.assert_allclose(A[:, 1:], H @ block, atol=1e-12)


class TestRowReflector:

    def test_zeros_row(self, rng):
        e = rng.standard_normal(6)
        row = e[2:].copy()
        pivot = row_reflector(e, 1)

        H = reflection_matrix(e[2:])
        expected = np.zeros(4)
        expected[0] = pivot
        np.testing.assert_allclose(H @ row, expected, atol=1e-12)

    def test_zero_row(self):
        e = np.array([7.0, 0.0, 0.0])
        assert row_reflector(e, 0) == 0.0
        np.testing.assert_array_equal(e, [7.0, 0.0, 0.0])

    def test_apply_row_reflector(self, rng):
        A = rng.standard_normal((5, 5))
        e = A[0].copy()
        e[0] = row_reflector(e, 0)
        sub = A[1:, 1:].copy()
        H = reflection_matrix(e[1:])

        work = np.zeros(5)
        apply_row_reflector(A, e, 0, work)
        np.testing.assert_allclose(A[1:, 1:], sub @ H, atol=1e-12)
        np.testing.assert_allclose(work[1:], sub @ e[1:], atol=1e-12)
