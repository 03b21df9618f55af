"""
Householder reflections for Golub-Kahan bidiagonalization.

reflection vectors are stored in place, LINPACK style: the column (or row) is
divided by its signed norm and 1 is added to the leading entry, so the
leading entry of a stored vector v is always >= 1 and the reflection is
H = I - v v^T / v[0].
"""

import numpy as np


def hypot_norm(x):
    """
    2-norm of vector x by repeated hypot, never squaring, so no intermediate
    overflow/underflow. result has the dtype of x.
    """
    nrm = x.dtype.type(0.0)
    for xi in x:
        nrm = np.hypot(nrm, xi)
    return nrm


def column_reflector(A, k):
    """
    build the reflection that zeros A[k+1:, k] and store it in A[k:, k].

    Return:
    the negated signed norm of the column, which is the k-th diagonal entry
    of the bidiagonal matrix. 0 (column left untouched) if the column is zero.
    """
    nrm = hypot_norm(A[k:, k])
    if nrm != 0.0:
        if A[k, k] < 0.0:
            nrm = -nrm
        A[k:, k] /= nrm
        A[k, k] += 1.0
    return -nrm


def row_reflector(e, k):
    """
    same as column_reflector for the k-th row, which lives in e[k+1:].
    the caller stores the returned pivot in e[k].
    """
    nrm = hypot_norm(e[k+1:])
    if nrm != 0.0:
        if e[k+1] < 0.0:
            nrm = -nrm
        e[k+1:] /= nrm
        e[k+1] += 1.0
    return -nrm


def reflect_columns(M, v, rows, cols):
    """
    apply the stored reflection v to the block M[rows, cols], one inner product
    and one rank-1 update for the whole block.

    Args:
    v: stored reflection vector, len(v) == number of rows in the block.
    rows, cols: slices selecting the block, modified in place.
    """
    block = M[rows, cols]
    t = -(v @ block) / v[0]
    block += v[:, np.newaxis] * t  # update using broadcast.


def apply_row_reflector(A, e, k, work):
    """
    apply the k-th row reflection (stored in e[k+1:]) to rows k+1.. of A.
    work is the m-length scratch vector, only work[k+1:] is touched.
    """
    work[k+1:] = A[k+1:, k+1:] @ e[k+1:]
    t = -e[k+1:] / e[k+1]
    A[k+1:, k+1:] += work[k+1:, np.newaxis] * t
