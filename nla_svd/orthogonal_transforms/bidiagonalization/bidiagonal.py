import logging

import numpy as np

from ..householder import (
    apply_row_reflector,
    column_reflector,
    reflect_columns,
    row_reflector,
)

logger = logging.getLogger(__name__)


def reduce_to_bidiagonal(A):
    """
    Golub-Kahan reduction of A (m * n) to upper bidiagonal form, in place.
    ========================================

    the diagonal goes to s, the superdiagonal to e. U and V only hold the
    reflection vectors afterwards (scratch phase), generate_u / generate_v
    turn them into the orthogonal factors.

    Params: A (m * n), working copy, destroyed.

    Returns:
    U (m * min(m,n)), s (min(m+1, n)), e (n), V (n * n), nct, nrt
    """
    m, n = A.shape
    dtype = A.dtype
    nu = min(m, n)

    s = np.zeros(min(m+1, n), dtype=dtype)
    e = np.zeros(n, dtype=dtype)
    work = np.zeros(m, dtype=dtype)
    U = np.zeros((m, nu), dtype=dtype)
    V = np.zeros((n, n), dtype=dtype)

    # number of column / row reflections.
    nct = min(m-1, n)
    nrt = max(0, min(n-2, m))

    for k in range(max(nct, nrt)):
        # left reflection, zeros column k below the diagonal.
        if k < nct:
            s[k] = column_reflector(A, k)
            if s[k] != 0.0:
                reflect_columns(A, A[k:, k], slice(k, m), slice(k+1, n))

        # row k goes to e for the right reflection below.
        e[k+1:] = A[k, k+1:]

        if k < nct:
            U[k:, k] = A[k:, k]

        # right reflection, zeros row k right of the superdiagonal.
        if k < nrt:
            e[k] = row_reflector(e, k)
            if k+1 < m and e[k] != 0.0:
                apply_row_reflector(A, e, k, work)
            V[k+1:, k] = e[k+1:]

    # set up the final bidiagonal matrix of order p.
    p = min(n, m+1)
    if nct < n:
        s[nct] = A[nct, nct]
    if m < p:
        s[p-1] = 0.0
    if nrt+1 < p:
        e[nrt] = A[nrt, p-1]
    e[p-1] = 0.0

    return U, s, e, V, nct, nrt


def generate_u(U, s, nct):
    """
    overwrite the stored left reflections in U with the explicit factor
    H_0 @ H_1 @ ... @ H_{nct-1} @ I, updated from backwards.
    """
    m, nu = U.shape

    U[:, nct:] = 0.0
    for j in range(nct, nu):
        U[j, j] = 1.0

    for k in range(nct-1, -1, -1):
        if s[k] != 0.0:
            reflect_columns(U, U[k:, k], slice(k, m), slice(k+1, nu))
            U[k:, k] = -U[k:, k]
            U[k, k] += 1.0
            U[:k, k] = 0.0
        else:
            U[:, k] = 0.0
            U[k, k] = 1.0
    return U


def generate_v(V, e, nrt):
    """
    same as generate_u for the right reflections, which act on rows k+1.. only.
    """
    n = V.shape[0]
    for k in range(n-1, -1, -1):
        if k < nrt and e[k] != 0.0:
            reflect_columns(V, V[k+1:, k], slice(k+1, n), slice(k+1, n))
        V[:, k] = 0.0
        V[k, k] = 1.0
    return V


def bidiagonalize(A, dtype=np.float32):
    """
    Bidiagonalize matrix A using Householder reflections.
    ========================================

    A = U @ B @ V.T, B upper bidiagonal with diagonal s and superdiagonal e
    (e[i] sits at B[i, i+1]). A itself is not modified.

    Params: A (m * n), dtype: working precision.

    Returns:
    U (m * min(m,n)), s (min(m+1, n)), e (n), V (n * n)
    """
    A = np.array(A, dtype=dtype)
    if A.ndim != 2 or A.size == 0:
        raise ValueError(f"expected a non-empty 2D matrix, got shape {A.shape}")

    U, s, e, V, nct, nrt = reduce_to_bidiagonal(A)
    logger.debug("reduced %dx%d matrix to bidiagonal form (nct=%d, nrt=%d)",
                 A.shape[0], A.shape[1], nct, nrt)

    U = generate_u(U, s, nct)
    V = generate_v(V, e, nrt)
    return U, s, e, V
