""" Golub-Kahan SVD implementation.  keyword: bidiagonalization, implicit shifted QR iterations, bulge chasing, deflation, splitting, wilkinson shift.  """

import enum
import logging

import numpy as np

from ...orthogonal_transforms.bidiagonalization import bidiagonalize
from ...orthogonal_transforms.givens import givens_rotation, rotate_columns, swap_columns
from .result import SvdResult

logger = logging.getLogger(__name__)

DTYPE = np.float32
EPS_EXPONENT = -52
TINY_EXPONENT = -966
MAXITER = 100


class SvdConvergenceError(np.linalg.LinAlgError):
    """more than max_iterations QR steps since the last singular value converged."""

    def __init__(self, p, iterations):
        super().__init__(
            f"SVD did not converge: {iterations} QR steps since the last "
            f"converged singular value, {p} singular values left")
        self.p = p
        self.iterations = iterations


class SvdCase(enum.IntEnum):
    """
    state of the bidiagonal matrix found by classify():

    DEFLATE: s[p-1] and e[k-1] are negligible, k < p.
    SPLIT: s[k] is negligible, k < p.
    QR_STEP: e[k-1] is negligible, k < p, s[k..p-1] are not (qr step).
    CONVERGED: e[p-2] is negligible.
    """
    DEFLATE = 1
    SPLIT = 2
    QR_STEP = 3
    CONVERGED = 4


def machine_constants(dtype):
    """
    eps and tiny for the negligibility tests, evaluated in dtype.
    2^-966 underflows to 0 in float32.
    """
    two = np.dtype(dtype).type(2.0)
    with np.errstate(under="ignore"):
        return two ** EPS_EXPONENT, two ** TINY_EXPONENT


def classify(s, e, p, eps, tiny):
    """
    inspect the active p * p block for negligible entries in s and e,
    from bottom to top. negligible entries are set to 0.

    Return:
    (case, k), k is the first row of the block the case works on.
    """
    k = p - 2
    while k >= 0:
        if abs(e[k]) <= tiny + eps * (abs(s[k]) + abs(s[k+1])):
            e[k] = 0.0
            break
        k -= 1

    if k == p - 2:
        return SvdCase.CONVERGED, k + 1

    ks = p - 1
    while ks > k:
        t = abs(e[ks]) + (abs(e[ks-1]) if ks != k + 1 else 0.0)
        if abs(s[ks]) <= tiny + eps * t:
            s[ks] = 0.0
            break
        ks -= 1

    if ks == k:
        return SvdCase.QR_STEP, k + 1
    if ks == p - 1:
        return SvdCase.DEFLATE, k + 1
    return SvdCase.SPLIT, ks + 1


def deflate(s, e, V, k, p):
    """
    s[p-1] is negligible: chase e[p-2] up to row k with rotations on the right.
    """
    f = e[p-2]
    e[p-2] = 0.0
    for j in range(p-2, k-1, -1):
        cs, sn, t = givens_rotation(s[j], f)
        s[j] = t
        if j != k:
            f = -sn * e[j-1]
            e[j-1] = cs * e[j-1]
        rotate_columns(V, cs, sn, j, p-1)


def split(s, e, U, k, p):
    """
    s[k-1] is negligible: chase e[k-1] down to row p-1 with rotations on the left.
    """
    f = e[k-1]
    e[k-1] = 0.0
    for j in range(k, p):
        cs, sn, t = givens_rotation(s[j], f)
        s[j] = t
        f = -sn * e[j]
        e[j] = cs * e[j]
        # a wide matrix has no left vector for the padding row.
        if j < U.shape[1]:
            rotate_columns(U, cs, sn, j, k-1)


def wilkinson_shift(s, e, k, p):
    """
    shift from the trailing 2 x 2 of B^T B for block k..p-1, computed on
    quantities scaled by their max to avoid overflow.
    """
    scale = max(abs(s[p-1]), abs(s[p-2]), abs(e[p-2]), abs(s[k]), abs(e[k]))
    sp = s[p-1] / scale
    spm1 = s[p-2] / scale
    epm1 = e[p-2] / scale
    sk = s[k] / scale
    ek = e[k] / scale

    b = ((spm1 + sp) * (spm1 - sp) + epm1 * epm1) / 2.0
    c = (sp * epm1) * (sp * epm1)
    shift = 0.0
    if b != 0.0 or c != 0.0:
        shift = np.sqrt(b * b + c)
        if b < 0.0:
            shift = -shift
        shift = c / (b + shift)

    # first column of B^T B - shift * I, scaled.
    f = (sk + sp) * (sk - sp) + shift
    g = sk * ek
    return f, g


def qr_step(s, e, U, V, k, p):
    """
    one implicit shifted QR step on block k..p-1: bulge chasing with
    alternating right (V) and left (U) givens rotations.
    """
    m = U.shape[0]
    f, g = wilkinson_shift(s, e, k, p)

    for j in range(k, p-1):
        cs, sn, t = givens_rotation(f, g)
        if j != k:
            e[j-1] = t
        f = cs * s[j] + sn * e[j]
        e[j] = cs * e[j] - sn * s[j]
        g = sn * s[j+1]
        s[j+1] = cs * s[j+1]
        rotate_columns(V, cs, sn, j, j+1)

        cs, sn, t = givens_rotation(f, g)
        s[j] = t
        f = cs * e[j] + sn * s[j+1]
        s[j+1] = -sn * e[j] + cs * s[j+1]
        g = sn * e[j+1]
        e[j+1] = cs * e[j+1]
        if j < m - 1:
            rotate_columns(U, cs, sn, j, j+1)

    e[p-2] = f


def converge(s, U, V, k, pp):
    """
    s[k] has converged: make it non-negative, then move it up past smaller
    neighbours (one bubble pass), keeping U and V columns in lockstep.

    Args:
    pp: index of the last singular value of the whole problem.
    """
    m = U.shape[0]
    n = V.shape[0]

    if s[k] <= 0.0:
        s[k] = -s[k] if s[k] < 0.0 else 0.0
        V[:, k] = -V[:, k]

    while k < pp:
        if s[k] >= s[k+1]:
            break
        s[k], s[k+1] = s[k+1], s[k]
        if k < n - 1:
            swap_columns(V, k, k+1)
        if k < m - 1:
            swap_columns(U, k, k+1)
        k += 1


def _empty_result(m, n, dtype, eps):
    U = np.zeros((m, min(m, n)), dtype=dtype)
    s = np.zeros(min(m+1, n), dtype=dtype)
    V = np.eye(n, dtype=dtype)
    return SvdResult(U, s, V, eps)


def decompose(A, *, dtype=DTYPE, max_iterations=None):
    """
    singular value decomposition A = U @ diag(s) @ V.T.

    Args:
    A: m * n array_like, m >= n is the supported regime. not modified.
    dtype: working precision, float32 by default.
    max_iterations: opt-in cap on QR steps since the last converged singular
    value, e.g. MAXITER. None (default) iterates until convergence.

    Return:
    SvdResult with U (m * min(m,n)), s (min(m+1, n), descending), V (n * n).

    Raises:
    ValueError: A is not 2D or dtype is not a floating type.
    SvdConvergenceError: max_iterations exceeded.
    """
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.floating):
        raise ValueError(f"dtype must be a floating point type, got {dtype}")

    A = np.asarray(A, dtype=dtype)
    if A.ndim != 2:
        raise ValueError(f"expected a 2D matrix, got {A.ndim} dimensions")
    if not np.all(np.isfinite(A)):
        raise np.linalg.LinAlgError("matrix contains infs or NaNs")

    m, n = A.shape
    eps, tiny = machine_constants(dtype)
    if m == 0 or n == 0:
        return _empty_result(m, n, dtype, eps)
    if m < n:
        logger.warning("wide %dx%d matrix, results may be inaccurate for m < n", m, n)

    U, s, e, V = bidiagonalize(A, dtype=dtype)

    # main iteration loop, p is the order of the active block.
    p = min(n, m+1)
    pp = p - 1
    iteration = 0
    total = 0
    while p > 0:
        case, k = classify(s, e, p, eps, tiny)

        if case is SvdCase.DEFLATE:
            deflate(s, e, V, k, p)
        elif case is SvdCase.SPLIT:
            split(s, e, U, k, p)
        elif case is SvdCase.QR_STEP:
            if max_iterations is not None and iteration >= max_iterations:
                raise SvdConvergenceError(p, iteration)
            qr_step(s, e, U, V, k, p)
            iteration += 1
            total += 1
        else:
            converge(s, U, V, k, pp)
            logger.debug("singular value %d converged after %d QR steps", p - 1, iteration)
            iteration = 0
            p -= 1

    logger.debug("SVD of %dx%d matrix done, %d QR steps", m, n, total)
    return SvdResult(U, s, V, eps, iterations=total)


svd = decompose


if __name__ == "__main__":
    rng = np.random.default_rng(0)

    # known spectrum with a tail of tiny singular values.
    U0, _ = np.linalg.qr(rng.standard_normal((8, 8)))
    V0, _ = np.linalg.qr(rng.standard_normal((6, 6)))
    s0 = np.array([5.5, 2.31, 3.25, 1e-3, 1e-5, 0.0])
    A = U0[:, :6] @ np.diag(s0) @ V0.T

    res = decompose(A)
    U, s, V = res
    Ahat = res.reconstruct()
    print("rel_recon =", np.linalg.norm(A - Ahat) / np.linalg.norm(A))
    print("orth U =", np.linalg.norm(U.T @ U - np.eye(6)))
    print("orth V =", np.linalg.norm(V.T @ V - np.eye(6)))
    print("s =", s, "rank =", res.rank(), "QR steps =", res.iterations)
    print("numpy s =", np.linalg.svd(A, compute_uv=False))
