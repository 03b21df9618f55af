"""
read-only container for the factors computed by decompose().
"""

import numpy as np


class SvdResult:
    """
    A = U @ diag(s) @ V.T

    U: m * min(m,n) with orthonormal columns, V: n * n orthogonal,
    s: min(m+1, n) non-negative singular values in descending order.

    unpacks as (U, s[:min(m,n)], V).
    """

    def __init__(self, U, s, V, eps, iterations=0):
        self._U = U
        self._V = V
        self._s = s
        # s is handed out without copying, so freeze it.
        self._s.flags.writeable = False
        self._eps = eps
        self.iterations = iterations

    @property
    def shape(self):
        return self._U.shape[0], self._V.shape[0]

    @property
    def dtype(self):
        return self._s.dtype

    def u(self):
        """left singular vectors, a fresh copy on each call."""
        return self._U.copy()

    def v(self):
        """right singular vectors, a fresh copy on each call."""
        return self._V.copy()

    def singular_values(self):
        """the internal singular value array, read-only, not a copy."""
        return self._s

    def s(self):
        """n * n diagonal matrix of singular values."""
        n = self.shape[1]
        S = np.zeros((n, n), dtype=self.dtype)
        k = min(n, self._s.size)
        S[np.arange(k), np.arange(k)] = self._s[:k]
        return S

    def norm2(self):
        """two norm, max(s)."""
        if self._s.size == 0:
            return self.dtype.type(0.0)
        return self._s[0]

    def cond(self):
        """
        two norm condition number, max(s) / min(s).
        inf (or nan for the zero matrix) when the smallest singular value is 0.
        """
        nu = min(self.shape)
        if nu == 0:
            return self.dtype.type(np.nan)
        with np.errstate(divide="ignore", invalid="ignore"):
            return self._s[0] / self._s[nu-1]

    def rank(self):
        """effective numerical rank, number of s > max(m, n) * s[0] * eps."""
        if self._s.size == 0:
            return 0
        tol = max(self.shape) * self._s[0] * self._eps
        return int(np.count_nonzero(self._s > tol))

    def reconstruct(self):
        nu = min(self.shape)
        return (self._U[:, :nu] * self._s[:nu]) @ self._V[:, :nu].T

    def __iter__(self):
        nu = min(self.shape)
        return iter((self.u(), self._s[:nu], self.v()))

    def __repr__(self):
        m, n = self.shape
        return f"SvdResult(shape=({m}, {n}), dtype={self.dtype}, rank={self.rank()})"
