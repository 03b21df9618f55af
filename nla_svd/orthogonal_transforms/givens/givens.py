"""
Givens rotations shared by the diagonalization kernels.
"""

import numpy as np


def givens_rotation(f, g):
    """
    rotation such that [[c, s],[-s, c]] @ [f, g]^T = [r, 0]^T, r = hypot(f, g).
    a zero vector gets the identity rotation instead of 0/0.
    """
    r = np.hypot(f, g)
    if r == 0.0:
        return r.dtype.type(1.0), r.dtype.type(0.0), r
    return f / r, g / r, r


def rotate_columns(M, c, s, j, k):
    """
    M[:, j], M[:, k] <- c*M[:, j] + s*M[:, k], -s*M[:, j] + c*M[:, k]
    """
    mj = M[:, j].copy()
    mk = M[:, k].copy()

    M[:, j] = c*mj + s*mk
    M[:, k] = -s*mj + c*mk


def swap_columns(M, j, k):
    M[:, [j, k]] = M[:, [k, j]]
