import numpy as np
import pytest


@pytest.fixture
def rng():
    """seeded generator, not conflicting with global randomness"""
    return np.random.default_rng(6643)


def bidiagonal_matrix(s, e, p=None):
    """dense p x p upper bidiagonal matrix, diagonal s, superdiagonal e"""
    if p is None:
        p = len(s)
    return np.diag(np.asarray(s[:p], dtype=float)) + np.diag(np.asarray(e[:p-1], dtype=float), 1)
