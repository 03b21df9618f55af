"""
nla_svd
=======

Singular value decomposition by Golub-Kahan bidiagonalization followed by
implicit shifted QR iterations, in single precision by default.

>>> import numpy as np, nla_svd
>>> res = nla_svd.decompose(np.diag([5.0, 1.0]))
>>> float(res.norm2()), float(res.cond())
(5.0, 5.0)
"""

import logging as _logging
from importlib.metadata import PackageNotFoundError, version as _pkg_version

from .exact_methods.gr_svd import (
    MAXITER,
    SvdCase,
    SvdConvergenceError,
    SvdResult,
    decompose,
    svd,
)
from .orthogonal_transforms.bidiagonalization import bidiagonalize

__all__ = [
    "decompose",
    "svd",
    "bidiagonalize",
    "SvdResult",
    "SvdCase",
    "SvdConvergenceError",
    "MAXITER",
]

try:
    __version__ = _pkg_version("nla-svd")
except PackageNotFoundError:  # running from a checkout
    __version__ = "0.0.0.dev0"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
