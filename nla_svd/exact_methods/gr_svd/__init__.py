from .result import SvdResult
from .svd import (
    MAXITER,
    SvdCase,
    SvdConvergenceError,
    classify,
    converge,
    decompose,
    deflate,
    machine_constants,
    qr_step,
    split,
    svd,
    wilkinson_shift,
)
