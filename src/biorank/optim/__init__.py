"""biorank JIT toolkit.

Thin layer over Numba used by every kernel in the package.

Quick Start:
    from biorank.optim import parallel_jit, enable_logging

    enable_logging()   # show kernel compilations on stderr

    @parallel_jit(fastmath=False)
    def column_means(matrix):
        out = np.empty(matrix.shape[1])
        for i in prange(matrix.shape[1]):
            out[i] = matrix[:, i].mean()
        return out

Available Components:

    JIT Decorators:
        - optimized_jit: @njit returning an OptimizedDispatcher
        - fast_jit: Shorthand for @optimized_jit(fastmath=True)
        - parallel_jit: Shorthand for @optimized_jit(parallel=True, fastmath=True)

    Logging:
        - get_logger(name): Child logger of the ``biorank`` namespace
        - enable_logging(level): Print biorank records to stderr
        - disable_logging(): Silence all biorank loggers
"""

from ._logging import (
    get_logger,
    enable_logging,
    disable_logging,
)

from ._jit import (
    optimized_jit,
    fast_jit,
    parallel_jit,
    OptimizedDispatcher,
)


__all__ = [
    # JIT Decorators
    'optimized_jit',
    'fast_jit',
    'parallel_jit',
    'OptimizedDispatcher',
    'njit',

    # Logging
    'get_logger',
    'enable_logging',
    'disable_logging',
]


def njit(*args, **kwargs):
    """Re-export of Numba's njit for convenience.

    Use this for helpers that are called from other compiled kernels:
        from biorank.optim import njit

        @njit(cache=True)
        def helper(arr):
            ...
    """
    from numba import njit as numba_njit
    return numba_njit(*args, **kwargs)
