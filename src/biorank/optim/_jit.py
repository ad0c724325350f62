"""JIT Decorators for biorank Kernels.

This module provides JIT decorators that wrap Numba's @njit and keep
track of the signatures compiled for every kernel.

The main decorator @optimized_jit works like @njit but:
1. Compiles the function with Numba on first call (lazy, like @njit)
2. Records each newly compiled signature
3. Logs compilations to the ``biorank.optim`` logger at DEBUG level

Usage:
    from biorank.optim import optimized_jit

    @optimized_jit
    def column_sums(matrix):
        out = np.empty(matrix.shape[1])
        for i in range(matrix.shape[1]):
            out[i] = matrix[:, i].sum()
        return out

Options:
    @optimized_jit(fastmath=True, parallel=True, cache=True)
    def my_func(...):
        ...

Note:
    The wrapped object is a plain Python callable. Kernels that are called
    from other compiled code must use Numba's own @njit so that the
    nopython caller can see the dispatcher directly.
"""

from typing import Callable, Optional, Any, Dict, Union
from numba import njit
from numba.core.dispatcher import Dispatcher

from ._logging import get_logger


__all__ = [
    'optimized_jit',
    'fast_jit',
    'parallel_jit',
    'OptimizedDispatcher',
]


logger = get_logger('optim')


# =============================================================================
# Dispatcher Wrapper
# =============================================================================

class OptimizedDispatcher:
    """Wrapper around Numba Dispatcher that records compiled signatures.

    Attributes:
        _dispatcher: The underlying Numba Dispatcher
        _options: Numba options the dispatcher was created with
        _seen_signatures: Signatures already reported to the logger
    """

    def __init__(self, dispatcher: Dispatcher, options: Optional[Dict[str, Any]] = None):
        self._dispatcher = dispatcher
        self._options = dict(options or {})
        self._seen_signatures = set()

    def __call__(self, *args, **kwargs):
        result = self._dispatcher(*args, **kwargs)

        # Compilation only ever adds signatures
        if len(self._dispatcher.signatures) != len(self._seen_signatures):
            self._record_new_signatures()

        return result

    def _record_new_signatures(self):
        for sig in self._dispatcher.signatures:
            if sig not in self._seen_signatures:
                self._seen_signatures.add(sig)
                logger.debug(
                    "compiled %s%s (parallel=%s, fastmath=%s)",
                    self._dispatcher.__name__,
                    sig,
                    self._options.get('parallel', False),
                    self._options.get('fastmath', False),
                )

    # ==========================================================================
    # Dispatcher Interface Methods
    # ==========================================================================

    @property
    def signatures(self):
        """Get compiled signatures."""
        return self._dispatcher.signatures

    @property
    def options(self) -> Dict[str, Any]:
        """Numba options used to build the dispatcher."""
        return dict(self._options)

    def inspect_llvm(self, signature=None):
        """Inspect LLVM IR of one compiled signature (first one by default)."""
        if signature is None and self._dispatcher.signatures:
            signature = self._dispatcher.signatures[0]
        return self._dispatcher.inspect_llvm(signature)

    def inspect_asm(self, signature=None):
        """Inspect generated assembly."""
        return self._dispatcher.inspect_asm(signature)

    def inspect_types(self, file=None):
        """Inspect compiled types."""
        return self._dispatcher.inspect_types(file)

    @property
    def py_func(self):
        """Get the original Python function."""
        return self._dispatcher.py_func

    @property
    def __name__(self):
        return self._dispatcher.__name__

    @property
    def __doc__(self):
        return self._dispatcher.__doc__

    def __repr__(self):
        return f"<OptimizedDispatcher({self._dispatcher.__name__})>"

    # Forward attribute access to dispatcher
    def __getattr__(self, name):
        return getattr(self._dispatcher, name)


# =============================================================================
# Decorators
# =============================================================================

def optimized_jit(
    func: Optional[Callable] = None,
    *,
    nogil: bool = True,
    cache: bool = False,
    parallel: bool = False,
    fastmath: bool = False,
    locals: Optional[Dict] = None,
    boundscheck: bool = False,
    **numba_options
) -> Union[Callable, OptimizedDispatcher]:
    """JIT decorator returning an :class:`OptimizedDispatcher`.

    Args:
        func: Function to compile (when used without parentheses)

        # Standard Numba options:
        nogil: Release GIL during execution (default: True)
        cache: Cache compiled function to disk (default: False)
        parallel: Enable automatic parallelization (default: False)
        fastmath: Enable fast math optimizations (default: False)
        locals: Dictionary of local variable types
        boundscheck: Enable array bounds checking (default: False)
        **numba_options: Additional Numba options

    Returns:
        OptimizedDispatcher wrapping the compiled function

    Example:
        @optimized_jit
        def sum_array(arr):
            total = 0.0
            for i in range(len(arr)):
                total += arr[i]
            return total

        @optimized_jit(parallel=True)
        def column_ranks(matrix):
            ...
    """
    numba_opts = {
        'nogil': nogil,
        'cache': cache,
        'parallel': parallel,
        'fastmath': fastmath,
        'boundscheck': boundscheck,
        **numba_options
    }
    if locals is not None:
        numba_opts['locals'] = locals

    def decorator(fn: Callable) -> OptimizedDispatcher:
        dispatcher = njit(**numba_opts)(fn)
        return OptimizedDispatcher(dispatcher, numba_opts)

    # Handle both @optimized_jit and @optimized_jit()
    if func is not None:
        return decorator(func)
    return decorator


# =============================================================================
# Convenience Aliases
# =============================================================================

def fast_jit(func: Optional[Callable] = None, **kwargs) -> Union[Callable, OptimizedDispatcher]:
    """Shorthand for @optimized_jit(fastmath=True).

    Example:
        @fast_jit
        def my_func(arr):
            ...
    """
    kwargs.setdefault('fastmath', True)
    return optimized_jit(func, **kwargs)


def parallel_jit(func: Optional[Callable] = None, **kwargs) -> Union[Callable, OptimizedDispatcher]:
    """Shorthand for @optimized_jit(parallel=True, fastmath=True).

    Either default can be overridden, e.g. ``@parallel_jit(fastmath=False)``
    for kernels that must reproduce IEEE results exactly.
    """
    kwargs.setdefault('parallel', True)
    kwargs.setdefault('fastmath', True)
    return optimized_jit(func, **kwargs)
