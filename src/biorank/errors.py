"""Exception hierarchy for biorank.

Every error derives from :class:`BioRankError` and from the builtin exception
that best describes it, so callers may catch either::

    try:
        wmw_test(index_sets, matrix, mode=9)
    except ValueError:
        ...

Errors are raised to the caller and never logged by the library.
"""

__all__ = [
    'BioRankError',
    'ConfigurationError',
    'InvalidInputError',
    'EmptyInputError',
    'DegenerateInputError',
    'IndexOutOfRangeError',
    'AllocationError',
]


class BioRankError(Exception):
    """Base class for all biorank errors."""


class ConfigurationError(BioRankError, ValueError):
    """Unrecognized output mode or invalid runtime option."""


class InvalidInputError(BioRankError, ValueError):
    """Input matrix or column has the wrong shape or contains NaN."""


class EmptyInputError(InvalidInputError):
    """Column or matrix without any rows."""


class DegenerateInputError(InvalidInputError):
    """Zero variance under the normal approximation.

    Raised when a group is empty (the index set covers none or all of the
    rows), when a column has a single row, or when every value of a column is
    tied.
    """


class IndexOutOfRangeError(BioRankError, IndexError):
    """Index set entry outside ``[0, n_rows)`` or not an integer."""


class AllocationError(BioRankError, MemoryError):
    """Working or output memory could not be allocated."""
