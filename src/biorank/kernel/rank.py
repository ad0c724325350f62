"""Tie-aware ranking of one column.

Average ranks (``scipy.stats.rankdata(method='average')`` semantics) and the
tie-correction coefficient used to deflate the variance of the rank-sum
statistic.

Design:
    - average_ranks: njit core, stable ascending sort, one pass over tie groups
    - tie_coefficient_kernel: njit core of the tie correction
    - rank_column / tie_coefficient: Python entry points with validation

Tie correction (t_i = tie group sizes, n = column length):
    coef = 1 - sum_i t_i/n * (t_i+1)/(n+1) * (t_i-1)/(n-1)
         = 1 - sum_i (t_i^3 - t_i) / (n^3 - n)
"""

from typing import NamedTuple, Optional

import numpy as np
from numba import njit

from biorank.errors import EmptyInputError, InvalidInputError

__all__ = [
    'RankList',
    'average_ranks',
    'tie_coefficient_kernel',
    'rank_column',
    'tie_coefficient',
]


class RankList(NamedTuple):
    """Ranked view of one column. Arrays are read-only.

    Attributes:
        ranks: Average rank of every row, indexed by original row (1-based ranks)
        order: Row indices in stable ascending order of value
        tie_sizes: Sizes of the maximal tie groups, in sorted order
    """
    ranks: np.ndarray
    order: np.ndarray
    tie_sizes: np.ndarray

    @property
    def n(self) -> int:
        return self.ranks.shape[0]

    @property
    def has_ties(self) -> bool:
        return self.tie_sizes.shape[0] != self.ranks.shape[0]


# =============================================================================
# Kernels
# =============================================================================

@njit(cache=True)
def average_ranks(values: np.ndarray):
    """Rank ``values`` ascending, tied values sharing their mean position.

    Args:
        values: 1-D float64 array, not modified

    Returns:
        (ranks, order, tie_sizes)
    """
    n = values.shape[0]
    order = np.argsort(values, kind='mergesort')
    ranks = np.empty(n, dtype=np.float64)
    tie_sizes = np.empty(n, dtype=np.int64)

    n_groups = 0
    start = 0
    while start < n:
        v = values[order[start]]
        stop = start + 1
        while stop < n and values[order[stop]] == v:
            stop += 1

        # Ordinal positions start+1 .. stop
        avg_rank = 0.5 * float(start + 1 + stop)
        for k in range(start, stop):
            ranks[order[k]] = avg_rank

        tie_sizes[n_groups] = stop - start
        n_groups += 1
        start = stop

    return ranks, order, tie_sizes[:n_groups].copy()


@njit(cache=True)
def tie_coefficient_kernel(tie_sizes: np.ndarray, n: int) -> float:
    """Variance deflation factor for a column with the given tie groups.

    Exactly 1.0 when every group has size 1 or when ``n <= 1``.
    """
    n_groups = tie_sizes.shape[0]
    if n_groups == n or n <= 1:
        return 1.0

    nf = float(n)
    total = 0.0
    for i in range(n_groups):
        t = float(tie_sizes[i])
        total += t / nf * (t + 1.0) / (nf + 1.0) * (t - 1.0) / (nf - 1.0)

    return 1.0 - total


# =============================================================================
# Python API
# =============================================================================

def _as_column(values) -> np.ndarray:
    column = np.asarray(values, dtype=np.float64)
    if column.ndim != 1:
        raise InvalidInputError(f"Expected a 1-D column, got shape {column.shape}")
    if column.shape[0] == 0:
        raise EmptyInputError("Cannot rank an empty column")
    if np.isnan(column).any():
        raise InvalidInputError("Column contains NaN; missing values are not supported")
    return column


def rank_column(values) -> RankList:
    """Build the :class:`RankList` of one column.

    Args:
        values: 1-D sequence of real values (length n >= 1)

    Returns:
        RankList with ``ranks.sum() == n * (n + 1) / 2``

    Raises:
        EmptyInputError: n == 0
        InvalidInputError: not 1-D or contains NaN

    Example:
        >>> rank_column([5.0, 5.0, 5.0, 1.0, 2.0]).ranks
        array([4., 4., 4., 1., 2.])
    """
    column = _as_column(values)
    ranks, order, tie_sizes = average_ranks(column)
    for arr in (ranks, order, tie_sizes):
        arr.setflags(write=False)
    return RankList(ranks, order, tie_sizes)


def tie_coefficient(rank_list_or_sizes, n: Optional[int] = None) -> float:
    """Tie-correction coefficient in [0, 1].

    Args:
        rank_list_or_sizes: a :class:`RankList`, or an array of tie group sizes
        n: column length when tie group sizes are given (default: their sum)

    Returns:
        1.0 without ties; 0.0 when every value of the column is tied
    """
    if isinstance(rank_list_or_sizes, RankList):
        sizes = rank_list_or_sizes.tie_sizes
        n = rank_list_or_sizes.n
    else:
        sizes = np.asarray(rank_list_or_sizes, dtype=np.int64)
        if n is None:
            n = int(sizes.sum())

    if sizes.ndim != 1 or np.any(sizes < 1):
        raise InvalidInputError("Tie group sizes must be a 1-D array of positive integers")
    if int(sizes.sum()) != n:
        raise InvalidInputError(
            f"Tie group sizes sum to {int(sizes.sum())}, expected n = {n}"
        )

    return tie_coefficient_kernel(sizes, int(n))
