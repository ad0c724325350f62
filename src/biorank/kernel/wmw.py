"""Wilcoxon-Mann-Whitney Rank-Sum Test for Index Sets.

Dense-matrix implementation: every index set (e.g. a gene set) is tested
against its complement in every column (e.g. a sample) of a
features x samples matrix.

Design:
    - index_sets: ragged row-index lists packed CSR-style (indptr, indices)
    - per column: rank once, tie-correct once, evaluate every index set
    - columns run in parallel (prange); each output cell is written once
    - Output shape: (n_index_sets, n_cols)

Normal approximation with tie correction and continuity correction.
For an index set of size n1 with rank sum R1 in a column of n rows:
    n2 = n - n1
    U = n1 * n2 + n1 * (n1 + 1) / 2 - R1
    mu = n1 * n2 / 2
    var = n1 * n2 * (n + 1) / 12 * tie_coef

Small U means the index set ranks high, so the "greater" p-value is the
lower tail of U.
"""

import math
from collections.abc import Mapping
from contextlib import contextmanager
from typing import NamedTuple, Optional

import numba
import numpy as np
from numba import njit, prange

from biorank.errors import (
    AllocationError,
    ConfigurationError,
    DegenerateInputError,
    EmptyInputError,
    IndexOutOfRangeError,
    InvalidInputError,
)
from biorank.optim import parallel_jit, get_logger
from .math import LOWER, UPPER, BOTH, normal_tails
from .modes import OutputMode
from .rank import RankList, average_ranks, tie_coefficient, tie_coefficient_kernel

__all__ = [
    'IndexSets',
    'pack_index_sets',
    'evaluate_rank_sum',
    'rank_sum_statistic',
    'wmw_test',
]


logger = get_logger('kernel.wmw')

# Mode values as plain ints for nopython code
_P_LEFT = int(OutputMode.P_LEFT)
_P_RIGHT = int(OutputMode.P_RIGHT)
_P_TWO_SIDED = int(OutputMode.P_TWO_SIDED)
_U = int(OutputMode.U)
_LOG_P_LEFT = int(OutputMode.LOG_P_LEFT)
_LOG_P_RIGHT = int(OutputMode.LOG_P_RIGHT)
_LOG_P_TWO_SIDED = int(OutputMode.LOG_P_TWO_SIDED)
_SIGNED_LOG_TWO_SIDED = int(OutputMode.SIGNED_LOG_TWO_SIDED)

# Per-cell status codes
STATUS_OK = 0
STATUS_DEGENERATE = 1
STATUS_BAD_MODE = 2


# =============================================================================
# Index Set Packing
# =============================================================================

class IndexSets(NamedTuple):
    """Ragged index sets in CSR layout.

    Index set ``j`` is ``indices[indptr[j]:indptr[j + 1]]``.
    """
    indptr: np.ndarray
    indices: np.ndarray

    @property
    def n_sets(self) -> int:
        return self.indptr.shape[0] - 1

    @property
    def sizes(self) -> np.ndarray:
        return np.diff(self.indptr)


def pack_index_sets(index_sets, n_rows: int) -> IndexSets:
    """Validate index sets and pack them into an :class:`IndexSets`.

    Args:
        index_sets: sequence of integer sequences, a mapping whose values are
            integer sequences (insertion order is kept), or an IndexSets
        n_rows: number of rows every index must be below

    Raises:
        IndexOutOfRangeError: non-integer entries or entries outside [0, n_rows)
    """
    if isinstance(index_sets, IndexSets):
        arrays = [
            index_sets.indices[index_sets.indptr[j]:index_sets.indptr[j + 1]]
            for j in range(index_sets.n_sets)
        ]
    elif isinstance(index_sets, Mapping):
        arrays = list(index_sets.values())
    else:
        arrays = list(index_sets)

    packed = []
    for j, index_set in enumerate(arrays):
        arr = np.asarray(index_set)
        if arr.ndim != 1:
            raise IndexOutOfRangeError(
                f"Index set {j} must be 1-D, got shape {arr.shape}"
            )
        if arr.size == 0:
            arr = np.empty(0, dtype=np.int64)
        elif arr.dtype.kind not in 'iu':
            raise IndexOutOfRangeError(
                f"Index set {j} must contain integer row indices, got dtype {arr.dtype}"
            )
        else:
            arr = arr.astype(np.int64, copy=False)
            lo, hi = arr.min(), arr.max()
            if lo < 0 or hi >= n_rows:
                bad = lo if lo < 0 else hi
                raise IndexOutOfRangeError(
                    f"Index set {j} contains row {bad}, outside [0, {n_rows})"
                )
        packed.append(arr)

    indptr = np.zeros(len(packed) + 1, dtype=np.int64)
    if packed:
        np.cumsum([arr.size for arr in packed], out=indptr[1:])
        indices = np.concatenate(packed)
    else:
        indices = np.empty(0, dtype=np.int64)

    return IndexSets(indptr, np.ascontiguousarray(indices, dtype=np.int64))


# =============================================================================
# Rank-Sum Evaluation
# =============================================================================

@njit(cache=True)
def evaluate_rank_sum(
    ranks: np.ndarray,
    indices: np.ndarray,
    start: int,
    stop: int,
    tie_coef: float,
    mode: int,
):
    """Evaluate one index set ``indices[start:stop]`` against one column.

    Args:
        ranks: average ranks of the column, indexed by row
        indices: packed row indices
        start, stop: bounds of the index set inside ``indices``
        tie_coef: tie-correction coefficient of the column
        mode: OutputMode value

    Returns:
        (value, status) with status STATUS_OK, STATUS_DEGENERATE (zero
        variance, value is NaN) or STATUS_BAD_MODE
    """
    n = ranks.shape[0]
    n1 = float(stop - start)
    n2 = float(n) - n1

    rank_sum = 0.0
    for k in range(start, stop):
        rank_sum += ranks[indices[k]]

    u = n1 * n2 + n1 * (n1 + 1.0) * 0.5 - rank_sum

    if mode == _U:
        return u, STATUS_OK

    mu = n1 * n2 * 0.5
    sigma2 = n1 * n2 * (n + 1.0) / 12.0 * tie_coef
    if n1 < 1.0 or n2 < 1.0 or not sigma2 > 0.0:
        return np.nan, STATUS_DEGENERATE
    sigma = math.sqrt(sigma2)

    if mode == _P_LEFT or mode == _LOG_P_LEFT:
        # greater
        z = (u + 0.5 - mu) / sigma
        plt, pgt = normal_tails(z, LOWER)
        if mode == _P_LEFT:
            return plt, STATUS_OK
        return abs(math.log10(plt)), STATUS_OK

    if mode == _P_RIGHT or mode == _LOG_P_RIGHT:
        # less; the log variant keeps its sign
        z = (u - 0.5 - mu) / sigma
        plt, pgt = normal_tails(z, UPPER)
        if mode == _P_RIGHT:
            return pgt, STATUS_OK
        return math.log10(pgt), STATUS_OK

    if mode == _P_TWO_SIDED or mode == _LOG_P_TWO_SIDED or mode == _SIGNED_LOG_TWO_SIDED:
        # U == mu takes the -0.5 branch
        cc = 0.5 if u > mu else -0.5
        z = (u - mu - cc) / sigma
        plt, pgt = normal_tails(z, BOTH)
        if mode == _SIGNED_LOG_TWO_SIDED:
            if plt <= pgt:
                return abs(math.log10(plt)), STATUS_OK
            return -abs(math.log10(pgt)), STATUS_OK
        p = 2.0 * min(plt, pgt)
        if mode == _P_TWO_SIDED:
            return p, STATUS_OK
        return abs(math.log10(p)), STATUS_OK

    return np.nan, STATUS_BAD_MODE


@parallel_jit(fastmath=False)
def _wmw_kernel(
    matrix: np.ndarray,
    indptr: np.ndarray,
    indices: np.ndarray,
    mode: int,
    out: np.ndarray,
    status: np.ndarray,
) -> None:
    """Fill ``out`` and ``status`` (both n_sets x n_cols) column by column."""
    n_rows = matrix.shape[0]
    n_cols = matrix.shape[1]
    n_sets = indptr.shape[0] - 1

    for i in prange(n_cols):
        ranks, order, tie_sizes = average_ranks(matrix[:, i])
        tie_coef = tie_coefficient_kernel(tie_sizes, n_rows)

        for j in range(n_sets):
            val, code = evaluate_rank_sum(
                ranks, indices, indptr[j], indptr[j + 1], tie_coef, mode
            )
            out[j, i] = val
            status[j, i] = code


# =============================================================================
# Python API
# =============================================================================

def _as_matrix(matrix) -> np.ndarray:
    data = np.asarray(matrix, dtype=np.float64)
    if data.ndim == 1:
        data = data[:, None]
    if data.ndim != 2:
        raise InvalidInputError(f"Expected a 2-D matrix, got {data.ndim} dimensions")
    if data.shape[0] == 0:
        raise EmptyInputError("Matrix has no rows")
    if np.isnan(data).any():
        raise InvalidInputError("Matrix contains NaN; missing values are not supported")
    return data


def _check_group_sizes(index_sets: IndexSets, n_rows: int) -> None:
    """Reject index sets that leave one group empty."""
    sizes = index_sets.sizes
    if sizes.size == 0:
        return
    if n_rows <= 1:
        raise DegenerateInputError(
            f"Normal approximation needs at least 2 rows, got {n_rows}"
        )
    bad = np.flatnonzero((sizes < 1) | (sizes >= n_rows))
    if bad.size:
        j = int(bad[0])
        raise DegenerateInputError(
            f"Index set {j} has {int(sizes[j])} of {n_rows} rows; both groups "
            f"must be non-empty for the normal approximation"
        )


@contextmanager
def _num_threads(n_threads: Optional[int]):
    if n_threads is None:
        yield
        return

    previous = numba.get_num_threads()
    try:
        numba.set_num_threads(n_threads)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid n_threads={n_threads!r}: {e}") from e
    logger.debug("using %d threads (was %d)", n_threads, previous)
    try:
        yield
    finally:
        numba.set_num_threads(previous)


def rank_sum_statistic(
    rank_list: RankList,
    index_set,
    tie_coef: Optional[float] = None,
    mode=OutputMode.P_LEFT,
) -> float:
    """Evaluate one index set against one ranked column.

    Args:
        rank_list: result of :func:`biorank.kernel.rank.rank_column`
        index_set: row indices forming the first group
        tie_coef: tie-correction coefficient; computed from ``rank_list``
            when omitted
        mode: OutputMode member, integer 0-7, name or alias

    Returns:
        The requested statistic as a float

    Raises:
        ConfigurationError: unknown mode
        IndexOutOfRangeError: index outside the column
        DegenerateInputError: zero variance in a normal-approximation mode
    """
    mode = OutputMode.coerce(mode)
    if tie_coef is None:
        tie_coef = tie_coefficient(rank_list)

    packed = pack_index_sets([index_set], rank_list.n)
    val, code = evaluate_rank_sum(
        rank_list.ranks, packed.indices, 0, packed.indices.shape[0],
        float(tie_coef), int(mode),
    )

    if code == STATUS_DEGENERATE:
        raise DegenerateInputError(
            f"Zero variance for an index set of {packed.indices.shape[0]} rows in a "
            f"column of {rank_list.n} rows (tie coefficient {tie_coef})"
        )
    if code == STATUS_BAD_MODE:
        raise ConfigurationError(f"Unrecognized output mode: {mode!r}")
    return val


def wmw_test(
    index_sets,
    matrix,
    mode=OutputMode.P_LEFT,
    n_threads: Optional[int] = None,
) -> np.ndarray:
    """Rank-sum test of every index set against every column of ``matrix``.

    Args:
        index_sets: sequence (or mapping) of row-index sequences
        matrix: n_rows x n_cols real matrix; a 1-D array is one column
        mode: OutputMode member, integer 0-7, name or alias
            (default: P_LEFT, the "greater" p-value)
        n_threads: Numba threads to use for this call (default: current setting)

    Returns:
        float64 array of shape (n_index_sets, n_cols); ``out[j, i]`` is the
        result for index set ``j`` in column ``i``

    Raises:
        ConfigurationError: unknown mode or invalid n_threads
        InvalidInputError: NaN values or wrong dimensionality
        EmptyInputError: matrix without rows
        IndexOutOfRangeError: index outside [0, n_rows)
        DegenerateInputError: empty group or all-tied column in a
            normal-approximation mode
        AllocationError: output or working memory unavailable

    Example:
        >>> matrix = np.arange(1.0, 11.0)[:, None]
        >>> wmw_test([[0, 1, 2]], matrix, mode=OutputMode.U)
        array([[21.]])
    """
    mode = OutputMode.coerce(mode)

    data = _as_matrix(matrix)
    n_rows, n_cols = data.shape
    packed = pack_index_sets(index_sets, n_rows)

    if mode.uses_normal_approximation:
        _check_group_sizes(packed, n_rows)

    try:
        data = np.asfortranarray(data)
        out = np.empty((packed.n_sets, n_cols), dtype=np.float64)
        status = np.zeros((packed.n_sets, n_cols), dtype=np.int8)
    except MemoryError as e:
        raise AllocationError(
            f"Cannot allocate a {packed.n_sets} x {n_cols} result grid"
        ) from e

    logger.debug(
        "wmw_test: %d index sets x %d columns (%d rows), mode=%s",
        packed.n_sets, n_cols, n_rows, mode.name,
    )

    with _num_threads(n_threads):
        try:
            _wmw_kernel(data, packed.indptr, packed.indices, int(mode), out, status)
        except MemoryError as e:
            raise AllocationError("Cannot allocate per-column rank buffers") from e

    if status.any():
        j, i = (int(x) for x in np.argwhere(status != STATUS_OK)[0])
        if status[j, i] == STATUS_BAD_MODE:
            raise ConfigurationError(f"Unrecognized output mode: {mode!r}")
        raise DegenerateInputError(
            f"Column {i} has zero variance (all {n_rows} values tied); "
            f"index set {j} cannot be tested with mode {mode.name}"
        )

    return out
