"""biorank Kernel Module.

Numba-compiled kernels for the Wilcoxon-Mann-Whitney rank-sum test of
index sets (e.g. gene sets) against the columns of a dense matrix.

Design Pattern (Index Sets vs Complement):
    - index set j: rows forming group 1; all other rows form group 2
    - every column is ranked once and reused by all index sets
    - Output shape: (n_index_sets, n_cols)

Submodules:
    math: Standard normal tail probabilities
    modes: OutputMode enumeration
    rank: Average ranks and tie correction
    wmw: Rank-sum evaluation and the matrix-level test
"""

from . import math
from . import modes
from . import rank
from . import wmw

from .modes import OutputMode
from .rank import RankList, rank_column, tie_coefficient
from .wmw import IndexSets, pack_index_sets, rank_sum_statistic, wmw_test

__all__ = [
    'math',
    'modes',
    'rank',
    'wmw',
    'OutputMode',
    'RankList',
    'rank_column',
    'tie_coefficient',
    'IndexSets',
    'pack_index_sets',
    'rank_sum_statistic',
    'wmw_test',
]
