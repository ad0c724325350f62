"""biorank: Wilcoxon-Mann-Whitney rank-sum tests for gene sets.

Quick Start:
    import numpy as np
    from biorank import wmw_test, OutputMode

    expr = np.random.rand(2000, 40)          # genes x samples
    gene_sets = {'set_a': [0, 5, 17], 'set_b': np.arange(100, 160)}

    p = wmw_test(gene_sets, expr, mode=OutputMode.P_TWO_SIDED)
    p.shape                                   # (2, 40)
"""

__version__ = '0.1.0'

from .errors import (
    BioRankError,
    ConfigurationError,
    InvalidInputError,
    EmptyInputError,
    DegenerateInputError,
    IndexOutOfRangeError,
    AllocationError,
)
from .kernel import (
    OutputMode,
    RankList,
    IndexSets,
    rank_column,
    tie_coefficient,
    pack_index_sets,
    rank_sum_statistic,
    wmw_test,
)
from .genesets import index_sets_from_names

__all__ = [
    '__version__',

    # Errors
    'BioRankError',
    'ConfigurationError',
    'InvalidInputError',
    'EmptyInputError',
    'DegenerateInputError',
    'IndexOutOfRangeError',
    'AllocationError',

    # Test
    'OutputMode',
    'RankList',
    'IndexSets',
    'rank_column',
    'tie_coefficient',
    'pack_index_sets',
    'rank_sum_statistic',
    'wmw_test',
    'index_sets_from_names',
]
