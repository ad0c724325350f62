"""Named gene sets to row-index sets.

Gene sets usually arrive as feature labels (gene symbols); the kernels
want 0-based row indices of the expression matrix.
"""

from collections.abc import Mapping
from typing import Dict, Iterable, List, Tuple

import numpy as np

from biorank.optim import get_logger

__all__ = [
    'index_sets_from_names',
]


logger = get_logger('genesets')


def index_sets_from_names(
    features: Iterable,
    gene_sets: Mapping,
) -> Tuple[List, List[np.ndarray]]:
    """Map named gene sets onto row indices of ``features``.

    Labels missing from ``features`` are dropped; a label repeated inside one
    gene set is counted once. When ``features`` itself repeats a label, its
    first row is used.

    Args:
        features: row labels of the matrix, in row order
        gene_sets: mapping of set name -> iterable of feature labels

    Returns:
        (names, index_sets) in the insertion order of ``gene_sets``;
        every index set is a sorted int64 array (possibly empty)

    Example:
        >>> names, sets = index_sets_from_names(
        ...     ['A', 'B', 'C', 'D'], {'s1': ['B', 'D', 'X']})
        >>> names, sets[0]
        (['s1'], array([1, 3]))
    """
    lookup: Dict = {}
    for row, label in enumerate(features):
        lookup.setdefault(label, row)

    names = []
    index_sets = []
    for name, labels in gene_sets.items():
        rows = {lookup[label] for label in labels if label in lookup}
        index_sets.append(np.array(sorted(rows), dtype=np.int64))
        names.append(name)

        if not rows:
            logger.debug("gene set %r matches no features", name)

    return names, index_sets
