"""Mathematical and Statistical Kernels.

Numba-compatible distribution functions used by the rank-sum kernels.
All functions can be called from Python or from nopython code.

Submodules:
    stats: Standard normal tails (normal_cdf, normal_sf, normal_tails)
"""

from ._stats import (
    Tail,
    LOWER,
    UPPER,
    BOTH,
    normal_cdf,
    normal_sf,
    normal_tails,
)

__all__ = [
    'Tail',
    'LOWER',
    'UPPER',
    'BOTH',
    'normal_cdf',
    'normal_sf',
    'normal_tails',
]
