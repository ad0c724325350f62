"""Standard normal tail probabilities.

Numba-compatible, erfc based. Used by the rank-sum evaluator as a pure
function of the z-score.
"""

import math
from enum import IntEnum

from numba import njit

__all__ = [
    'Tail',
    'LOWER',
    'UPPER',
    'BOTH',
    'normal_cdf',
    'normal_sf',
    'normal_tails',
]


class Tail(IntEnum):
    """Tail selector for :func:`normal_tails`."""
    LOWER = 0
    UPPER = 1
    BOTH = 2


# Plain ints are frozen as compile-time constants inside njit code
LOWER = int(Tail.LOWER)
UPPER = int(Tail.UPPER)
BOTH = int(Tail.BOTH)


@njit(cache=True, inline='always')
def normal_cdf(z: float) -> float:
    """P[Z <= z]."""
    INV_SQRT2 = 0.7071067811865475
    return 0.5 * math.erfc(-z * INV_SQRT2)


@njit(cache=True, inline='always')
def normal_sf(z: float) -> float:
    """P[Z > z], computed directly for accuracy in the upper tail."""
    INV_SQRT2 = 0.7071067811865475
    return 0.5 * math.erfc(z * INV_SQRT2)


@njit(cache=True)
def normal_tails(z: float, tail: int):
    """Lower and upper tail probabilities of the standard normal.

    Args:
        z: z-score
        tail: LOWER, UPPER or BOTH

    Returns:
        (cum, ccum) with cum = P[Z <= z] and ccum = P[Z > z].
        Tails that were requested are evaluated with erfc directly; the
        other one is the complement ``1 - requested``.
    """
    if tail == LOWER:
        cum = normal_cdf(z)
        return cum, 1.0 - cum
    if tail == UPPER:
        ccum = normal_sf(z)
        return 1.0 - ccum, ccum
    return normal_cdf(z), normal_sf(z)
