"""Output modes of the rank-sum test.

Let ``f(x) = |log10(x)|``. The eight modes are::

    0 = p(left)         4 = f(p(left))
    1 = p(right)        5 = log10(p(right))   (signed, no absolute value)
    2 = p(two.sided)    6 = f(p(two.sided))
    3 = U               7 = f(p(left)) if p(left) <= p(right) else -f(p(right))

"left" is the "greater" alternative (the index set ranks higher than its
complement), "right" is the "less" alternative.
"""

import numbers
from enum import IntEnum

from biorank.errors import ConfigurationError

__all__ = [
    'OutputMode',
]


class OutputMode(IntEnum):
    """Closed set of values :func:`biorank.kernel.wmw.wmw_test` can return."""

    P_LEFT = 0
    P_RIGHT = 1
    P_TWO_SIDED = 2
    U = 3
    LOG_P_LEFT = 4
    LOG_P_RIGHT = 5
    LOG_P_TWO_SIDED = 6
    SIGNED_LOG_TWO_SIDED = 7

    @property
    def alias(self) -> str:
        """R-style name of the mode, e.g. ``'p.greater'``."""
        return _ALIASES[self]

    @property
    def uses_normal_approximation(self) -> bool:
        return self is not OutputMode.U

    @property
    def family(self) -> str:
        """``'greater'``, ``'less'``, ``'two.sided'`` or ``'U'``."""
        return _FAMILIES[self]

    @classmethod
    def coerce(cls, value) -> 'OutputMode':
        """Convert a member, an integer 0-7, a name or an alias to a mode.

        Raises:
            ConfigurationError: for anything outside the closed set
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, bool):
            raise ConfigurationError(f"Unrecognized output mode: {value!r}")

        if isinstance(value, numbers.Integral):
            try:
                return cls(int(value))
            except ValueError:
                raise ConfigurationError(
                    f"Unrecognized output mode: {value!r}. "
                    f"Should be an integer in [0, {len(cls) - 1}]"
                ) from None

        if isinstance(value, str):
            key = value.strip()
            by_alias = _BY_ALIAS.get(key)
            if by_alias is not None:
                return by_alias
            try:
                return cls[key.upper().replace('-', '_').replace('.', '_')]
            except KeyError:
                pass

        raise ConfigurationError(
            f"Unrecognized output mode: {value!r}. "
            f"Valid names: {', '.join(m.name for m in cls)}"
        )


_ALIASES = {
    OutputMode.P_LEFT: 'p.greater',
    OutputMode.P_RIGHT: 'p.less',
    OutputMode.P_TWO_SIDED: 'p.two.sided',
    OutputMode.U: 'U',
    OutputMode.LOG_P_LEFT: 'abs.log10.p.greater',
    OutputMode.LOG_P_RIGHT: 'log10.p.less',
    OutputMode.LOG_P_TWO_SIDED: 'abs.log10.p.two.sided',
    OutputMode.SIGNED_LOG_TWO_SIDED: 'Q',
}

_BY_ALIAS = {alias: mode for mode, alias in _ALIASES.items()}

_FAMILIES = {
    OutputMode.P_LEFT: 'greater',
    OutputMode.LOG_P_LEFT: 'greater',
    OutputMode.P_RIGHT: 'less',
    OutputMode.LOG_P_RIGHT: 'less',
    OutputMode.P_TWO_SIDED: 'two.sided',
    OutputMode.LOG_P_TWO_SIDED: 'two.sided',
    OutputMode.SIGNED_LOG_TWO_SIDED: 'two.sided',
    OutputMode.U: 'U',
}
