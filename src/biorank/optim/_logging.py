"""Logging setup for biorank.

All library loggers live under the ``biorank`` namespace. The package
installs a ``NullHandler`` so nothing is printed unless the application
configures logging or calls :func:`enable_logging`.
"""

import logging
from typing import Optional


__all__ = [
    'get_logger',
    'enable_logging',
    'disable_logging',
]


ROOT_LOGGER_NAME = 'biorank'

_root_logger = logging.getLogger(ROOT_LOGGER_NAME)
_root_logger.addHandler(logging.NullHandler())

_stream_handler: Optional[logging.Handler] = None


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the ``biorank`` namespace.

    Args:
        name: Dotted suffix, e.g. ``'optim'`` or ``'kernel.wmw'``
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def enable_logging(level: int = logging.DEBUG) -> None:
    """Print biorank log records to stderr at ``level`` or above."""
    global _stream_handler

    if _stream_handler is None:
        _stream_handler = logging.StreamHandler()
        _stream_handler.setFormatter(
            logging.Formatter('[%(name)s] %(levelname)s: %(message)s')
        )
        _root_logger.addHandler(_stream_handler)
    _stream_handler.setLevel(level)
    _root_logger.setLevel(level)


def disable_logging() -> None:
    """Silence every biorank logger, including child loggers."""
    global _stream_handler

    if _stream_handler is not None:
        _root_logger.removeHandler(_stream_handler)
        _stream_handler = None
    _root_logger.setLevel(logging.CRITICAL + 1)
