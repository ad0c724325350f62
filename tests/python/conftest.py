"""Pytest configuration for biorank tests."""

import sys
import os

# Add src to path so biorank package can be imported
_src = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', 'src'))
if _src not in sys.path:
    sys.path.insert(0, _src)

import pytest
import numpy as np

# =============================================================================
# Check available components
# =============================================================================

NUMBA_AVAILABLE = False
SCIPY_AVAILABLE = False

try:
    import numba
    NUMBA_AVAILABLE = True
except ImportError:
    NUMBA_AVAILABLE = False

try:
    import scipy.stats
    SCIPY_AVAILABLE = True
except ImportError:
    SCIPY_AVAILABLE = False

if NUMBA_AVAILABLE:
    from biorank.optim import disable_logging
    disable_logging()


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    config.addinivalue_line("markers", "numba: tests requiring Numba")
    config.addinivalue_line("markers", "slow: slow tests")


# =============================================================================
# Fixtures - Arrays
# =============================================================================

@pytest.fixture
def arr():
    """Random float64 array (1000 elements)."""
    np.random.seed(42)
    return np.random.rand(1000)


@pytest.fixture
def tied_arr():
    """Integer-valued float64 array with many ties (500 elements)."""
    np.random.seed(42)
    return np.random.randint(0, 20, size=500).astype(np.float64)


@pytest.fixture
def ten_column():
    """The column 1..10 without ties."""
    return np.arange(1.0, 11.0)


# =============================================================================
# Fixtures - Expression Matrices and Gene Sets
# =============================================================================

@pytest.fixture
def expression_matrix():
    """Genes x samples matrix (300 genes, 12 samples), continuous values."""
    np.random.seed(42)
    return np.random.lognormal(mean=1.0, sigma=1.0, size=(300, 12))


@pytest.fixture
def count_matrix():
    """Genes x samples matrix of small counts (heavy ties, 200 x 8)."""
    np.random.seed(7)
    return np.random.poisson(2.0, size=(200, 8)).astype(np.float64)


@pytest.fixture
def gene_sets():
    """Five index sets of different sizes over 300 genes."""
    np.random.seed(3)
    return [
        np.arange(0, 20),
        np.sort(np.random.choice(300, 50, replace=False)),
        np.array([5, 150, 299]),
        np.arange(100, 250),
        np.array([42]),
    ]


# =============================================================================
# Skip Decorators
# =============================================================================

requires_numba = pytest.mark.skipif(
    not NUMBA_AVAILABLE,
    reason="Numba not available"
)

requires_scipy = pytest.mark.skipif(
    not SCIPY_AVAILABLE,
    reason="scipy not available"
)
