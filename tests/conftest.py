"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure local package is imported before any installed version
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import ndbuffer as nb  # noqa: E402


@pytest.fixture(autouse=True)
def default_config():
    """Reset Config to its defaults around every test."""
    cfg = nb.Config()
    cfg.set_strict_shapes(False)
    cfg.set_check_bounds(False)
    cfg.set_default_dtype(nb.float64)
    yield cfg
    cfg.set_strict_shapes(False)
    cfg.set_check_bounds(False)
    cfg.set_default_dtype(nb.float64)


@pytest.fixture
def counted():
    """A (3, 4) int64 array holding 0..11."""
    return nb.NDArray((3, 4), dtype=nb.int64).count()


@pytest.fixture(params=[(1,), (5,), (3, 4), (2, 3, 4), (4, 1, 3, 2)])
def shape(request):
    """Parametrizes over a spread of shapes and ranks."""
    return request.param
