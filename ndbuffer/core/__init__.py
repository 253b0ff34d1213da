"""Core storage, shaped array and vector infrastructure for ndbuffer."""

from .storage import (
    DType,
    Storage,
)
from .ndarray import NDArray, compute_multipliers
from .darray import DArray
from . import elementwise

__all__ = [
    'DType',
    'Storage',
    'NDArray',
    'DArray',
    'compute_multipliers',
    'elementwise',
]
