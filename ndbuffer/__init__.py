"""
ndbuffer: Shaped Arrays over Flat Buffers
=========================================

ndbuffer is a small dense-array library. An NDArray owns a flat row-major
buffer plus the shape and stride bookkeeping that maps multi-indices onto it.

Example:
    >>> import ndbuffer as nb
    >>> a = nb.count(3, 4, dtype=nb.int64)
    >>> a.get_unchecked((2, 3))
    11
    >>> a.unravel_index(7)
    (1, 3)
    >>> (a + a)[1, 3]
    14
"""

__version__ = "0.1.0"

# Low-level core
from .core import (
    DType,
    Storage,
    NDArray,
    DArray,
    compute_multipliers,
)
from .core.storage import (
    bool_,
    int8,
    int16,
    int32,
    int64,
    uint8,
    uint16,
    uint32,
    uint64,
    float32,
    float64,
    string,
    object_,
)

from .builder import NDArrayBuilder
from .config import Config, Session
from .log import setup_logging

import numpy as np
from typing import Any, Optional


def zeros(*shape: int, dtype: Optional[DType] = None) -> NDArray:
    """
    Create an array filled with the dtype's zero value.

    Example:
        >>> z = nb.zeros(2, 3)  # Shape (2, 3)
    """
    return NDArray(shape, dtype=dtype).zero()


def ones(*shape: int, dtype: Optional[DType] = None) -> NDArray:
    """Create an array filled with the dtype's unit value."""
    return NDArray(shape, dtype=dtype).one()


def count(*shape: int, dtype: Optional[DType] = None) -> NDArray:
    """
    Create an array holding 0, 1, 2, ... in row-major order.

    Example:
        >>> nb.count(2, 2, dtype=nb.int32).tolist()
        [[0, 1], [2, 3]]
    """
    return NDArray(shape, dtype=dtype).count()


def strings(*shape: int) -> NDArray:
    """Create a string array with every element empty."""
    return NDArray(shape, dtype=string).string()


def array(data: Any, dtype: Optional[DType] = None) -> NDArray:
    """
    Create an array from nested sequences or a numpy array.

    Args:
        data: Nested lists/tuples or numpy array
        dtype: Element type (default: inferred from the data)
    """
    arr = np.asarray(data)
    if dtype is not None and not dtype.is_object:
        arr = arr.astype(dtype.numpy_dtype)
    out = NDArray.from_numpy(arr)
    if dtype is not None and dtype is not out.dtype:
        out._data = Storage(len(out), dtype, arr.ravel())
    return out


def from_numpy(arr: np.ndarray) -> NDArray:
    return NDArray.from_numpy(arr)


__all__ = [
    # Version
    "__version__",

    # Main classes
    "NDArray",
    "DArray",
    "NDArrayBuilder",

    # Factory functions
    "zeros",
    "ones",
    "count",
    "strings",
    "array",
    "from_numpy",

    # Configuration and logging
    "Config",
    "Session",
    "setup_logging",

    # Core types (advanced)
    "DType",
    "Storage",
    "compute_multipliers",
    "bool_",
    "int8",
    "int16",
    "int32",
    "int64",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "float32",
    "float64",
    "string",
    "object_",
]
