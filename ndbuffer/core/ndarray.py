"""
ndbuffer Core: NDArray
======================

Dense row-major array with explicit shape and multiplier (stride) bookkeeping
over a single flat Storage.
"""

from __future__ import annotations
import logging
import math
import numpy as np
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from .storage import DType, Storage, arange
from . import elementwise
from ..config import Config


logger = logging.getLogger(__name__)

Index = Union[int, Sequence[int]]


def _normalize_shape(shape: Tuple[Any, ...]) -> Tuple[int, ...]:
    # Accept both reshape(3, 4) and reshape((3, 4))
    if len(shape) == 1 and not isinstance(shape[0], (int, np.integer)):
        shape = tuple(shape[0])
    dims = tuple(int(s) for s in shape)
    for i, s in enumerate(dims):
        if s < 0:
            raise ValueError(f"Dimension {i} has negative size {s}")
    return dims


def compute_multipliers(shape: Tuple[int, ...]) -> Tuple[int, ...]:
    """
    Row-major strides for a shape.

    The last multiplier is 1 and each earlier one is the next multiplier
    times the next dimension. A rank-0 shape has no multipliers.
    """
    if len(shape) == 0:
        return ()
    multipliers = [1]
    for dim in reversed(shape[1:]):
        multipliers.append(multipliers[-1] * dim)
    return tuple(reversed(multipliers))


class NDArray:
    """
    Multi-dimensional array over a flat row-major buffer.

    The array owns three things: ``shape``, the derived ``multipliers`` and
    ``data``. After every public call ``len(data) == prod(shape)`` (the
    product of an empty shape is 1) and the multipliers match the shape.

    Example:
        >>> a = NDArray((3, 4), dtype=nb.int64).count()
        >>> a.get_unchecked((1, 3))
        7
        >>> a.unravel_index(11)
        (2, 3)
    """

    def __init__(self, shape: Sequence[int] = (1,), dtype: Optional[DType] = None):
        """
        Create an array of default-valued elements.

        Args:
            shape: Dimension sizes (default: a single element, shape (1,))
            dtype: Element type (default: Config().default_dtype)
        """
        if dtype is None:
            dtype = Config().default_dtype
        self._shape = _normalize_shape((shape,))
        self._multipliers = compute_multipliers(self._shape)
        self._data = Storage(math.prod(self._shape), dtype)

    @classmethod
    def from_raw(cls, raw: Tuple[int, int, Any], dtype: Optional[DType] = None) -> 'NDArray':
        """
        Build a (height, width) array from a builder's raw nested form.

        Args:
            raw: ``(width, height, rows)`` where ``rows`` holds ``height``
                sequences of ``width`` values
            dtype: Element type (default: dtype of the first row, if known)
        """
        width, height, rows = raw
        if dtype is None:
            dtype = getattr(rows[0], "dtype", None) if len(rows) else None
        out = cls((height, width), dtype=dtype)
        for r in range(min(height, len(rows))):
            row = rows[r]
            for c in range(min(width, len(row))):
                out._data[r * width + c] = row[c]
        return out

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> 'NDArray':
        arr = np.asarray(arr)
        out = cls(arr.shape, dtype=DType.from_numpy(arr.dtype))
        out._data = Storage(arr.size, out.dtype, arr.ravel())
        return out

    # =========================================================================
    # Shape bookkeeping
    # =========================================================================

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def multipliers(self) -> Tuple[int, ...]:
        return self._multipliers

    @property
    def dtype(self) -> DType:
        return self._data.dtype

    @property
    def data(self) -> Storage:
        return self._data

    def rank(self) -> int:
        return len(self._shape)

    def ndim(self) -> int:
        return self.rank()

    def len(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def dim(self, i: int) -> int:
        return self._shape[i]

    def reshape(self, *shape: int) -> 'NDArray':
        """
        Reinterpret the buffer under a new shape, in place.

        Data is left untouched; only shape and multipliers change.

        Raises:
            ValueError: If the new shape's element count differs from len()
        """
        dims = _normalize_shape(shape)
        size = math.prod(dims)
        if size != len(self._data):
            raise ValueError(
                f"Cannot reshape {self._shape} ({len(self._data)} elements) "
                f"to {dims} ({size} elements)"
            )
        logger.debug("Reshaping %s to %s", self._shape, dims)
        self._shape = dims
        self._multipliers = compute_multipliers(dims)
        return self

    def set_shape(self, *shape: int) -> 'NDArray':
        """
        Change the shape, resizing the buffer to match.

        Growth fills with the dtype's default value; shrinking truncates.
        """
        dims = _normalize_shape(shape)
        self._shape = dims
        self._multipliers = compute_multipliers(dims)
        return self.set_size(math.prod(dims))

    def set_size(self, size: int) -> 'NDArray':
        if len(self._data) != size:
            self._data.resize(size)
        return self

    # =========================================================================
    # Index conversion
    # =========================================================================

    def ravel_index(self, indices: Sequence[int]) -> int:
        """
        Flat offset of a multi-index: sum of ``indices[i] * multipliers[i]``.

        Coordinates are not checked against their dimensions unless
        ``Config().check_bounds`` is set, so an out-of-range coordinate can
        land on another cell.

        Raises:
            ValueError: If ``len(indices) != rank()``
            IndexError: If check_bounds is on and a coordinate is out of range
        """
        if len(indices) != len(self._shape):
            raise ValueError(
                f"Expected {len(self._shape)} indices for shape {self._shape}, got {len(indices)}"
            )
        if Config().check_bounds:
            for i, (index, dim) in enumerate(zip(indices, self._shape)):
                if index < 0 or index >= dim:
                    raise IndexError(f"Index {index} out of bounds for dimension {i} with size {dim}")
        return self._offset(indices)

    def _offset(self, indices: Sequence[int]) -> int:
        return sum(int(index) * stride for index, stride in zip(indices, self._multipliers))

    def unravel_index(self, index: int) -> Tuple[int, ...]:
        """Multi-index of a flat offset; inverse of ravel_index on 0..len()."""
        return tuple(
            (index // stride) % dim
            for stride, dim in zip(self._multipliers, self._shape)
        )

    # =========================================================================
    # Element access
    # =========================================================================

    def get(self, indices: Sequence[int], default: Any = None) -> Any:
        """
        Value at a multi-index, or ``default`` when the flat offset is
        past the end of the buffer.
        """
        index = self.ravel_index(indices)
        if 0 <= index < len(self._data):
            return self._data[index]
        return default

    def set(self, indices: Sequence[int], value: Any) -> bool:
        """Write a value at a multi-index; returns False if out of range."""
        index = self.ravel_index(indices)
        if 0 <= index < len(self._data):
            self._data[index] = value
            return True
        return False

    def get_unchecked(self, indices: Sequence[int]) -> Any:
        """
        Value at a multi-index with no validation at all.

        The caller guarantees every coordinate lies in ``0..shape[i]``.
        Anything else gives an undefined result.
        """
        return self._data.numpy()[self._offset(indices)]

    def set_unchecked(self, indices: Sequence[int], value: Any) -> None:
        """Write at a multi-index with no validation; see get_unchecked."""
        self._data.numpy()[self._offset(indices)] = value

    def _flat(self, key: Index) -> int:
        if isinstance(key, (int, np.integer)):
            index = int(key)
            if index < 0 or index >= len(self._data):
                raise IndexError(f"Index {index} out of range for array of length {len(self._data)}")
            return index
        index = self.ravel_index(key)
        if index < 0 or index >= len(self._data):
            raise IndexError(f"Index {tuple(key)} out of range for shape {self._shape}")
        return index

    def __getitem__(self, key: Index) -> Any:
        return self._data[self._flat(key)]

    def __setitem__(self, key: Index, value: Any):
        self._data[self._flat(key)] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    # =========================================================================
    # Bulk fills
    # =========================================================================

    def count(self) -> 'NDArray':
        """Fill with 0, 1, 2, ... in the array's element type."""
        self._data.numpy()[:] = arange(len(self._data), self.dtype)
        return self

    def zero(self) -> 'NDArray':
        self._data.fill(self.dtype.zero)
        return self

    def one(self) -> 'NDArray':
        self._data.fill(self.dtype.one)
        return self

    def string(self) -> 'NDArray':
        """Set every element to the empty string (string dtype only)."""
        self._data.fill(self.dtype.empty)
        return self

    # =========================================================================
    # Conversion
    # =========================================================================

    def numpy(self) -> np.ndarray:
        return self._data.numpy().copy().reshape(self._shape)

    def tolist(self) -> List[Any]:
        return self.numpy().tolist()

    def clone(self) -> 'NDArray':
        out = NDArray.__new__(NDArray)
        out._shape = self._shape
        out._multipliers = self._multipliers
        out._data = self._data.clone()
        return out

    def __repr__(self) -> str:
        data_str = np.array2string(self.numpy(), precision=4, suppress_small=True)
        return f"NDArray({data_str}, dtype={self.dtype!r})"


def _binary(op: elementwise.Op):
    def method(self: NDArray, other: NDArray) -> NDArray:
        if not isinstance(other, NDArray):
            return NotImplemented
        n = _overlap(self, other)
        out = NDArray(self._shape, dtype=self.dtype)
        out._data.numpy()[:n] = elementwise.combine(self._data, other._data, op, n)
        return out
    method.__name__ = f"__{op.name}__"
    method.__doc__ = f"Elementwise ``self {op.symbol} other`` over the overlapping prefix."
    return method


def _inplace(op: elementwise.Op):
    def method(self: NDArray, other: NDArray) -> NDArray:
        if not isinstance(other, NDArray):
            return NotImplemented
        n = _overlap(self, other)
        self._data.numpy()[:n] = elementwise.combine(self._data, other._data, op, n)
        return self
    method.__name__ = f"__i{op.name}__"
    return method


def _overlap(lhs: NDArray, rhs: NDArray) -> int:
    strict = Config().strict_shapes
    if strict and lhs.shape != rhs.shape:
        raise ValueError(f"Shape mismatch: {lhs.shape} vs {rhs.shape}")
    return elementwise.overlap(lhs.data, rhs.data, strict)


for _op in (elementwise.ADD, elementwise.SUB, elementwise.MUL, elementwise.DIV):
    setattr(NDArray, f"__{_op.name}__", _binary(_op))
    setattr(NDArray, f"__i{_op.name}__", _inplace(_op))
del _op
