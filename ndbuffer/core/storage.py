"""
ndbuffer Core: DType and Storage
================================

The foundation layer - element types and the raw flat buffer every array owns.
"""

from __future__ import annotations
import logging
import numpy as np
from typing import Any, Iterable, Iterator, Optional
from enum import Enum


logger = logging.getLogger(__name__)


class DType(Enum):
    """
    Element type of a buffer.

    Each member records the numpy storage type and the capabilities the
    element type offers: an additive identity (``zero``), a unit (``one``),
    an empty value (``empty``) and whether it supports arithmetic.
    """
    BOOL = ("bool", np.bool_, False)
    INT8 = ("int8", np.int8, True)
    INT16 = ("int16", np.int16, True)
    INT32 = ("int32", np.int32, True)
    INT64 = ("int64", np.int64, True)
    UINT8 = ("uint8", np.uint8, True)
    UINT16 = ("uint16", np.uint16, True)
    UINT32 = ("uint32", np.uint32, True)
    UINT64 = ("uint64", np.uint64, True)
    FLOAT32 = ("float32", np.float32, True)
    FLOAT64 = ("float64", np.float64, True)
    STRING = ("string", object, False)
    OBJECT = ("object", object, False)

    def __init__(self, name: str, numpy_dtype, arithmetic: bool):
        self._name = name
        self.numpy_dtype = numpy_dtype
        self.arithmetic = arithmetic

    def __repr__(self) -> str:
        return f"nb.{self._name}"

    @property
    def is_object(self) -> bool:
        return self.numpy_dtype is object

    @property
    def is_integer(self) -> bool:
        return not self.is_object and np.issubdtype(self.numpy_dtype, np.integer)

    @property
    def zero(self) -> Any:
        """Additive identity; raises TypeError for types without one."""
        if self.is_object:
            raise TypeError(f"{self!r} has no zero value")
        return self.numpy_dtype(0)

    @property
    def one(self) -> Any:
        """Unit value; raises TypeError for types without one."""
        if self.is_object:
            raise TypeError(f"{self!r} has no unit value")
        return self.numpy_dtype(1)

    @property
    def empty(self) -> str:
        if self is not DType.STRING:
            raise TypeError(f"{self!r} has no empty value")
        return ""

    @property
    def default(self) -> Any:
        """Value new slots are filled with when a buffer grows."""
        if self is DType.STRING:
            return ""
        if self is DType.OBJECT:
            return None
        return self.zero

    @classmethod
    def from_numpy(cls, numpy_dtype) -> 'DType':
        numpy_dtype = np.dtype(numpy_dtype)
        if numpy_dtype.kind in ("U", "S"):
            return cls.STRING
        for member in cls:
            if not member.is_object and np.dtype(member.numpy_dtype) == numpy_dtype:
                return member
        return cls.OBJECT


bool_ = DType.BOOL
int8 = DType.INT8
int16 = DType.INT16
int32 = DType.INT32
int64 = DType.INT64
uint8 = DType.UINT8
uint16 = DType.UINT16
uint32 = DType.UINT32
uint64 = DType.UINT64
float32 = DType.FLOAT32
float64 = DType.FLOAT64
string = DType.STRING
object_ = DType.OBJECT


def arange(size: int, dtype: DType) -> np.ndarray:
    """
    The sequence 0, 1, ..., size - 1 in ``dtype``.

    Raises:
        TypeError: If the dtype is not arithmetic
        OverflowError: If ``size - 1`` does not fit an integer dtype
    """
    if not dtype.arithmetic:
        raise TypeError(f"Ascending sequence requires an arithmetic dtype, got {dtype!r}")
    if dtype.is_integer and size > 0:
        limit = np.iinfo(dtype.numpy_dtype).max
        if size - 1 > limit:
            raise OverflowError(f"{size} elements overflow {dtype!r} (max {limit})")
    return np.arange(size, dtype=dtype.numpy_dtype)


def _allocate(size: int, dtype: DType) -> np.ndarray:
    if dtype.is_object:
        buf = np.empty(size, dtype=object)
        buf.fill(dtype.default)
        return buf
    return np.zeros(size, dtype=dtype.numpy_dtype)


class Storage:
    """Raw 1-D memory buffer backing array data."""

    def __init__(
        self,
        size: int,
        dtype: DType = float64,
        data: Optional[Iterable[Any]] = None
    ):
        if size < 0:
            raise ValueError(f"Storage size must be non-negative, got {size}")
        self.dtype = dtype
        self._data = _allocate(size, dtype)

        if data is not None:
            if dtype.is_object:
                if isinstance(data, np.ndarray):
                    data = data.ravel()
                # Element-wise so nested sequences are stored as single objects
                for i, value in zip(range(size), data):
                    self._data[i] = value
            else:
                flat = np.asarray(data).astype(dtype.numpy_dtype).ravel()
                n = min(size, len(flat))
                self._data[:n] = flat[:n]

    @property
    def size(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, idx: int) -> Any:
        return self._data[idx]

    def __setitem__(self, idx: int, value: Any):
        self._data[idx] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def resize(self, size: int) -> 'Storage':
        """
        Grow or truncate the buffer in place.

        New slots hold the dtype's default value (zero, "" or None).
        """
        old = len(self._data)
        if size == old:
            return self
        if size < 0:
            raise ValueError(f"Storage size must be non-negative, got {size}")

        if size < old:
            self._data = self._data[:size].copy()
        else:
            self._data = np.concatenate([self._data, _allocate(size - old, self.dtype)])
        logger.debug("Resized %r storage from %d to %d elements", self.dtype, old, size)
        return self

    def fill(self, value: Any) -> 'Storage':
        self._data.fill(value)
        return self

    def clone(self) -> 'Storage':
        out = Storage(0, self.dtype)
        out._data = self._data.copy()
        return out

    def numpy(self) -> np.ndarray:
        return self._data
