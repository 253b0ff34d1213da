"""Flat vector with the full elementwise operator set and no shape metadata."""

from __future__ import annotations
import numpy as np
from typing import Any, Iterable, Iterator, List, Optional

from .storage import DType, Storage
from . import elementwise
from ..config import Config


class DArray:
    """
    Owned flat buffer of values.

    Rank is implicit through nesting: a DArray of DArrays (``object`` dtype)
    models a matrix, and every operator recurses into the inner arrays.

    Binary operators combine the overlapping prefix of both operands, so the
    result is as long as the shorter one.

    Example:
        >>> a = DArray.from_values([1, 2, 3], dtype=nb.int64)
        >>> (a + a).tolist()
        [2, 4, 6]
    """

    def __init__(self, size: int = 0, dtype: Optional[DType] = None):
        if dtype is None:
            dtype = Config().default_dtype
        self._storage = Storage(size, dtype)

    @classmethod
    def from_values(cls, values: Iterable[Any], dtype: Optional[DType] = None) -> 'DArray':
        values = list(values)
        if dtype is None:
            if values and all(isinstance(v, DArray) for v in values):
                dtype = DType.OBJECT
            else:
                dtype = Config().default_dtype
        out = cls(0, dtype)
        out._storage = Storage(len(values), dtype, values)
        return out

    @classmethod
    def _wrap(cls, data: np.ndarray, dtype: DType) -> 'DArray':
        out = cls(0, dtype)
        out._storage._data = data
        return out

    @property
    def dtype(self) -> DType:
        return self._storage.dtype

    @property
    def storage(self) -> Storage:
        return self._storage

    def len(self) -> int:
        return len(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def __getitem__(self, idx: int) -> Any:
        return self._storage[idx]

    def __setitem__(self, idx: int, value: Any):
        self._storage[idx] = value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._storage)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DArray):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(bool(a == b) for a, b in zip(self, other))

    __hash__ = None

    def clone(self) -> 'DArray':
        out = DArray(0, self.dtype)
        out._storage = self._storage.clone()
        if self.dtype.is_object:
            # Deep copy nested arrays so the clone owns them
            for i, value in enumerate(out._storage):
                if isinstance(value, DArray):
                    out._storage[i] = value.clone()
        return out

    def numpy(self) -> np.ndarray:
        return self._storage.numpy()

    def tolist(self) -> List[Any]:
        return [v.tolist() if isinstance(v, (DArray, np.generic)) else v for v in self._storage]

    def __repr__(self) -> str:
        return f"DArray({self.tolist()!r}, dtype={self.dtype!r})"


def _binary(op: elementwise.Op):
    def method(self: DArray, other: DArray) -> DArray:
        if not isinstance(other, DArray):
            return NotImplemented
        n = elementwise.overlap(self._storage, other._storage, Config().strict_shapes)
        return DArray._wrap(elementwise.combine(self._storage, other._storage, op, n), self.dtype)
    method.__name__ = f"__{op.name}__"
    method.__doc__ = f"Elementwise ``self {op.symbol} other`` over the overlapping prefix."
    return method


def _inplace(op: elementwise.Op):
    def method(self: DArray, other: DArray) -> DArray:
        if not isinstance(other, DArray):
            return NotImplemented
        n = elementwise.overlap(self._storage, other._storage, Config().strict_shapes)
        self._storage.numpy()[:n] = elementwise.combine(self._storage, other._storage, op, n)
        return self
    method.__name__ = f"__i{op.name}__"
    return method


def _unary(op: elementwise.Op):
    def method(self: DArray) -> DArray:
        return DArray._wrap(elementwise.apply(self._storage, op), self.dtype)
    method.__name__ = f"__{op.name}__"
    method.__doc__ = f"Elementwise ``{op.symbol}self``."
    return method


for _op in elementwise.BINARY_OPS:
    setattr(DArray, f"__{_op.name}__", _binary(_op))
    setattr(DArray, f"__i{_op.name}__", _inplace(_op))
for _op in elementwise.UNARY_OPS:
    setattr(DArray, f"__{_op.name}__", _unary(_op))
del _op
