"""
Elementwise combine routines shared by NDArray and DArray.

Every operator is a single entry in ``OPS``; arrays build their dunder
methods from these entries instead of spelling each one out.
"""

from __future__ import annotations
import logging
import operator
import numpy as np
from dataclasses import dataclass
from typing import Callable, Optional

from .storage import Storage


logger = logging.getLogger(__name__)


def _trunc_divide(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Integer division rounding toward zero."""
    q = np.floor_divide(a, b)
    r = np.remainder(a, b)
    fix = (r != 0) & ((a < 0) != (b < 0))
    return q + fix.astype(q.dtype)


@dataclass(frozen=True)
class Op:
    """
    One elementwise operator.

    Attributes:
        name: Short name, also the stem of the dunder methods (``add`` ->
            ``__add__``, ``__iadd__``)
        symbol: Python operator symbol, used in error messages
        python: Python-level operator, applied per element for object buffers
        numeric: Vectorized numpy implementation for float buffers
        integer: Vectorized numpy implementation for integer/bool buffers
            (defaults to ``numeric``)
    """
    name: str
    symbol: str
    python: Callable
    numeric: Callable
    integer: Optional[Callable] = None

    def kernel(self, integer: bool) -> Callable:
        if integer and self.integer is not None:
            return self.integer
        return self.numeric


ADD = Op("add", "+", operator.add, np.add)
SUB = Op("sub", "-", operator.sub, np.subtract)
MUL = Op("mul", "*", operator.mul, np.multiply)
DIV = Op("truediv", "/", operator.truediv, np.true_divide, _trunc_divide)
REM = Op("mod", "%", operator.mod, np.fmod)
AND = Op("and", "&", operator.and_, np.bitwise_and)
OR = Op("or", "|", operator.or_, np.bitwise_or)
XOR = Op("xor", "^", operator.xor, np.bitwise_xor)
SHL = Op("lshift", "<<", operator.lshift, np.left_shift)
SHR = Op("rshift", ">>", operator.rshift, np.right_shift)

NEG = Op("neg", "-", operator.neg, np.negative)
INVERT = Op("invert", "~", operator.invert, np.invert)

BINARY_OPS = (ADD, SUB, MUL, DIV, REM, AND, OR, XOR, SHL, SHR)
UNARY_OPS = (NEG, INVERT)
OPS = {op.name: op for op in BINARY_OPS + UNARY_OPS}


def overlap(lhs: Storage, rhs: Storage, strict: bool, what: str = "length") -> int:
    """
    Number of leading elements two buffers share.

    Mismatched lengths are truncated to the shorter one, or rejected with
    ValueError when ``strict`` is set.
    """
    n_lhs, n_rhs = len(lhs), len(rhs)
    if n_lhs != n_rhs:
        if strict:
            raise ValueError(f"Operand {what} mismatch: {n_lhs} vs {n_rhs}")
        logger.warning(
            "Operand %s mismatch (%d vs %d), combining the first %d elements",
            what, n_lhs, n_rhs, min(n_lhs, n_rhs),
        )
    return min(n_lhs, n_rhs)


def combine(lhs: Storage, rhs: Storage, op: Op, n: int) -> np.ndarray:
    """
    Apply a binary operator to the first ``n`` elements of two buffers.

    The right operand is converted to the left operand's element type, so
    the result always has the left dtype. Integer division or remainder by
    zero raises FloatingPointError; operators the element type does not
    support raise TypeError.
    """
    dtype = lhs.dtype
    a = lhs.numpy()[:n]
    b = rhs.numpy()[:n]

    if dtype.is_object or rhs.dtype.is_object:
        out = np.empty(n, dtype=object)
        for i in range(n):
            out[i] = op.python(a[i], b[i])
        return out

    b = b.astype(dtype.numpy_dtype, copy=False)
    integer = not np.issubdtype(dtype.numpy_dtype, np.floating)
    if integer:
        with np.errstate(divide="raise"):
            result = op.kernel(True)(a, b)
    else:
        result = op.kernel(False)(a, b)
    return result.astype(dtype.numpy_dtype, copy=False)


def apply(src: Storage, op: Op) -> np.ndarray:
    """Apply a unary operator to every element of a buffer."""
    data = src.numpy()
    if src.dtype.is_object:
        out = np.empty(len(data), dtype=object)
        for i, value in enumerate(data):
            out[i] = op.python(value)
        return out
    return op.kernel(src.dtype.is_integer)(data).astype(src.dtype.numpy_dtype, copy=False)
