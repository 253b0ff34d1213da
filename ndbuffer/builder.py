"""Builder for the nested row-major raw form consumed by NDArray.from_raw."""

from __future__ import annotations
import logging
from typing import Any, Iterable, Optional, Tuple

from .core.storage import DType, arange
from .core.darray import DArray
from .core.ndarray import NDArray
from .config import Config


logger = logging.getLogger(__name__)


class NDArrayBuilder:
    """
    Assembles a ``height`` x ``width`` nested DArray, then optionally an NDArray.

    Without explicit values the rows are filled with the ascending sequence
    0, 1, 2, ... (the same values ``NDArray.count()`` produces).

    Example:
        >>> width, height, rows = NDArrayBuilder(dtype=nb.int64).size(4, 3).build_raw()
        >>> rows[2][1]
        9
    """

    def __init__(self, dtype: Optional[DType] = None):
        if dtype is None:
            dtype = Config().default_dtype
        self.dtype = dtype
        self.width = 1
        self.height = 1
        self._values: Optional[list] = None

    def __len__(self) -> int:
        return self.width * self.height

    def len(self) -> int:
        return len(self)

    def size(self, width: int, height: int) -> 'NDArrayBuilder':
        """Set the target layout: ``height`` rows of ``width`` elements."""
        if width < 0 or height < 0:
            raise ValueError(f"Builder size must be non-negative, got {width}x{height}")
        self.width = width
        self.height = height
        return self

    def values(self, values: Iterable[Any]) -> 'NDArrayBuilder':
        """Supply explicit row-major values."""
        self._values = list(values)
        return self

    def _sequence(self) -> list:
        if self._values is not None:
            return self._values
        return list(arange(len(self), self.dtype))

    def build_raw(self) -> Tuple[int, int, DArray]:
        """
        Lay the values out row-major into ``height`` rows of ``width``.

        Returns:
            ``(width, height, rows)`` where ``rows`` is a DArray of DArrays

        Raises:
            ValueError: If Config().strict_shapes is set and the number of
                explicit values differs from ``width * height``
        """
        values = self._sequence()
        total = len(self)
        if len(values) != total:
            if Config().strict_shapes:
                raise ValueError(
                    f"Builder got {len(values)} values for a {self.width}x{self.height} layout"
                )
            logger.warning(
                "Builder got %d values for a %dx%d layout, filling %d",
                len(values), self.width, self.height, min(len(values), total),
            )

        rows = DArray(self.height, DType.OBJECT)
        for r in range(self.height):
            rows[r] = DArray(self.width, self.dtype)
        for i in range(min(len(values), total)):
            r, c = divmod(i, self.width)
            rows[r][c] = values[i]
        return self.width, self.height, rows

    def build(self) -> NDArray:
        """Build a ``(height, width)`` NDArray from the raw layout."""
        return NDArray.from_raw(self.build_raw(), dtype=self.dtype)
