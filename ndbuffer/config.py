"""Process-wide settings for ndbuffer arrays."""

from typing import Any, Optional

from .core.storage import DType, float64


class Config:
    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "Config":
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_initialized"):
            self._initialized = True  # Prevents reinitialization
            self._strict_shapes = False
            self._check_bounds = False
            self._default_dtype = float64

    @property
    def strict_shapes(self) -> bool:
        """
        When set, combining arrays of different shapes (or feeding a builder
        the wrong number of values) raises ValueError instead of truncating
        to the overlapping prefix.
        """
        return self._strict_shapes

    def set_strict_shapes(self, strict_shapes: bool) -> None:
        self._strict_shapes = bool(strict_shapes)

    @property
    def check_bounds(self) -> bool:
        """
        When set, every coordinate of a multi-index is validated against its
        own dimension, not only the resulting flat offset.
        """
        return self._check_bounds

    def set_check_bounds(self, check_bounds: bool) -> None:
        self._check_bounds = bool(check_bounds)

    @property
    def default_dtype(self) -> DType:
        return self._default_dtype

    def set_default_dtype(self, dtype: DType) -> None:
        if not isinstance(dtype, DType):
            raise TypeError(f"Expected a DType, got {type(dtype).__name__}")
        self._default_dtype = dtype


class Session:
    """
    Lightweight context manager to scope Config settings.

    Example:
        with Session(strict_shapes=True, check_bounds=True):
            ...
    Restores previous Config values on exit so tests/runs stay isolated.
    """

    def __init__(
        self,
        *,
        strict_shapes: Optional[bool] = None,
        check_bounds: Optional[bool] = None,
        default_dtype: Optional[DType] = None,
    ) -> None:
        self._cfg = Config()
        self._strict_shapes = strict_shapes
        self._check_bounds = check_bounds
        self._default_dtype = default_dtype
        self._prev: dict = {}

    def __enter__(self) -> Config:
        self._prev = {
            "strict_shapes": self._cfg.strict_shapes,
            "check_bounds": self._cfg.check_bounds,
            "default_dtype": self._cfg.default_dtype,
        }
        if self._strict_shapes is not None:
            self._cfg.set_strict_shapes(self._strict_shapes)
        if self._check_bounds is not None:
            self._cfg.set_check_bounds(self._check_bounds)
        if self._default_dtype is not None:
            self._cfg.set_default_dtype(self._default_dtype)
        return self._cfg

    def __exit__(self, exc_type, exc, tb) -> None:
        self._cfg.set_strict_shapes(self._prev["strict_shapes"])
        self._cfg.set_check_bounds(self._prev["check_bounds"])
        self._cfg.set_default_dtype(self._prev["default_dtype"])
