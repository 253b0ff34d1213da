"""Tests for NDArrayBuilder."""

import logging

import pytest
import ndbuffer as nb
from ndbuffer import DArray, NDArrayBuilder, Session


class TestBuildRaw:
    """Tests for the nested raw layout."""

    def test_defaults(self):
        """A fresh builder lays out a single 1x1 row."""
        builder = NDArrayBuilder(dtype=nb.int64)
        assert builder.width == 1
        assert builder.height == 1
        assert len(builder) == 1

        width, height, rows = builder.build_raw()
        assert (width, height) == (1, 1)
        assert rows.tolist() == [[0]]

    def test_explicit_values(self):
        """Row r, column c holds r * width + c."""
        builder = NDArrayBuilder(dtype=nb.int64).size(4, 3).values(range(12))
        width, height, rows = builder.build_raw()

        assert (width, height) == (4, 3)
        assert len(rows) == 3
        assert isinstance(rows[0], DArray)
        for r in range(3):
            assert len(rows[r]) == 4
            for c in range(4):
                assert rows[r][c] == r * 4 + c

    def test_default_sequence(self):
        """Without values the rows hold the count() sequence."""
        _, _, rows = NDArrayBuilder(dtype=nb.uint32).size(4, 3).build_raw()
        assert rows.tolist() == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9, 10, 11]]

    def test_size_returns_builder(self):
        """size() chains and updates len()."""
        builder = NDArrayBuilder()
        assert builder.size(2, 5) is builder
        assert builder.len() == 10

    def test_negative_size(self):
        """Negative dimensions are rejected."""
        with pytest.raises(ValueError):
            NDArrayBuilder().size(-1, 2)

    def test_too_many_values(self, caplog):
        """Surplus values are dropped with a warning."""
        builder = NDArrayBuilder(dtype=nb.int64).size(2, 2).values([1, 2, 3, 4, 5, 6])
        with caplog.at_level(logging.WARNING, logger="ndbuffer"):
            _, _, rows = builder.build_raw()
        assert rows.tolist() == [[1, 2], [3, 4]]
        assert "6 values" in caplog.text

    def test_too_few_values(self):
        """Missing values leave default-filled slots."""
        builder = NDArrayBuilder(dtype=nb.int64).size(3, 2).values([7, 8, 9, 10])
        _, _, rows = builder.build_raw()
        assert rows.tolist() == [[7, 8, 9], [10, 0, 0]]

    def test_strict_value_count(self):
        """Strict mode rejects a wrong value count."""
        builder = NDArrayBuilder(dtype=nb.int64).size(2, 2).values([1, 2, 3])
        with Session(strict_shapes=True):
            with pytest.raises(ValueError):
                builder.build_raw()

    def test_zero_width(self):
        """Zero-width rows are empty."""
        _, _, rows = NDArrayBuilder(dtype=nb.int64).size(0, 2).build_raw()
        assert rows.tolist() == [[], []]

    def test_string_values(self):
        """Explicit values work for non-arithmetic types."""
        builder = NDArrayBuilder(dtype=nb.string).size(2, 1).values(["a", "b"])
        _, _, rows = builder.build_raw()
        assert rows.tolist() == [["a", "b"]]

    def test_string_without_values(self):
        """The default sequence needs an arithmetic dtype."""
        with pytest.raises(TypeError):
            NDArrayBuilder(dtype=nb.string).size(2, 2).build_raw()

    def test_default_sequence_overflow(self):
        """The default sequence must fit the element type."""
        with pytest.raises(OverflowError):
            NDArrayBuilder(dtype=nb.uint8).size(20, 20).build_raw()

    def test_default_sequence_at_type_limit(self):
        """A 16x16 uint8 layout ends exactly at 255."""
        _, _, rows = NDArrayBuilder(dtype=nb.uint8).size(16, 16).build_raw()
        assert rows[15][15] == 255


class TestBuild:
    """Tests for building an NDArray."""

    def test_build(self):
        """build() gives a (height, width) array."""
        array = NDArrayBuilder(dtype=nb.int64).size(4, 3).build()
        assert array.shape == (3, 4)
        assert array.dtype is nb.int64
        assert array.get_unchecked((2, 1)) == 9
        assert array.unravel_index(9) == (2, 1)

    def test_build_with_values(self):
        """Explicit values land row-major."""
        array = NDArrayBuilder(dtype=nb.float32).size(2, 2).values([0.5, 1.5, 2.5, 3.5]).build()
        assert array.tolist() == [[0.5, 1.5], [2.5, 3.5]]

    def test_build_uses_config_dtype(self):
        """Without a dtype the builder follows Config."""
        with Session(default_dtype=nb.int16):
            array = NDArrayBuilder().size(2, 2).build()
        assert array.dtype is nb.int16
        assert array.tolist() == [[0, 1], [2, 3]]
