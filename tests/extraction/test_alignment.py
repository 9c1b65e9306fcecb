"""Tests for aligning result rows with expected column roles."""

from itertools import permutations

import pytest

from feature_xray.core.exceptions import ColumnAlignmentError
from feature_xray.core.models import ColumnMeta, ColumnSource, DataType
from feature_xray.extraction.alignment import align, index_of

DAY = ColumnMeta(name="day", base_type=DataType.DATE, source=ColumnSource.BREAKOUT)
TOTAL = ColumnMeta(name="total", base_type=DataType.DOUBLE, source=ColumnSource.AGGREGATION)
COUNT = ColumnMeta(name="count", base_type=DataType.BIGINT, source=ColumnSource.AGGREGATION)


class TestIndexOf:
    def test_first_match(self):
        assert index_of(lambda x: x > 1, [0, 2, 3]) == 1

    def test_no_match(self):
        assert index_of(lambda x: x > 5, [0, 2, 3]) is None


class TestAlign:
    """Tests for align()."""

    def test_identity_when_already_aligned(self):
        """Rows are returned as-is when the first columns match."""
        rows = [("2024-01-01", 1.0, 3), ("2024-01-02", 2.0, 4)]

        result = align([DAY, TOTAL], [DAY, TOTAL, COUNT], rows)

        assert result is rows

    def test_reorders_swapped_columns(self):
        rows = [(1.0, "2024-01-01"), (2.0, "2024-01-02")]

        result = list(align([DAY, TOTAL], [TOTAL, DAY], rows))

        assert result == [("2024-01-01", 1.0), ("2024-01-02", 2.0)]

    @pytest.mark.parametrize("cols", list(permutations([DAY, TOTAL, COUNT])))
    def test_any_permutation(self, cols):
        """Aligned rows hold the values found at the matching original positions."""
        values = {DAY: "d", TOTAL: 1.5, COUNT: 7}
        rows = [tuple(values[c] for c in cols)]

        result = list(align([DAY, TOTAL], cols, rows))

        assert [tuple(row[:2]) for row in result] == [("d", 1.5)]

    def test_first_occurrence_wins(self):
        rows = [(1.0, "a", 2.0)]

        result = list(align([DAY, TOTAL], [TOTAL, DAY, TOTAL], rows))

        assert result == [("a", 1.0)]

    def test_is_lazy(self):
        """Rows are pulled only as the result is consumed."""
        pulled = []

        def rows():
            for i in range(3):
                pulled.append(i)
                yield (float(i), f"day-{i}")

        result = align([DAY, TOTAL], [TOTAL, DAY], rows())
        assert pulled == []

        first = next(iter(result))
        assert first == ("day-0", 0.0)
        assert pulled == [0]

    def test_missing_role_raises(self):
        with pytest.raises(ColumnAlignmentError) as exc_info:
            align([DAY, COUNT], [TOTAL, DAY], [(1.0, "a")])

        assert exc_info.value.role == COUNT
        assert isinstance(exc_info.value, LookupError)
