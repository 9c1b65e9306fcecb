"""Align query result rows with expected column roles."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, TypeVar

from feature_xray.core.exceptions import ColumnAlignmentError

T = TypeVar("T")


def index_of(pred: Callable[[T], bool], coll: Iterable[T]) -> int | None:
    """Return index of the first element in `coll` for which `pred` returns true."""
    for i, x in enumerate(coll):
        if pred(x):
            return i
    return None


def align(
    expected: Sequence[Any],
    cols: Sequence[Any],
    rows: Iterable[Sequence[Any]],
) -> Iterable[Sequence[Any]]:
    """Reorder row values so they follow `expected`.

    When the first columns already are `expected`, `rows` is returned as is.
    Otherwise a lazy iterator of tuples is returned, holding for each row the
    values at the first column equal to each expected role.

    Raises:
        ColumnAlignmentError: if an expected role matches no column
    """
    if list(cols[: len(expected)]) == list(expected):
        return rows

    indices = []
    for role in expected:
        idx = index_of(lambda col, role=role: col == role, cols)
        if idx is None:
            raise ColumnAlignmentError(role)
        indices.append(idx)

    return _reorder(indices, rows)


def _reorder(indices: list[int], rows: Iterable[Sequence[Any]]) -> Iterator[tuple[Any, ...]]:
    for row in rows:
        yield tuple(row[i] for i in indices)
