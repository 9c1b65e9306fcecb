"""Cost policy: turn a resource budget into query limits.

Query levels `cache` and `sample` forbid a full scan. An unspecified query
level permits one, so a malformed budget fails open on cost, never on
correctness.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from feature_xray.core.models import ComputationCost, Dataset, MaxCost, Options, QueryCost

MAX_SAMPLE_SIZE = 10_000

_FULL_SCAN_LEVELS = frozenset({QueryCost.FULL_SCAN, QueryCost.JOINS, None})
_UNBOUNDED_LEVELS = frozenset({ComputationCost.UNBOUNDED, ComputationCost.YOLO, None})


def full_scan(max_cost: MaxCost | None) -> bool:
    """Whether the budget allows reading every row."""
    return max_cost is None or max_cost.query in _FULL_SCAN_LEVELS


def unbounded_computation(max_cost: MaxCost | None) -> bool:
    """Whether the budget allows super-linear feature computation (sorting etc.)."""
    return max_cost is None or max_cost.computation in _UNBOUNDED_LEVELS


def query_opts(options: Options) -> dict[str, Any]:
    """Query options honoring the budget: a row limit unless a full scan is allowed."""
    if full_scan(options.max_cost):
        return {}
    return {"limit": MAX_SAMPLE_SIZE}


def is_sampled(options: Options, data: Dataset | Sequence[Any]) -> bool:
    """Whether `data` was probably truncated by sampling.

    Exactly MAX_SAMPLE_SIZE rows under a restricted budget counts as sampled,
    fewer rows as complete. A result with exactly MAX_SAMPLE_SIZE rows in
    total is therefore reported as sampled too.
    """
    row_count = data.row_count if isinstance(data, Dataset) else len(data)
    return not full_scan(options.max_cost) and row_count == MAX_SAMPLE_SIZE
