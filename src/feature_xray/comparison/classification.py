"""Head/tail breaks classification.

Splits a collection around its mean and keeps the "head" (items scoring
above the mean), recursing while the head is a small enough minority. See
Jiang (2013), "Head/tail Breaks: A New Classification Scheme for Data with a
Heavy-tailed Distribution".
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import TypeVar

from feature_xray.core.config import get_settings

T = TypeVar("T")


def head_tails_breaks(
    key: Callable[[T], float],
    items: Iterable[T],
    threshold: float | None = None,
) -> list[T]:
    """Return the head group of `items` scored by `key`.

    Order of items is preserved. An item scoring higher than an included item
    is always included too.

    Args:
        key: Score of an item
        items: Items to classify
        threshold: Largest head share that is subdivided further
            (default from settings)
    """
    if threshold is None:
        threshold = get_settings().head_tails_threshold
    items = list(items)
    if not items:
        return []

    scores = [key(item) for item in items]
    mean = math.fsum(scores) / len(scores)
    head = [item for item, score in zip(items, scores, strict=True) if score > mean]

    if not head:
        return items
    if len(head) / len(items) <= threshold:
        return head_tails_breaks(key, head, threshold)
    return head

