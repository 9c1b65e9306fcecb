"""Distances between feature values and feature maps.

Every difference lies in [0, 1] and is symmetric in its arguments. Sums go
through `math.fsum` so a distance does not depend on key order.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np
from scipy.spatial.distance import jensenshannon

from feature_xray.core.config import get_settings
from feature_xray.core.models import FeatureComparison
from feature_xray.core.models.entities import ENTITY_TYPES
from feature_xray.features.models import CategoryShares, Histogram, is_missing

_NUMBER_TYPES = (int, float, Decimal, np.integer, np.floating)


def difference(a: Any, b: Any) -> float | None:
    """Difference between two feature values, or None if they are not comparable."""
    if isinstance(a, ENTITY_TYPES) or isinstance(b, ENTITY_TYPES):
        return None
    if is_missing(a) and is_missing(b):
        return 0.0
    if is_missing(a) or is_missing(b):
        return 1.0

    match a, b:
        case bool(), bool():
            return 0.0 if a == b else 1.0
        case (bool(), _) | (_, bool()):
            return 1.0
        case _ if isinstance(a, _NUMBER_TYPES) and isinstance(b, _NUMBER_TYPES):
            return _relative_difference(float(a), float(b))
        case Histogram(), Histogram():
            return _distribution_distance(a.probabilities, b.probabilities)
        case CategoryShares(), CategoryShares():
            categories = sorted(set(a.shares) | set(b.shares), key=repr)
            return _distribution_distance(
                [a.shares.get(c, 0.0) for c in categories],
                [b.shares.get(c, 0.0) for c in categories],
            )
        case Mapping(), Mapping():
            keys = list(a) + [k for k in b if k not in a]
            return _mean([difference(a.get(k), b.get(k)) for k in keys])
        case str(), str():
            return 0.0 if a == b else 1.0
        case (str(), _) | (_, str()):
            return 1.0
        case Sequence(), Sequence():
            if len(a) != len(b):
                return 1.0
            return _mean([difference(x, y) for x, y in zip(a, b, strict=True)])
        case _:
            return 0.0 if a == b else 1.0


def features_distance(
    a: Mapping[str, Any],
    b: Mapping[str, Any],
    *,
    significance_threshold: float | None = None,
    limit: int | None = None,
) -> FeatureComparison:
    """Compare two feature maps.

    The distance is the root mean square of per-feature differences over the
    union of feature keys. Model references (table, card, segment) are skipped.

    Args:
        a: First feature map
        b: Second feature map
        significance_threshold: Distance above which the difference is
            significant (default from settings)
        limit: Maximum number of top contributors (default from settings)

    Returns:
        FeatureComparison with distance, ranked non-zero contributors and
        significance flag
    """
    settings = get_settings()
    threshold = (
        significance_threshold
        if significance_threshold is not None
        else settings.significance_threshold
    )
    limit = limit if limit is not None else settings.top_contributors_limit

    differences: dict[str, float] = {}
    for key in list(a) + [k for k in b if k not in a]:
        d = difference(a.get(key), b.get(key))
        if d is not None:
            differences[key] = d

    distance = 0.0
    if differences:
        distance = math.sqrt(math.fsum(d * d for d in differences.values()) / len(differences))

    ranked = sorted(
        ((k, d) for k, d in differences.items() if d > 0),
        key=lambda kv: kv[1],
        reverse=True,
    )
    return FeatureComparison(
        distance=distance,
        top_contributors={k: {"difference": d} for k, d in ranked[:limit]},
        significant=distance > threshold,
    )


def _relative_difference(a: float, b: float) -> float:
    if a == b:
        return 0.0
    if math.isinf(a) or math.isinf(b):
        return 1.0
    return abs(a - b) / (abs(a) + abs(b))


def _distribution_distance(p: Sequence[float], q: Sequence[float]) -> float:
    if len(p) != len(q):
        return 1.0
    p_arr = np.asarray(p, dtype=float)
    q_arr = np.asarray(q, dtype=float)
    p_empty, q_empty = p_arr.sum() <= 0, q_arr.sum() <= 0
    if p_empty or q_empty:
        return 0.0 if p_empty and q_empty else 1.0
    d = float(jensenshannon(p_arr, q_arr, base=2))
    if math.isnan(d):
        return 0.0
    return min(max(d, 0.0), 1.0)


def _mean(values: list[float | None]) -> float:
    present = [v for v in values if v is not None]
    if not present:
        return 0.0
    return math.fsum(present) / len(present)
