"""Default feature computation over column values.

Columns are summarised by base type:
- numeric: moments, extremes, histogram over the finite values, share of
  infinite values; percentiles when the computation budget is unbounded
- temporal: earliest/latest, span and a histogram over timestamps
- everything else: entropy and category shares

A pair of columns (a card's breakout and aggregation) gets the features of
both sides plus correlation and slope when both are numeric or temporal.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, date, datetime, time
from decimal import Decimal
from typing import Any

import numpy as np
from pydantic import BaseModel
from scipy import stats

from feature_xray.core.config import get_settings
from feature_xray.core.logging import get_logger
from feature_xray.core.models import ColumnMeta, Dataset, ExtractionResult, Options
from feature_xray.extraction.costs import unbounded_computation
from feature_xray.features.models import OTHER_CATEGORY, CategoryShares, Histogram, is_missing

logger = get_logger(__name__)

SECONDS_PER_DAY = 86_400
PERCENTILES = (5, 25, 75, 95)
_EPOCH = datetime(1970, 1, 1)


class DefaultFeatureComputer:
    """Feature computer backed by numpy and scipy."""

    def __init__(self, histogram_bins: int | None = None, top_values: int = 10):
        if histogram_bins is None:
            histogram_bins = get_settings().histogram_bins
        if histogram_bins < 1:
            raise ValueError(f"histogram_bins must be positive, got {histogram_bins}")
        self.histogram_bins = histogram_bins
        self.top_values = top_values

    def field_to_features(
        self,
        options: Options,
        field: ColumnMeta | Sequence[ColumnMeta],
        rows: Iterable[Any],
    ) -> dict[str, Any]:
        """Features of one column, or of a column pair when `field` is a pair."""
        if isinstance(field, ColumnMeta):
            return self.column_features(options, field, list(rows))
        x_field, y_field = field
        return self.pair_features(options, x_field, y_field, [tuple(r) for r in rows])

    def dataset_to_features(self, options: Options, dataset: Dataset) -> dict[str, ExtractionResult]:
        """Per-column feature results keyed by column name, in column order."""
        logger.debug("dataset_features", columns=len(dataset.cols), rows=dataset.row_count)
        return {
            col.name: ExtractionResult(
                features=self.column_features(options, col, dataset.column(i))
            )
            for i, col in enumerate(dataset.cols)
        }

    def column_features(
        self, options: Options, field: ColumnMeta, values: Sequence[Any]
    ) -> dict[str, Any]:
        present = [v for v in values if not is_missing(v)]
        features: dict[str, Any] = {
            "count": len(values),
            "nil%": (len(values) - len(present)) / len(values) if values else 0.0,
            "distinct_count": _distinct_count(present),
        }
        if not present:
            return features

        if field.is_numeric:
            features.update(self._numeric_features(options, present))
        elif field.is_temporal:
            features.update(self._temporal_features(present))
        else:
            features.update(self._categorical_features(present))
        return features

    def pair_features(
        self,
        options: Options,
        x_field: ColumnMeta,
        y_field: ColumnMeta,
        pairs: Sequence[tuple[Any, ...]],
    ) -> dict[str, Any]:
        features: dict[str, Any] = {
            "count": len(pairs),
            "x": self.column_features(options, x_field, [p[0] for p in pairs]),
            "y": self.column_features(options, y_field, [p[1] for p in pairs]),
        }
        if options.query is not None and options.query.granularity:
            features["resolution"] = options.query.granularity

        if (x_field.is_numeric or x_field.is_temporal) and y_field.is_numeric:
            complete = [(x, y) for x, y in pairs if not is_missing(x) and not is_missing(y)]
            if len(complete) >= 3:
                to_x = _to_days if x_field.is_temporal else float
                xs = np.asarray([to_x(x) for x, _ in complete], dtype=float)
                ys = np.asarray([float(y) for _, y in complete], dtype=float)
                finite = np.isfinite(xs) & np.isfinite(ys)
                xs, ys = xs[finite], ys[finite]
                if xs.size >= 3 and np.ptp(xs) > 0 and np.ptp(ys) > 0:
                    fit = stats.linregress(xs, ys)
                    features["correlation"] = float(fit.rvalue)
                    features["slope"] = float(fit.slope)
        return features

    def x_ray(self, features: Mapping[str, Any]) -> dict[str, Any]:
        """Display form of a feature map: plain Python values only."""
        return {k: _display(v) for k, v in features.items()}

    def _numeric_features(self, options: Options, present: list[Any]) -> dict[str, Any]:
        """Moments and distribution of the finite values; infinities are only counted."""
        values = np.asarray([float(v) for v in present], dtype=float)
        finite = np.isfinite(values)
        arr = values[finite]
        infinite = float(1.0 - finite.mean())
        if arr.size == 0:
            return {"infinite%": infinite}

        spread = float(np.ptp(arr))
        out: dict[str, Any] = {
            "min": float(arr.min()),
            "max": float(arr.max()),
            "range": spread,
            "mean": float(arr.mean()),
            "median": float(np.median(arr)),
            "sd": float(arr.std(ddof=1)) if arr.size > 1 else 0.0,
            "skewness": None,
            "kurtosis": None,
            "histogram": self._histogram(arr),
            "infinite%": infinite,
        }
        if arr.size > 2 and spread > 0:
            out["skewness"] = float(stats.skew(arr))
            out["kurtosis"] = float(stats.kurtosis(arr))
        if unbounded_computation(options.max_cost):
            cut_points = np.percentile(arr, PERCENTILES)
            out["percentiles"] = {
                f"p{p}": float(v) for p, v in zip(PERCENTILES, cut_points, strict=True)
            }
        return out

    def _temporal_features(self, present: list[Any]) -> dict[str, Any]:
        days = np.asarray([_to_days(v) for v in present], dtype=float)
        return {
            "earliest": min(present),
            "latest": max(present),
            "span_days": float(np.ptp(days)),
            "histogram": self._histogram(days),
        }

    def _categorical_features(self, present: list[Any]) -> dict[str, Any]:
        counts = _counter(present)
        total = len(present)
        shares: dict[Any, float] = {
            value: count / total for value, count in counts.most_common(self.top_values)
        }
        rest = total - sum(count for _, count in counts.most_common(self.top_values))
        if rest > 0:
            shares[OTHER_CATEGORY] = rest / total
        return {
            "entropy": float(stats.entropy(list(counts.values()), base=2)),
            "top_values": CategoryShares(shares=shares),
        }

    def _histogram(self, arr: np.ndarray) -> Histogram:
        counts, edges = np.histogram(arr, bins=self.histogram_bins)
        probabilities = counts / counts.sum()
        return Histogram(
            edges=tuple(float(e) for e in edges),
            probabilities=tuple(float(p) for p in probabilities),
        )



def _counter(values: list[Any]) -> Counter[Any]:
    try:
        return Counter(values)
    except TypeError:
        # Unhashable values (lists, dicts) are counted by representation
        return Counter(repr(v) for v in values)


def _distinct_count(values: list[Any]) -> int:
    return len(_counter(values))


def _to_days(value: datetime | date | Decimal | float) -> float:
    """Days since the Unix epoch."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.timestamp() / SECONDS_PER_DAY
        return (value - _EPOCH).total_seconds() / SECONDS_PER_DAY
    if isinstance(value, date):
        return (datetime.combine(value, time()) - _EPOCH).total_seconds() / SECONDS_PER_DAY
    return float(value)


def _display(value: Any) -> Any:
    match value:
        case Histogram() | CategoryShares():
            return value.to_dict()
        case BaseModel() if hasattr(value, "summary"):
            return value.summary()
        case np.generic():
            return value.item()
        case datetime() if value.tzinfo is not None:
            return value.astimezone(UTC).isoformat()
        case datetime() | date():
            return value.isoformat()
        case Mapping():
            return {k: _display(v) for k, v in value.items()}
        case _:
            return value
