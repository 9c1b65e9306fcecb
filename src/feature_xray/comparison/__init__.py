"""Comparison of feature vectors and ranking of explanatory features."""

from feature_xray.comparison.classification import head_tails_breaks
from feature_xray.comparison.comparator import (
    Comparator,
    compare_constituents,
    top_contributors,
)
from feature_xray.comparison.distance import difference, features_distance

__all__ = [
    "Comparator",
    "compare_constituents",
    "difference",
    "features_distance",
    "head_tails_breaks",
    "top_contributors",
]
