"""Default per-column feature computation."""

from feature_xray.features.computer import DefaultFeatureComputer
from feature_xray.features.models import OTHER_CATEGORY, CategoryShares, Histogram, is_missing

__all__ = [
    "DefaultFeatureComputer",
    "CategoryShares",
    "Histogram",
    "OTHER_CATEGORY",
    "is_missing",
]
