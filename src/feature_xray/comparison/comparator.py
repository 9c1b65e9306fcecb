"""Compare the features of two models and rank what explains the difference.

Significance is filtered twice with the same head classifier: first over
fields by distance, then over the features of the retained fields by
contribution (square root of the field distance times the feature
difference).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context

from feature_xray.comparison.classification import head_tails_breaks
from feature_xray.comparison.distance import features_distance
from feature_xray.core.config import get_settings
from feature_xray.core.logging import get_logger, log_context
from feature_xray.core.models import (
    CompareResult,
    Comparison,
    ContributionEntry,
    ExtractionResult,
    FeatureComparison,
    Model,
    Options,
)
from feature_xray.extraction.extractor import FeatureExtractor
from feature_xray.extraction.protocols import DistanceFn, HeadClassifier

logger = get_logger(__name__)


class Comparator:
    """Extract two models with the same options and compare them."""

    def __init__(
        self,
        extractor: FeatureExtractor,
        distance: DistanceFn = features_distance,
        classify_head: HeadClassifier = head_tails_breaks,
        parallel: bool | None = None,
    ):
        self.extractor = extractor
        self.distance = distance
        self.classify_head = classify_head
        self.parallel = get_settings().parallel_extraction if parallel is None else parallel

    def compare(self, options: Options, a: Model, b: Model) -> CompareResult:
        """Compare feature vectors of two models.

        Tables and segments are compared column by column; every other
        combination compares the two leaf feature maps.
        """
        with log_context(comparison=f"{a.kind}:{a.id}/{b.kind}:{b.id}"):
            left, right = self._extract_both(options, a, b)

        comparison: Comparison
        if left.summary and right.summary:
            comparison = compare_constituents(left, right, self.distance)
            significant = any(c.significant for c in comparison.values())
        else:
            comparison = self.distance(left.features, right.features)
            significant = comparison.significant

        contributors = top_contributors(comparison, self.classify_head)
        logger.info(
            "features_compared",
            left=f"{a.kind}:{a.id}",
            right=f"{b.kind}:{b.id}",
            grouped=not isinstance(comparison, FeatureComparison),
            significant=significant,
            contributors=len(contributors),
        )
        return CompareResult(
            constituents=(left, right),
            comparison=comparison,
            top_contributors=contributors,
            sample=bool(left.sample or right.sample),
            significant=significant,
        )

    def _extract_both(
        self, options: Options, a: Model, b: Model
    ) -> tuple[ExtractionResult, ExtractionResult]:
        if not self.parallel:
            return self.extractor.extract(options, a), self.extractor.extract(options, b)
        with ThreadPoolExecutor(max_workers=2) as executor:
            # Each worker runs in a copy of the caller's logging context
            future_a = executor.submit(copy_context().run, self.extractor.extract, options, a)
            future_b = executor.submit(copy_context().run, self.extractor.extract, options, b)
            return future_a.result(), future_b.result()


def compare_constituents(
    left: ExtractionResult,
    right: ExtractionResult,
    distance: DistanceFn = features_distance,
) -> dict[str, FeatureComparison]:
    """Distance per constituent present on both sides, in the left side's order."""
    if not isinstance(left.constituents, Mapping) or not isinstance(right.constituents, Mapping):
        raise TypeError("Constituents must be keyed by field to be compared")
    return {
        key: distance(constituent.features, right.constituents[key].features)
        for key, constituent in left.constituents.items()
        if key in right.constituents
    }


def top_contributors(
    comparison: Comparison,
    classify_head: HeadClassifier = head_tails_breaks,
) -> list[ContributionEntry]:
    """Features that explain most of the difference.

    For a single comparison every top contributor is returned with its
    difference, in the comparison's order. For per-field comparisons the
    significant fields are selected by distance, then the significant
    features of those fields by contribution, ranked highest first.
    """
    if isinstance(comparison, FeatureComparison):
        return [
            ContributionEntry(feature=feature, difference=detail["difference"])
            for feature, detail in comparison.top_contributors.items()
        ]

    fields = classify_head(lambda item: item[1].distance, list(comparison.items()))
    candidates = [
        ContributionEntry(
            feature=feature,
            field=field,
            contribution=math.sqrt(field_comparison.distance) * detail["difference"],
        )
        for field, field_comparison in fields
        for feature, detail in field_comparison.top_contributors.items()
    ]
    head = classify_head(lambda entry: entry.contribution, candidates)
    return sorted(head, key=lambda entry: entry.contribution, reverse=True)
