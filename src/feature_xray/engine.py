"""Python API for feature x-rays.

Example:
    import duckdb
    from feature_xray import XRay
    from feature_xray.sources import DuckDBDataSource

    source = DuckDBDataSource(duckdb.connect("shop.duckdb"))
    xray = XRay(source)
    orders = source.get_table("orders")
    result = xray.x_ray(xray.extract(orders))

    returns = source.get_segment("orders", "status = 'returned'")
    diff = xray.compare(orders, returns)
    diff.top_contributors
"""

from __future__ import annotations

from functools import partial
from typing import TypeVar

from feature_xray.comparison import Comparator, features_distance, head_tails_breaks
from feature_xray.core.config import Settings, get_settings
from feature_xray.core.models import (
    CompareResult,
    ExtractionResult,
    MaxCost,
    Model,
    Options,
)
from feature_xray.extraction import (
    DataSource,
    DistanceFn,
    Enricher,
    FeatureComputer,
    FeatureExtractor,
    HeadClassifier,
)
from feature_xray.features import DefaultFeatureComputer
from feature_xray.presentation import add_descriptions
from feature_xray.presentation import x_ray as present

R = TypeVar("R", ExtractionResult, CompareResult)


class XRay:
    """Main entry point: extract, compare and present model features."""

    def __init__(
        self,
        source: DataSource,
        computer: FeatureComputer | None = None,
        distance: DistanceFn | None = None,
        classify_head: HeadClassifier | None = None,
        enrich: Enricher | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Wire collaborators, falling back to the defaults.

        Args:
            source: Data retrieval
            computer: Feature computation (numpy/scipy defaults)
            distance: Feature map distance
            classify_head: Significance classifier (head/tail breaks)
            enrich: Description enrichment
            settings: Settings (cached environment settings by default)
        """
        self.settings = settings or get_settings()
        self.computer = computer or DefaultFeatureComputer(self.settings.histogram_bins)
        self.enrich = enrich or add_descriptions
        self.extractor = FeatureExtractor(source, self.computer)
        if distance is None:
            distance = partial(
                features_distance,
                significance_threshold=self.settings.significance_threshold,
                limit=self.settings.top_contributors_limit,
            )
        if classify_head is None:
            classify_head = partial(head_tails_breaks, threshold=self.settings.head_tails_threshold)
        self.comparator = Comparator(
            self.extractor,
            distance=distance,
            classify_head=classify_head,
            parallel=self.settings.parallel_extraction,
        )

    def default_options(self) -> Options:
        """Options with the budget configured in settings."""
        return Options(
            max_cost=MaxCost(
                computation=self.settings.default_computation_cost,
                query=self.settings.default_query_cost,
            )
        )

    def extract(self, model: Model, options: Options | None = None) -> ExtractionResult:
        return self.extractor.extract(options or self.default_options(), model)

    def compare(self, a: Model, b: Model, options: Options | None = None) -> CompareResult:
        return self.comparator.compare(options or self.default_options(), a, b)

    def x_ray(self, result: R) -> R:
        """Rounded, described display form of a result."""
        return present(result, prettify=self.computer.x_ray, enrich=self.enrich)
