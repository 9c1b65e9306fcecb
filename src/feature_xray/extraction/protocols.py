"""Interfaces of the collaborators the extraction pipeline relies on.

Data retrieval, per-column feature computation, distances, classification
and descriptions are pluggable. Defaults live in `feature_xray.sources`,
`feature_xray.features`, `feature_xray.comparison` and
`feature_xray.presentation`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from feature_xray.core.models import (
    Card,
    ColumnMeta,
    Dataset,
    ExtractionResult,
    FeatureComparison,
    Field,
    FieldValues,
    Options,
    QuerySpec,
    Table,
)


@runtime_checkable
class DataSource(Protocol):
    """Fetches rows for models. Must honor `limit` in query options."""

    def table(self, table_id: int) -> Table: ...

    def field_values(self, field: Field, query_opts: Mapping[str, Any]) -> FieldValues: ...

    def query_values(self, database_id: int, query: QuerySpec) -> Dataset: ...

    def card_values(self, card: Card) -> Dataset: ...


@runtime_checkable
class FeatureComputer(Protocol):
    """Computes feature maps from raw values."""

    def field_to_features(
        self,
        options: Options,
        field: ColumnMeta | Sequence[ColumnMeta],
        rows: Iterable[Any],
    ) -> dict[str, Any]: ...

    def dataset_to_features(
        self, options: Options, dataset: Dataset
    ) -> dict[str, ExtractionResult]: ...

    def x_ray(self, features: Mapping[str, Any]) -> dict[str, Any]: ...


DistanceFn = Callable[[Mapping[str, Any], Mapping[str, Any]], FeatureComparison]
HeadClassifier = Callable[[Callable[[Any], float], Sequence[Any]], list[Any]]
Enricher = Callable[[Mapping[str, Any]], dict[str, Any]]
