"""Shared models: options, entities, datasets and results."""

from feature_xray.core.models.base import (
    ColumnMeta,
    ColumnSource,
    ComputationCost,
    DataType,
    Dataset,
    FieldValues,
    QueryCost,
    QuerySpec,
)
from feature_xray.core.models.entities import (
    Card,
    CardQuery,
    Field,
    Model,
    Segment,
    SegmentDefinition,
    Table,
)
from feature_xray.core.models.options import MaxCost, Options
from feature_xray.core.models.results import (
    CompareResult,
    Comparison,
    ContributionEntry,
    ExtractionResult,
    FeatureComparison,
    to_jsonable,
)

__all__ = [
    # Budget and options
    "ComputationCost",
    "QueryCost",
    "MaxCost",
    "Options",
    # Entities
    "Card",
    "CardQuery",
    "Field",
    "Model",
    "Segment",
    "SegmentDefinition",
    "Table",
    # Data
    "ColumnMeta",
    "ColumnSource",
    "DataType",
    "Dataset",
    "FieldValues",
    "QuerySpec",
    # Results
    "CompareResult",
    "Comparison",
    "ContributionEntry",
    "ExtractionResult",
    "FeatureComparison",
    "to_jsonable",
]
