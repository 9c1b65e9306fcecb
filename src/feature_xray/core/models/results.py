"""Extraction and comparison results.

Results are frozen dataclasses: they hold fetched rows and arbitrary feature
values, neither of which is worth validating field by field.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

import numpy as np
from pydantic import BaseModel

from feature_xray.core.models.base import Dataset


@dataclass(frozen=True)
class ExtractionResult:
    """Features of one model.

    Field and Card results carry a leaf feature map (always including
    `table`). Table and Segment results carry per-column `constituents` and a
    summary feature map, flagged by `summary`. Card results keep their
    per-column constituents and dataset too, but compare as leaves.
    """

    features: Mapping[str, Any]
    constituents: Mapping[str, ExtractionResult] | Sequence[ExtractionResult] | None = None
    dataset: Dataset | None = None
    sample: bool | None = None
    summary: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"features": to_jsonable(self.features)}
        if self.constituents is not None:
            out["constituents"] = to_jsonable(self.constituents)
        if self.dataset is not None:
            out["dataset"] = {
                "cols": [c.model_dump(mode="json") for c in self.dataset.cols],
                "rows": to_jsonable(self.dataset.rows),
            }
        if self.sample is not None:
            out["sample"] = self.sample
        return out


@dataclass(frozen=True)
class FeatureComparison:
    """Distance between two feature maps.

    `top_contributors` maps feature name to `{"difference": float}`.
    """

    distance: float
    top_contributors: Mapping[str, Mapping[str, float]]
    significant: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "distance": self.distance,
            "top_contributors": to_jsonable(self.top_contributors),
            "significant": self.significant,
        }


@dataclass(frozen=True)
class ContributionEntry:
    """One feature explaining part of a difference.

    Grouped comparisons fill `field` and `contribution`; leaf comparisons fill
    `difference` only.
    """

    feature: str
    field: str | None = None
    contribution: float | None = None
    difference: float | None = None

    @property
    def score(self) -> float:
        return self.contribution if self.contribution is not None else (self.difference or 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in dataclasses.asdict(self).items() if v is not None}


Comparison = FeatureComparison | Mapping[str, FeatureComparison]


@dataclass(frozen=True)
class CompareResult:
    """Outcome of comparing two models."""

    constituents: tuple[ExtractionResult, ExtractionResult]
    comparison: Comparison
    top_contributors: Sequence[ContributionEntry]
    sample: bool
    significant: bool

    @property
    def grouped(self) -> bool:
        return not isinstance(self.comparison, FeatureComparison)

    def to_dict(self) -> dict[str, Any]:
        return {
            "constituents": [c.to_dict() for c in self.constituents],
            "comparison": to_jsonable(self.comparison),
            "top_contributors": [entry.to_dict() for entry in self.top_contributors],
            "sample": self.sample,
            "significant": self.significant,
        }


def to_jsonable(value: Any) -> Any:
    """Convert a result tree into JSON-compatible Python values."""
    match value:
        case None | bool() | int() | float() | str():
            return value
        case BaseModel():
            return value.model_dump(mode="json")
        case ExtractionResult() | FeatureComparison() | ContributionEntry() | CompareResult():
            return value.to_dict()
        case np.generic():
            return value.item()
        case np.ndarray():
            return value.tolist()
        case datetime() | date() | time():
            return value.isoformat()
        case Mapping():
            return {str(k): to_jsonable(v) for k, v in value.items()}
        case Sequence():
            return [to_jsonable(v) for v in value]
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return to_jsonable(dataclasses.asdict(value))
        case _:
            return str(value)
