"""Turn extraction and comparison results into x-rays.

An x-ray is the display form of a result: feature maps converted to plain
values, rounded relative to magnitude and enriched with descriptions.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any, overload

from feature_xray.core.models import (
    CompareResult,
    ContributionEntry,
    ExtractionResult,
    FeatureComparison,
)
from feature_xray.extraction.protocols import Enricher
from feature_xray.presentation.descriptions import add_descriptions
from feature_xray.presentation.rounding import BASE_PRECISION, trim_decimals

Prettifier = Callable[[Mapping[str, Any]], Mapping[str, Any]]


@overload
def x_ray(
    result: ExtractionResult, *, prettify: Prettifier | None = ..., enrich: Enricher = ...
) -> ExtractionResult: ...


@overload
def x_ray(
    result: CompareResult, *, prettify: Prettifier | None = ..., enrich: Enricher = ...
) -> CompareResult: ...


def x_ray(
    result: ExtractionResult | CompareResult,
    *,
    prettify: Prettifier | None = None,
    enrich: Enricher = add_descriptions,
) -> ExtractionResult | CompareResult:
    """Turn a feature vector (or a comparison of two) into an x-ray.

    Args:
        result: Extraction or comparison result
        prettify: Converts a raw feature map to display values
            (typically `FeatureComputer.x_ray`)
        enrich: Adds descriptions to a rounded feature map

    Returns:
        Result of the same type with presented features
    """
    if isinstance(result, CompareResult):
        return dataclasses.replace(
            result,
            constituents=(
                x_ray(result.constituents[0], prettify=prettify, enrich=enrich),
                x_ray(result.constituents[1], prettify=prettify, enrich=enrich),
            ),
            comparison=_present_comparison(result.comparison),
            top_contributors=[_present_entry(e) for e in result.top_contributors],
        )

    def present(features: Mapping[str, Any]) -> dict[str, Any]:
        shown = prettify(features) if prettify is not None else features
        return enrich(trim_decimals(BASE_PRECISION, shown))

    constituents = result.constituents
    if isinstance(constituents, Mapping):
        constituents = {
            k: x_ray(v, prettify=prettify, enrich=enrich) for k, v in constituents.items()
        }
    elif constituents is not None:
        constituents = [x_ray(c, prettify=prettify, enrich=enrich) for c in constituents]

    return dataclasses.replace(
        result,
        features=present(result.features),
        constituents=constituents,
    )


def _present_comparison(
    comparison: FeatureComparison | Mapping[str, FeatureComparison],
) -> FeatureComparison | dict[str, FeatureComparison]:
    if isinstance(comparison, FeatureComparison):
        return FeatureComparison(
            distance=trim_decimals(BASE_PRECISION, comparison.distance),
            top_contributors=trim_decimals(BASE_PRECISION, comparison.top_contributors),
            significant=comparison.significant,
        )
    return {field: _present_comparison(c) for field, c in comparison.items()}


def _present_entry(entry: ContributionEntry) -> ContributionEntry:
    return dataclasses.replace(
        entry,
        contribution=trim_decimals(BASE_PRECISION, entry.contribution),
        difference=trim_decimals(BASE_PRECISION, entry.difference),
    )
