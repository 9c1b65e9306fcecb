"""Feature extraction: cost policy, column alignment and per-model dispatch."""

from feature_xray.extraction.alignment import align, index_of
from feature_xray.extraction.costs import (
    MAX_SAMPLE_SIZE,
    full_scan,
    is_sampled,
    query_opts,
    unbounded_computation,
)
from feature_xray.extraction.extractor import FeatureExtractor, card_roles
from feature_xray.extraction.protocols import (
    DataSource,
    DistanceFn,
    Enricher,
    FeatureComputer,
    HeadClassifier,
)

__all__ = [
    # Cost policy
    "MAX_SAMPLE_SIZE",
    "full_scan",
    "is_sampled",
    "query_opts",
    "unbounded_computation",
    # Alignment
    "align",
    "index_of",
    # Dispatch
    "FeatureExtractor",
    "card_roles",
    # Collaborators
    "DataSource",
    "DistanceFn",
    "Enricher",
    "FeatureComputer",
    "HeadClassifier",
]
