"""Human-readable descriptions of features, loaded from a YAML catalog."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

CATALOG_PATH = Path(__file__).resolve().parent.parent / "catalog" / "descriptions.yaml"


@lru_cache
def load_descriptions(path: Path = CATALOG_PATH) -> dict[str, dict[str, str]]:
    """Load the feature description catalog."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return {str(k): dict(v) for k, v in data.items()}


def add_descriptions(features: Mapping[str, Any]) -> dict[str, Any]:
    """Wrap described features as {value, label, description}; others pass through."""
    catalog = load_descriptions()
    out: dict[str, Any] = {}
    for key, value in features.items():
        entry = catalog.get(key)
        out[key] = {"value": value, **entry} if entry else value
    return out
