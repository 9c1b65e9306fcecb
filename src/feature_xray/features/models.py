"""Distribution values that appear inside feature maps."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

OTHER_CATEGORY = "(other)"


def is_missing(value: Any) -> bool:
    """None or NaN. Infinite values are present."""
    return value is None or (isinstance(value, float | np.floating) and math.isnan(value))


@dataclass(frozen=True)
class Histogram:
    """Equal-width histogram normalised to probabilities."""

    edges: tuple[float, ...]
    probabilities: tuple[float, ...]

    def to_dict(self) -> dict[str, list[float]]:
        return {"edges": list(self.edges), "probabilities": list(self.probabilities)}


@dataclass(frozen=True)
class CategoryShares:
    """Share of rows per category; the tail is folded into OTHER_CATEGORY."""

    shares: Mapping[Any, float]

    def to_dict(self) -> dict[Any, float]:
        return dict(self.shares)
