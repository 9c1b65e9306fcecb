"""Presentation: rounding, descriptions and x-rays."""

from feature_xray.presentation.descriptions import add_descriptions, load_descriptions
from feature_xray.presentation.rounding import (
    BASE_PRECISION,
    order_of_magnitude,
    round_to_decimals,
    trim_decimals,
)
from feature_xray.presentation.xray import x_ray

__all__ = [
    "BASE_PRECISION",
    "add_descriptions",
    "load_descriptions",
    "order_of_magnitude",
    "round_to_decimals",
    "trim_decimals",
    "x_ray",
]
