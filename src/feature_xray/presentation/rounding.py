"""Display rounding relative to magnitude.

Numbers of magnitude 1 and above keep `decimal_places` decimals. Smaller
numbers keep one more decimal per leading zero after the point, so they do
not round to zero.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

import numpy as np

BASE_PRECISION = 2


def order_of_magnitude(x: float) -> int:
    """floor(log10(|x|)); 0 for zero."""
    if x == 0:
        return 0
    return math.floor(math.log10(abs(x)))


def round_to_decimals(decimal_places: int, x: float) -> float:
    return round(x, decimal_places)


def trim_decimals(decimal_places: int, value: Any) -> Any:
    """Round every float in a nested mapping/sequence structure.

    Integers, booleans, non-finite floats and non-numeric values pass
    through unchanged.
    """
    match value:
        case bool() | int():
            return value
        case float() | np.floating():
            x = float(value)
            if not math.isfinite(x):
                return x
            return round_to_decimals(decimal_places - min(order_of_magnitude(x), 0), x)
        case Mapping():
            return {k: trim_decimals(decimal_places, v) for k, v in value.items()}
        case list():
            return [trim_decimals(decimal_places, v) for v in value]
        case tuple():
            return tuple(trim_decimals(decimal_places, v) for v in value)
        case _:
            return value
