"""Feature x-rays.

Extracts feature vectors from fields, tables, saved queries and segments,
compares two of them and ranks the features that explain their difference.

Example:
    from feature_xray import XRay
    from feature_xray.sources import DuckDBDataSource

    xray = XRay(DuckDBDataSource(conn))
    result = xray.compare(table_a, table_b)
"""

__version__ = "0.1.0"

from feature_xray.core.models import (
    Card,
    CompareResult,
    ExtractionResult,
    Field,
    MaxCost,
    Options,
    Segment,
    Table,
)
from feature_xray.engine import XRay

__all__ = [
    "XRay",
    "Card",
    "CompareResult",
    "ExtractionResult",
    "Field",
    "MaxCost",
    "Options",
    "Segment",
    "Table",
    "__version__",
]
