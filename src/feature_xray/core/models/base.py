"""Base models and types used across all modules.

Column metadata, datasets and query requests exchanged with data sources.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

# === Enums ===


class ComputationCost(str, Enum):
    """Computation budget, ordered from cheapest to most expensive."""

    LINEAR = "linear"
    UNBOUNDED = "unbounded"
    YOLO = "yolo"


class QueryCost(str, Enum):
    """Query budget, ordered from cheapest to most expensive."""

    CACHE = "cache"
    SAMPLE = "sample"
    FULL_SCAN = "full-scan"
    JOINS = "joins"


class ColumnSource(str, Enum):
    """Role a column plays in a query result."""

    BREAKOUT = "breakout"  # Grouping key
    AGGREGATION = "aggregation"  # Computed aggregate
    FIELDS = "fields"  # Plain table column
    NATIVE = "native"  # Column of a raw SQL result


class DataType(str, Enum):
    """Supported data types."""

    VARCHAR = "VARCHAR"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    TIMESTAMPTZ = "TIMESTAMPTZ"
    TIME = "TIME"
    INTERVAL = "INTERVAL"
    JSON = "JSON"
    BLOB = "BLOB"


NUMERIC_TYPES = frozenset({DataType.INTEGER, DataType.BIGINT, DataType.DOUBLE, DataType.DECIMAL})
TEMPORAL_TYPES = frozenset({DataType.DATE, DataType.TIMESTAMP, DataType.TIMESTAMPTZ})


class ColumnMeta(BaseModel):
    """Metadata of one column in a dataset."""

    model_config = ConfigDict(frozen=True)

    name: str
    base_type: DataType = DataType.VARCHAR
    source: ColumnSource | None = None
    display_name: str | None = None

    @property
    def is_numeric(self) -> bool:
        return self.base_type in NUMERIC_TYPES

    @property
    def is_temporal(self) -> bool:
        return self.base_type in TEMPORAL_TYPES


class QuerySpec(BaseModel):
    """Request for the rows of a table, optionally filtered and limited."""

    model_config = ConfigDict(frozen=True)

    source_table: int
    filter: str | None = None  # SQL predicate
    limit: int | None = None


# === Row containers ===
# Plain dataclasses: rows are fetched in bulk and never validated per value.


@dataclass(frozen=True)
class Dataset:
    """Rows of a query result together with their column metadata."""

    rows: Sequence[Sequence[Any]]
    cols: Sequence[ColumnMeta]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column(self, index: int) -> list[Any]:
        """Values of the column at `index`, in row order."""
        return [row[index] for row in self.rows]


@dataclass(frozen=True)
class FieldValues:
    """Values of a single column together with its refreshed metadata."""

    field: ColumnMeta
    row: Sequence[Any]
