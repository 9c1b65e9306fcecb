"""Models that can be x-rayed.

A closed union of four variants discriminated by `kind`: a single column
(`Field`), a whole table (`Table`), a saved query (`Card`) and a filtered
table (`Segment`).
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Discriminator


class _Entity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str

    def summary(self) -> dict[str, object]:
        """Short display form used inside feature maps."""
        return {"id": self.id, "name": self.name, "kind": self.kind}  # type: ignore[attr-defined]


class Table(_Entity):
    """A database table."""

    kind: Literal["table"] = "table"
    database_id: int
    schema_name: str | None = None


class Field(_Entity):
    """A single column of a table."""

    kind: Literal["field"] = "field"
    table_id: int


class CardQuery(BaseModel):
    """Definition of a saved query.

    `breakout` and `aggregation` name the result columns that play those roles.
    """

    model_config = ConfigDict(frozen=True)

    sql: str
    breakout: tuple[str, ...] = ()
    aggregation: tuple[str, ...] = ()
    granularity: str | None = None  # e.g. "day", "month" for temporal breakouts


class Card(_Entity):
    """A saved query whose result can be x-rayed."""

    kind: Literal["card"] = "card"
    table_id: int
    database_id: int
    dataset_query: CardQuery


class SegmentDefinition(BaseModel):
    """Stored filter of a segment."""

    model_config = ConfigDict(frozen=True)

    source_table: int
    filter: str | None = None


class Segment(_Entity):
    """A table restricted by a stored filter."""

    kind: Literal["segment"] = "segment"
    table_id: int
    database_id: int
    definition: SegmentDefinition


Model = Annotated[Field | Table | Card | Segment, Discriminator("kind")]
ENTITY_TYPES = (Field, Table, Card, Segment)
