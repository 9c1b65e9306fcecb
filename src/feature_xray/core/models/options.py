"""Options threaded through extraction and comparison."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from feature_xray.core.logging import get_logger
from feature_xray.core.models.base import ComputationCost, QueryCost
from feature_xray.core.models.entities import CardQuery

logger = get_logger(__name__)


class MaxCost(BaseModel):
    """Resource budget for feature extraction.

    A missing or unrecognised level is stored as None. CostPolicy reads an
    unspecified query level as a full scan.
    """

    model_config = ConfigDict(frozen=True)

    computation: ComputationCost | None = None
    query: QueryCost | None = None

    @field_validator("computation", mode="before")
    @classmethod
    def _lenient_computation(cls, value: Any) -> Any:
        return _lenient_level(ComputationCost, "computation", value)

    @field_validator("query", mode="before")
    @classmethod
    def _lenient_query(cls, value: Any) -> Any:
        return _lenient_level(QueryCost, "query", value)


def _lenient_level(enum_type: type[ComputationCost] | type[QueryCost], name: str, value: Any) -> Any:
    if value is None or isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except (TypeError, ValueError):
        logger.warning("invalid_cost_level", dimension=name, value=repr(value))
        return None


class Options(BaseModel):
    """Immutable options bundle.

    `max_cost` is consulted only through `feature_xray.extraction.costs`.
    `query` carries the saved-query definition while a card is extracted.
    """

    model_config = ConfigDict(frozen=True)

    max_cost: MaxCost = Field(default_factory=MaxCost)
    query: CardQuery | None = None

    def with_query(self, query: CardQuery) -> Options:
        """Copy of these options carrying `query`."""
        return self.model_copy(update={"query": query})
