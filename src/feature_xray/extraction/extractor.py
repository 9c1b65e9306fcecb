"""Feature extraction for the four model kinds.

Each kind has one handler; `FeatureExtractor.extract` matches on the model
variant and delegates. Card extraction never samples.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from feature_xray.core.logging import get_logger
from feature_xray.core.models import (
    Card,
    ColumnMeta,
    ColumnSource,
    ExtractionResult,
    Field,
    Model,
    Options,
    QuerySpec,
    Segment,
    Table,
)
from feature_xray.extraction import costs
from feature_xray.extraction.alignment import align
from feature_xray.extraction.protocols import DataSource, FeatureComputer

logger = get_logger(__name__)


class FeatureExtractor:
    """Fetch the dataset behind a model and compute its features."""

    def __init__(self, source: DataSource, computer: FeatureComputer):
        self.source = source
        self.computer = computer

    def extract(self, options: Options, model: Model) -> ExtractionResult:
        """Extract features of `model` under the budget in `options`.

        Args:
            options: Budget and query options
            model: Field, Table, Card or Segment

        Returns:
            ExtractionResult; leaf features for fields and cards,
            constituents plus summary features for tables and segments
        """
        match model:
            case Field():
                result = self._extract_field(options, model)
            case Table():
                result = self._extract_table(options, model)
            case Card():
                result = self._extract_card(options, model)
            case Segment():
                result = self._extract_segment(options, model)
            case _:
                raise TypeError(f"Cannot extract features from {type(model).__name__}")

        logger.debug(
            "features_extracted",
            kind=model.kind,
            model_id=model.id,
            sample=result.sample,
            constituents=len(result.constituents) if result.constituents is not None else None,
        )
        return result

    def _extract_field(self, options: Options, field: Field) -> ExtractionResult:
        values = self.source.field_values(field, costs.query_opts(options))
        features = {
            "table": self.source.table(field.table_id),
            **self.computer.field_to_features(options, values.field, values.row),
        }
        return ExtractionResult(
            features=features,
            sample=costs.is_sampled(options, values.row),
        )

    def _extract_table(self, options: Options, table: Table) -> ExtractionResult:
        dataset = self.source.query_values(
            table.database_id,
            QuerySpec(source_table=table.id, **costs.query_opts(options)),
        )
        return ExtractionResult(
            features={"table": table},
            constituents=self.computer.dataset_to_features(options, dataset),
            sample=costs.is_sampled(options, dataset),
            summary=True,
        )

    def _extract_card(self, options: Options, card: Card) -> ExtractionResult:
        dataset = self.source.card_values(card)
        roles = card_roles(dataset.cols)

        features: dict[str, Any] = {}
        if all(role is not None for role in roles):
            features.update(
                self.computer.field_to_features(
                    options.with_query(card.dataset_query),
                    roles,
                    align(roles, dataset.cols, dataset.rows),
                )
            )
        else:
            logger.info("card_roles_unresolved", card_id=card.id, columns=len(dataset.cols))
        features.update({"card": card, "table": self.source.table(card.table_id)})

        return ExtractionResult(
            features=features,
            constituents=self.computer.dataset_to_features(options, dataset),
            dataset=dataset,
            sample=costs.is_sampled(options, dataset),
        )

    def _extract_segment(self, options: Options, segment: Segment) -> ExtractionResult:
        query = QuerySpec(
            **segment.definition.model_dump(),
            **costs.query_opts(options),
        )
        dataset = self.source.query_values(segment.database_id, query)
        return ExtractionResult(
            features={"table": self.source.table(segment.table_id), "segment": segment},
            constituents=self.computer.dataset_to_features(options, dataset),
            sample=costs.is_sampled(options, dataset),
            summary=True,
        )


def card_roles(cols: Sequence[ColumnMeta]) -> list[ColumnMeta | None]:
    """Pick the columns a card is x-rayed over.

    The first breakout column, paired with the first aggregation column or,
    failing that, the second breakout column. Unresolved roles are None.
    """
    breakout = [col for col in cols if col.source == ColumnSource.BREAKOUT]
    aggregation = [col for col in cols if col.source == ColumnSource.AGGREGATION]
    first = breakout[0] if breakout else None
    if aggregation:
        second = aggregation[0]
    else:
        second = breakout[1] if len(breakout) > 1 else None
    return [first, second]
