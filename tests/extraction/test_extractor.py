"""Tests for per-model feature extraction."""

from datetime import date, timedelta

import pytest

from feature_xray.core.models import (
    Card,
    ColumnMeta,
    ColumnSource,
    ComputationCost,
    DataType,
    Dataset,
    Field,
    MaxCost,
    Options,
    QueryCost,
    QuerySpec,
)
from feature_xray.extraction import FeatureExtractor, card_roles
from feature_xray.extraction.costs import MAX_SAMPLE_SIZE
from feature_xray.features import DefaultFeatureComputer

SAMPLING = Options(max_cost=MaxCost(computation=ComputationCost.LINEAR, query=QueryCost.SAMPLE))
FULL_SCAN = Options(max_cost=MaxCost(query=QueryCost.FULL_SCAN))

DAY = ColumnMeta(name="day", base_type=DataType.DATE, source=ColumnSource.BREAKOUT)
REGION = ColumnMeta(name="region", base_type=DataType.VARCHAR, source=ColumnSource.BREAKOUT)
TOTAL = ColumnMeta(name="total", base_type=DataType.DOUBLE, source=ColumnSource.AGGREGATION)
NOTE = ColumnMeta(name="note", base_type=DataType.VARCHAR, source=ColumnSource.NATIVE)


class RecordingComputer(DefaultFeatureComputer):
    """Default computer that remembers what field_to_features received."""

    def __init__(self):
        super().__init__(histogram_bins=5)
        self.received = []

    def field_to_features(self, options, field, rows):
        rows = list(rows)
        self.received.append((options, field, rows))
        return super().field_to_features(options, field, rows)


@pytest.fixture
def computer():
    return RecordingComputer()


@pytest.fixture
def extractor(fake_source, computer):
    return FeatureExtractor(fake_source, computer)


def _card(card_id: int = 5, **query) -> Card:
    return Card(
        id=card_id,
        name="Daily totals",
        table_id=10,
        database_id=1,
        dataset_query={"sql": "SELECT 1", **query},
    )


def _daily_rows(n: int, total_first: bool = False) -> list[tuple]:
    start = date(2024, 1, 1)
    rows = [(start + timedelta(days=i), float(i % 30)) for i in range(n)]
    return [(t, d) for d, t in rows] if total_first else rows


class TestFieldExtraction:
    """Tests for extracting a single column."""

    def test_leaf_features_include_table(self, extractor, orders_table):
        field = Field(id=0, name="amount", table_id=10)

        result = extractor.extract(SAMPLING, field)

        assert result.features["table"] == orders_table
        assert result.features["count"] == 200
        assert "mean" in result.features
        assert result.constituents is None
        assert result.sample is False
        assert result.summary is False

    def test_requests_sample_limit(self, extractor, fake_source):
        extractor.extract(SAMPLING, Field(id=0, name="amount", table_id=10))

        assert fake_source.calls == [("field_values", {"limit": MAX_SAMPLE_SIZE})]

    def test_truncated_column_is_sampled(self, extractor):
        result = extractor.extract(SAMPLING, Field(id=0, name="amount", table_id=20))

        assert result.features["count"] == MAX_SAMPLE_SIZE
        assert result.sample is True

    def test_full_scan_reads_every_row(self, extractor, fake_source):
        result = extractor.extract(FULL_SCAN, Field(id=0, name="amount", table_id=20))

        assert fake_source.calls == [("field_values", {})]
        assert result.features["count"] == 12_000
        assert result.sample is False


class TestTableExtraction:
    """Tests for extracting a whole table."""

    def test_constituents_per_column(self, extractor, orders_table):
        result = extractor.extract(SAMPLING, orders_table)

        assert list(result.constituents) == ["amount", "quantity", "status"]
        assert result.features == {"table": orders_table}
        assert result.summary is True
        assert result.constituents["status"].features["distinct_count"] == 2

    def test_query_honors_budget(self, extractor, fake_source, orders_table):
        extractor.extract(SAMPLING, orders_table)

        assert fake_source.calls == [
            ("query_values", QuerySpec(source_table=10, limit=MAX_SAMPLE_SIZE))
        ]

    def test_sampled_table(self, extractor, fake_source):
        result = extractor.extract(SAMPLING, fake_source.table(20))

        assert result.sample is True
        assert result.constituents["amount"].features["count"] == MAX_SAMPLE_SIZE


class TestSegmentExtraction:
    """Tests for extracting a filtered table."""

    def test_definition_merged_with_limit(self, extractor, fake_source, segment):
        extractor.extract(SAMPLING, segment)

        assert fake_source.calls == [
            (
                "query_values",
                QuerySpec(source_table=10, filter="status = 'returned'", limit=MAX_SAMPLE_SIZE),
            )
        ]

    def test_summary_features(self, extractor, segment, orders_table):
        result = extractor.extract(FULL_SCAN, segment)

        assert result.features == {"table": orders_table, "segment": segment}
        assert result.summary is True
        assert set(result.constituents) == {"amount", "quantity", "status"}
        assert result.sample is False


class TestCardExtraction:
    """Tests for extracting a saved query result."""

    def test_aligns_roles_before_computing(self, fake_source, computer, extractor):
        card = _card(breakout=("day",), aggregation=("total",), granularity="day")
        fake_source.card_datasets[card.id] = Dataset(
            rows=_daily_rows(40, total_first=True), cols=[TOTAL, DAY]
        )

        result = extractor.extract(SAMPLING, card)

        options, fields, rows = computer.received[0]
        assert fields == [DAY, TOTAL]
        assert rows[0] == (date(2024, 1, 1), 0.0)
        assert options.query == card.dataset_query
        assert options.max_cost == SAMPLING.max_cost
        assert result.features["resolution"] == "day"
        assert result.features["card"] == card
        assert result.features["table"].id == 10

    def test_keeps_dataset_and_constituents(self, fake_source, extractor):
        card = _card()
        dataset = Dataset(rows=_daily_rows(10), cols=[DAY, TOTAL])
        fake_source.card_datasets[card.id] = dataset

        result = extractor.extract(SAMPLING, card)

        assert result.dataset is dataset
        assert list(result.constituents) == ["day", "total"]
        assert result.summary is False

    def test_never_requests_a_limit(self, fake_source, extractor):
        card = _card()
        fake_source.card_datasets[card.id] = Dataset(rows=_daily_rows(10), cols=[DAY, TOTAL])

        extractor.extract(SAMPLING, card)

        assert fake_source.calls == [("card_values", card.id)]

    def test_sample_flag_from_row_count(self, fake_source, extractor):
        """A result of exactly the cap is reported as sampled even without a limit."""
        card = _card()
        fake_source.card_datasets[card.id] = Dataset(
            rows=_daily_rows(MAX_SAMPLE_SIZE), cols=[DAY, TOTAL]
        )

        assert extractor.extract(SAMPLING, card).sample is True
        assert extractor.extract(FULL_SCAN, card).sample is False

    def test_unresolved_roles_degrade_to_summary(self, fake_source, computer, extractor):
        card = _card()
        fake_source.card_datasets[card.id] = Dataset(
            rows=[("a",), ("b",)], cols=[NOTE]
        )

        result = extractor.extract(SAMPLING, card)

        assert computer.received == []
        assert set(result.features) == {"card", "table"}
        assert list(result.constituents) == ["note"]


class TestCardRoles:
    """Tests for picking a card's breakout/aggregation pair."""

    def test_breakout_and_aggregation(self):
        assert card_roles([TOTAL, NOTE, DAY]) == [DAY, TOTAL]

    def test_two_breakouts(self):
        assert card_roles([DAY, NOTE, REGION]) == [DAY, REGION]

    def test_aggregation_preferred_over_second_breakout(self):
        assert card_roles([DAY, REGION, TOTAL]) == [DAY, TOTAL]

    def test_unresolved(self):
        assert card_roles([TOTAL]) == [None, TOTAL]
        assert card_roles([DAY]) == [DAY, None]
        assert card_roles([]) == [None, None]


class TestDispatch:
    def test_rejects_unknown_models(self, extractor):
        with pytest.raises(TypeError):
            extractor.extract(SAMPLING, object())
