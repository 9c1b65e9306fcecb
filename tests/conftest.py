"""Shared pytest fixtures for all tests."""

from collections.abc import Mapping
from typing import Any

import duckdb
import pytest

from feature_xray.core.exceptions import UnknownModelError
from feature_xray.core.logging import configure_logging
from feature_xray.core.models import (
    Card,
    ColumnMeta,
    ColumnSource,
    DataType,
    Dataset,
    Field,
    FieldValues,
    QuerySpec,
    Segment,
    SegmentDefinition,
    Table,
)

DATABASE_ID = 1


@pytest.fixture(autouse=True)
def _restore_default_logging():
    """Re-apply the library's default logging after each test.

    CLI commands reconfigure logging onto the stderr stream CliRunner swaps in,
    which is closed once the invocation ends.
    """
    yield
    configure_logging()


class FakeDataSource:
    """In-memory data source that records every request it serves."""

    def __init__(
        self,
        tables: Mapping[int, Table],
        datasets: Mapping[int, Dataset],
        card_datasets: Mapping[int, Dataset] | None = None,
    ):
        self.tables = dict(tables)
        self.datasets = dict(datasets)
        self.card_datasets = dict(card_datasets or {})
        self.calls: list[tuple[str, Any]] = []

    def table(self, table_id: int) -> Table:
        if table_id not in self.tables:
            raise UnknownModelError("table", table_id)
        return self.tables[table_id]

    def field_values(self, field: Field, query_opts: Mapping[str, Any]) -> FieldValues:
        self.calls.append(("field_values", dict(query_opts)))
        dataset = self.datasets[field.table_id]
        row = dataset.column(field.id)
        if "limit" in query_opts:
            row = row[: query_opts["limit"]]
        return FieldValues(field=dataset.cols[field.id], row=row)

    def query_values(self, database_id: int, query: QuerySpec) -> Dataset:
        self.calls.append(("query_values", query))
        dataset = self.datasets[query.source_table]
        rows = dataset.rows if query.limit is None else dataset.rows[: query.limit]
        return Dataset(rows=rows, cols=dataset.cols)

    def card_values(self, card: Card) -> Dataset:
        self.calls.append(("card_values", card.id))
        return self.card_datasets[card.id]


def numeric_col(name: str, source: ColumnSource | None = ColumnSource.FIELDS) -> ColumnMeta:
    return ColumnMeta(name=name, base_type=DataType.DOUBLE, source=source)


def text_col(name: str, source: ColumnSource | None = ColumnSource.FIELDS) -> ColumnMeta:
    return ColumnMeta(name=name, base_type=DataType.VARCHAR, source=source)


def make_table(table_id: int = 10, name: str = "orders") -> Table:
    return Table(id=table_id, name=name, database_id=DATABASE_ID)


def make_dataset(n_rows: int, offset: int = 0) -> Dataset:
    """Three columns: amount, quantity, status."""
    rows = [
        (float((i + offset) % 97) * 1.5, float(i % 7), "returned" if i % 4 == 0 else "shipped")
        for i in range(n_rows)
    ]
    return Dataset(
        rows=rows,
        cols=[numeric_col("amount"), numeric_col("quantity"), text_col("status")],
    )


@pytest.fixture
def orders_table() -> Table:
    return make_table()


@pytest.fixture
def fake_source(orders_table: Table) -> FakeDataSource:
    """Source with a 200-row `orders` table (id 10) and a 12000-row `events` table (id 20)."""
    return FakeDataSource(
        tables={10: orders_table, 20: make_table(20, "events")},
        datasets={10: make_dataset(200), 20: make_dataset(12_000)},
    )


@pytest.fixture
def segment(orders_table: Table) -> Segment:
    return Segment(
        id=3,
        name="Returned orders",
        table_id=orders_table.id,
        database_id=DATABASE_ID,
        definition=SegmentDefinition(source_table=orders_table.id, filter="status = 'returned'"),
    )


@pytest.fixture
def duckdb_conn():
    """Create an in-memory DuckDB connection with test tables."""
    conn = duckdb.connect(":memory:")

    conn.execute("""
        CREATE TABLE orders AS
        SELECT
            i AS id,
            ((i % 50) * 1.5)::DOUBLE AS amount,
            CASE WHEN i % 4 = 0 THEN 'returned' ELSE 'shipped' END AS status,
            DATE '2024-01-01' + (i % 90)::INTEGER AS day
        FROM generate_series(1, 200) AS t(i)
    """)
    # Same rows, different table
    conn.execute("CREATE TABLE orders_copy AS SELECT * FROM orders")
    # Shifted and skewed amounts
    conn.execute("""
        CREATE TABLE orders_2023 AS
        SELECT
            i AS id,
            (POWER(i % 50, 2) * 4.0)::DOUBLE AS amount,
            CASE WHEN i % 4 = 0 THEN 'returned' ELSE 'shipped' END AS status,
            DATE '2023-01-01' + (i % 90)::INTEGER AS day
        FROM generate_series(1, 200) AS t(i)
    """)
    conn.execute("""
        CREATE TABLE measurements AS
        SELECT
            i AS id,
            (i % 13)::DOUBLE / 3 AS reading,
            CASE WHEN i % 3 = 0 THEN 'north' WHEN i % 3 = 1 THEN 'south' ELSE 'east' END AS region
        FROM generate_series(1, 300) AS t(i)
    """)
    conn.execute("""
        CREATE TABLE big AS
        SELECT i AS id FROM generate_series(1, 12000) AS t(i)
    """)

    yield conn
    conn.close()


@pytest.fixture
def dataset_factory():
    return make_dataset
