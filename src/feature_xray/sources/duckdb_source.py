"""DuckDB-backed data source.

Tables are identified by their DuckDB table oid, columns by their index and
the database by its oid. Every query runs on its own cursor, so one source
can serve concurrent extractions.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import duckdb

from feature_xray.core.exceptions import UnknownModelError
from feature_xray.core.logging import get_logger
from feature_xray.core.models import (
    Card,
    CardQuery,
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

logger = get_logger(__name__)

_TYPE_MAP: dict[str, DataType] = {
    "TINYINT": DataType.INTEGER,
    "SMALLINT": DataType.INTEGER,
    "INTEGER": DataType.INTEGER,
    "UTINYINT": DataType.INTEGER,
    "USMALLINT": DataType.INTEGER,
    "UINTEGER": DataType.BIGINT,
    "BIGINT": DataType.BIGINT,
    "UBIGINT": DataType.BIGINT,
    "HUGEINT": DataType.BIGINT,
    "UHUGEINT": DataType.BIGINT,
    "FLOAT": DataType.DOUBLE,
    "REAL": DataType.DOUBLE,
    "DOUBLE": DataType.DOUBLE,
    "DECIMAL": DataType.DECIMAL,
    "BOOLEAN": DataType.BOOLEAN,
    "DATE": DataType.DATE,
    "TIMESTAMP": DataType.TIMESTAMP,
    "TIMESTAMP_S": DataType.TIMESTAMP,
    "TIMESTAMP_MS": DataType.TIMESTAMP,
    "TIMESTAMP_NS": DataType.TIMESTAMP,
    "TIMESTAMP WITH TIME ZONE": DataType.TIMESTAMPTZ,
    "TIME": DataType.TIME,
    "INTERVAL": DataType.INTERVAL,
    "JSON": DataType.JSON,
    "BLOB": DataType.BLOB,
}


def to_data_type(duckdb_type: str) -> DataType:
    """Map a DuckDB type name (e.g. "DECIMAL(18,3)") to a DataType."""
    base = duckdb_type.upper().split("(")[0].strip()
    return _TYPE_MAP.get(base, DataType.VARCHAR)


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class DuckDBDataSource:
    """Data source reading tables and query results from a DuckDB connection."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        self.conn = conn

    @contextmanager
    def _cursor(self) -> Iterator[duckdb.DuckDBPyConnection]:
        cursor = self.conn.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    # === Catalog ===

    @property
    def database_id(self) -> int:
        with self._cursor() as cur:
            row = cur.execute(
                "SELECT database_oid FROM duckdb_databases() "
                "WHERE database_name = current_database()"
            ).fetchone()
        assert row is not None
        return int(row[0])

    def table(self, table_id: int) -> Table:
        """Resolve a table oid."""
        with self._cursor() as cur:
            row = cur.execute(
                "SELECT table_oid, table_name, database_oid, schema_name "
                "FROM duckdb_tables() WHERE table_oid = ?",
                [table_id],
            ).fetchone()
        if row is None:
            raise UnknownModelError("table", table_id)
        return Table(id=row[0], name=row[1], database_id=row[2], schema_name=row[3])

    def get_table(self, name: str, schema_name: str = "main") -> Table:
        """Look up a table of the current database by name."""
        with self._cursor() as cur:
            row = cur.execute(
                "SELECT table_oid, table_name, database_oid, schema_name FROM duckdb_tables() "
                "WHERE database_name = current_database() AND schema_name = ? AND table_name = ?",
                [schema_name, name],
            ).fetchone()
        if row is None:
            raise UnknownModelError("table", f"{schema_name}.{name}")
        return Table(id=row[0], name=row[1], database_id=row[2], schema_name=row[3])

    def get_field(self, table_name: str, column_name: str, schema_name: str = "main") -> Field:
        """Look up a column of a table by name."""
        table = self.get_table(table_name, schema_name)
        with self._cursor() as cur:
            row = cur.execute(
                "SELECT column_index FROM duckdb_columns() "
                "WHERE table_oid = ? AND column_name = ?",
                [table.id, column_name],
            ).fetchone()
        if row is None:
            raise UnknownModelError("column", f"{table.name}.{column_name}")
        return Field(id=row[0], name=column_name, table_id=table.id)

    def get_segment(
        self,
        table_name: str,
        filter: str,
        *,
        name: str | None = None,
        segment_id: int = 0,
        schema_name: str = "main",
    ) -> Segment:
        """Build a segment restricting a table by an SQL predicate."""
        table = self.get_table(table_name, schema_name)
        return Segment(
            id=segment_id,
            name=name or f"{table.name} where {filter}",
            table_id=table.id,
            database_id=table.database_id,
            definition=SegmentDefinition(source_table=table.id, filter=filter),
        )

    def get_card(
        self,
        table_name: str,
        sql: str,
        *,
        breakout: Sequence[str] = (),
        aggregation: Sequence[str] = (),
        granularity: str | None = None,
        name: str | None = None,
        card_id: int = 0,
        schema_name: str = "main",
    ) -> Card:
        """Build a card over `sql`, owned by `table_name`."""
        table = self.get_table(table_name, schema_name)
        return Card(
            id=card_id,
            name=name or f"Query on {table.name}",
            table_id=table.id,
            database_id=table.database_id,
            dataset_query=CardQuery(
                sql=sql,
                breakout=tuple(breakout),
                aggregation=tuple(aggregation),
                granularity=granularity,
            ),
        )

    # === Values ===

    def field_values(self, field: Field, query_opts: Mapping[str, Any]) -> FieldValues:
        table = self.table(field.table_id)
        sql = f"SELECT {quote_identifier(field.name)} FROM {self._qualified(table)}"
        sql += _limit_clause(query_opts.get("limit"))
        dataset = self._fetch(sql, ColumnSource.FIELDS)
        return FieldValues(field=dataset.cols[0], row=[row[0] for row in dataset.rows])

    def query_values(self, database_id: int, query: QuerySpec) -> Dataset:
        self._check_database(database_id)
        table = self.table(query.source_table)
        sql = f"SELECT * FROM {self._qualified(table)}"
        if query.filter:
            sql += f" WHERE {query.filter}"
        sql += _limit_clause(query.limit)
        return self._fetch(sql, ColumnSource.FIELDS)

    def card_values(self, card: Card) -> Dataset:
        """Run the card's query without a row limit and tag column roles."""
        self._check_database(card.database_id)
        query = card.dataset_query
        dataset = self._fetch(query.sql, ColumnSource.NATIVE)
        cols = [
            col.model_copy(update={"source": _card_column_source(col.name, query)})
            for col in dataset.cols
        ]
        return Dataset(rows=dataset.rows, cols=cols)

    def _fetch(self, sql: str, source: ColumnSource) -> Dataset:
        logger.debug("query_started", sql=sql)
        with self._cursor() as cur:
            relation = cur.sql(sql)
            if relation is None:
                raise ValueError(f"Statement returned no result set: {sql}")
            cols = [
                ColumnMeta(name=name, base_type=to_data_type(str(dtype)), source=source)
                for name, dtype in zip(relation.columns, relation.types, strict=True)
            ]
            rows = relation.fetchall()
        logger.debug("query_finished", rows=len(rows), columns=len(cols))
        return Dataset(rows=rows, cols=cols)

    def _check_database(self, database_id: int) -> None:
        if database_id != self.database_id:
            raise UnknownModelError("database", database_id)

    @staticmethod
    def _qualified(table: Table) -> str:
        if table.schema_name:
            return f"{quote_identifier(table.schema_name)}.{quote_identifier(table.name)}"
        return quote_identifier(table.name)


def _limit_clause(limit: int | None) -> str:
    return f" LIMIT {int(limit)}" if limit is not None else ""


def _card_column_source(name: str, query: CardQuery) -> ColumnSource:
    if name in query.breakout:
        return ColumnSource.BREAKOUT
    if name in query.aggregation:
        return ColumnSource.AGGREGATION
    return ColumnSource.NATIVE
