"""Data sources."""

from feature_xray.sources.duckdb_source import DuckDBDataSource, quote_identifier, to_data_type

__all__ = [
    "DuckDBDataSource",
    "quote_identifier",
    "to_data_type",
]
