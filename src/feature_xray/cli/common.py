"""Shared CLI utilities and constants."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import duckdb
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table as RichTable

from feature_xray.core.config import get_settings
from feature_xray.core.logging import configure_logging
from feature_xray.core.models import (
    CompareResult,
    ComputationCost,
    ExtractionResult,
    MaxCost,
    Options,
    QueryCost,
)
from feature_xray.engine import XRay
from feature_xray.sources import DuckDBDataSource

# Load .env file from current directory
load_dotenv()

# Shared console instance
console = Console()

# Common type aliases for typer options
DatabaseArg = Annotated[
    Path,
    typer.Argument(
        help="DuckDB database file",
        exists=True,
        dir_okay=False,
        file_okay=True,
        resolve_path=True,
    ),
]

JsonFlag = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output as JSON for scripting",
    ),
]

QueryCostOption = Annotated[
    QueryCost | None,
    typer.Option(
        "--query-cost",
        help="Query budget; cache or sample limit rows to a sample",
    ),
]

ComputationCostOption = Annotated[
    ComputationCost | None,
    typer.Option(
        "--computation-cost",
        help="Computation budget; linear skips percentiles",
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v=INFO, -vv=DEBUG)",
    ),
]


def setup_logging(verbosity: int = 0, log_format: str | None = None) -> None:
    """Configure structured logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
        log_format: "console" for development, "json" for production/cloud
            (default from settings)
    """
    if verbosity >= 2:
        level = "DEBUG"
    elif verbosity >= 1:
        level = "INFO"
    else:
        level = "WARNING"

    log_format = log_format or get_settings().log_format

    configure_logging(
        log_level=level,
        log_format=log_format,
        show_timestamps=verbosity >= 1,
        color=log_format == "console",
    )


@contextmanager
def open_xray(database: Path) -> Iterator[tuple[XRay, DuckDBDataSource]]:
    """Open a DuckDB file read-only and wire an XRay over it."""
    conn = duckdb.connect(str(database), read_only=True)
    try:
        source = DuckDBDataSource(conn)
        yield XRay(source), source
    finally:
        conn.close()


def build_options(
    xray: XRay,
    query_cost: QueryCost | None,
    computation_cost: ComputationCost | None,
) -> Options:
    """Options from CLI flags, defaulting to the configured budget."""
    defaults = xray.default_options().max_cost
    return Options(
        max_cost=MaxCost(
            computation=computation_cost or defaults.computation,
            query=query_cost or defaults.query,
        )
    )


def print_json(result: ExtractionResult | CompareResult) -> None:
    console.print_json(json.dumps(result.to_dict(), default=str))


def features_table(title: str, features: Mapping[str, Any]) -> RichTable:
    """Render a presented feature map as a two-column table."""
    table = RichTable(title=title, show_header=True, header_style="bold")
    table.add_column("Feature")
    table.add_column("Value")
    for key, value in features.items():
        label = key
        if isinstance(value, Mapping) and "value" in value and "label" in value:
            label, value = value["label"], value["value"]
        table.add_row(str(label), _short(value))
    return table


def _short(value: Any, width: int = 80) -> str:
    text = json.dumps(value, default=str) if isinstance(value, Mapping | list) else str(value)
    return text if len(text) <= width else text[: width - 3] + "..."
