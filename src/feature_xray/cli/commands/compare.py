"""Compare command - rank what differs between two tables, columns or segments."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.table import Table as RichTable

from feature_xray.cli.common import (
    ComputationCostOption,
    DatabaseArg,
    JsonFlag,
    QueryCostOption,
    VerboseOption,
    build_options,
    console,
    open_xray,
    print_json,
    setup_logging,
)
from feature_xray.core.models import CompareResult, Model
from feature_xray.sources import DuckDBDataSource


def compare(
    database: DatabaseArg,
    left: Annotated[str, typer.Argument(help="First table")],
    right: Annotated[str, typer.Argument(help="Second table")],
    column: Annotated[
        str | None, typer.Option("--column", "-c", help="Compare this column of both tables")
    ] = None,
    filter_left: Annotated[
        str | None, typer.Option("--filter-left", help="SQL predicate on the first table")
    ] = None,
    filter_right: Annotated[
        str | None, typer.Option("--filter-right", help="SQL predicate on the second table")
    ] = None,
    query_cost: QueryCostOption = None,
    computation_cost: ComputationCostOption = None,
    json_output: JsonFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """Compare two tables, segments or same-named columns.

    Examples:

        feature-xray compare shop.duckdb orders orders_2023

        feature-xray compare shop.duckdb orders orders --filter-right "status = 'returned'"

        feature-xray compare shop.duckdb orders orders_2023 --column amount
    """
    setup_logging(verbose)
    with open_xray(database) as (engine, source):
        a = _model(source, left, column, filter_left)
        b = _model(source, right, column, filter_right)
        options = build_options(engine, query_cost, computation_cost)
        result = engine.x_ray(engine.compare(a, b, options))

    if json_output:
        print_json(result)
    else:
        _render(result, f"{a.name} vs {b.name}")


def _model(source: DuckDBDataSource, table: str, column: str | None, filter: str | None) -> Model:
    if column:
        return source.get_field(table, column)
    if filter:
        return source.get_segment(table, filter)
    return source.get_table(table)


def _render(result: CompareResult, title: str) -> None:
    summary = RichTable(title=title, show_header=True, header_style="bold")
    if result.grouped:
        summary.add_column("Column")
        summary.add_column("Distance", justify="right")
        summary.add_column("Significant")
        for field, comparison in result.comparison.items():  # type: ignore[union-attr]
            summary.add_row(field, str(comparison.distance), "yes" if comparison.significant else "")
    else:
        summary.add_column("Distance", justify="right")
        summary.add_column("Significant")
        summary.add_row(
            str(result.comparison.distance),  # type: ignore[union-attr]
            "yes" if result.significant else "",
        )
    console.print(summary)

    contributors = RichTable(title="Top contributors", show_header=True, header_style="bold")
    if result.grouped:
        contributors.add_column("Column")
    contributors.add_column("Feature")
    contributors.add_column("Score", justify="right")
    for entry in result.top_contributors:
        cells = [entry.field or ""] if result.grouped else []
        contributors.add_row(*cells, entry.feature, str(entry.score))
    console.print(contributors)

    verdict = "differ significantly" if result.significant else "do not differ significantly"
    console.print(f"The two sides {verdict}.")
    if result.sample:
        console.print("[yellow]At least one side was computed on a sample of rows.[/yellow]")
