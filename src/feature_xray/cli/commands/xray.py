"""X-ray commands - features of a table, column, segment or query."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from feature_xray.cli.common import (
    ComputationCostOption,
    DatabaseArg,
    JsonFlag,
    QueryCostOption,
    VerboseOption,
    build_options,
    console,
    features_table,
    open_xray,
    print_json,
    setup_logging,
)
from feature_xray.core.models import ExtractionResult, Model


def xray(
    database: DatabaseArg,
    table: Annotated[str, typer.Argument(help="Table to x-ray")],
    column: Annotated[str | None, typer.Argument(help="Only x-ray this column")] = None,
    filter: Annotated[
        str | None, typer.Option("--filter", help="SQL predicate; x-rays a segment")
    ] = None,
    query_cost: QueryCostOption = None,
    computation_cost: ComputationCostOption = None,
    json_output: JsonFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """X-ray a table, one of its columns, or a filtered segment.

    Examples:

        feature-xray xray shop.duckdb orders

        feature-xray xray shop.duckdb orders amount

        feature-xray xray shop.duckdb orders --filter "status = 'returned'"
    """
    setup_logging(verbose)
    if column and filter:
        console.print("[red]--filter applies to tables, not columns[/red]")
        raise typer.Exit(1)

    with open_xray(database) as (engine, source):
        model: Model
        if column:
            model = source.get_field(table, column)
        elif filter:
            model = source.get_segment(table, filter)
        else:
            model = source.get_table(table)
        options = build_options(engine, query_cost, computation_cost)
        result = engine.x_ray(engine.extract(model, options))

    _render(result, model.name, json_output)


def card(
    database: DatabaseArg,
    table: Annotated[str, typer.Argument(help="Table the query reads from")],
    sql: Annotated[str, typer.Argument(help="SQL of the saved query")],
    breakout: Annotated[
        list[str] | None, typer.Option("--breakout", "-b", help="Grouping column (repeatable)")
    ] = None,
    aggregation: Annotated[
        list[str] | None, typer.Option("--aggregation", "-a", help="Aggregate column (repeatable)")
    ] = None,
    granularity: Annotated[
        str | None, typer.Option("--granularity", help="Temporal breakout unit, e.g. month")
    ] = None,
    query_cost: QueryCostOption = None,
    computation_cost: ComputationCostOption = None,
    json_output: JsonFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """X-ray the result of a query.

    Examples:

        feature-xray card shop.duckdb orders \\
            "SELECT day, sum(amount) AS total FROM orders GROUP BY day" -b day -a total
    """
    setup_logging(verbose)
    with open_xray(database) as (engine, source):
        model = source.get_card(
            table,
            sql,
            breakout=breakout or (),
            aggregation=aggregation or (),
            granularity=granularity,
        )
        options = build_options(engine, query_cost, computation_cost)
        result = engine.x_ray(engine.extract(model, options))

    _render(result, model.name, json_output)


def _render(result: ExtractionResult, title: str, json_output: bool) -> None:
    if json_output:
        print_json(result)
        return

    console.print(features_table(title, result.features))
    if isinstance(result.constituents, dict):
        for name, constituent in result.constituents.items():
            console.print(features_table(name, constituent.features))
    if result.sample:
        console.print("[yellow]Features were computed on a sample of rows.[/yellow]")
