"""Main CLI application entry point."""

from __future__ import annotations

import typer

from feature_xray.cli.commands import compare, xray

app = typer.Typer(
    name="feature-xray",
    help="Feature x-rays - summarise and compare tables, columns, segments and queries.",
    no_args_is_help=True,
)

# Register commands
app.command()(xray.xray)
app.command()(xray.card)
app.command()(compare.compare)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
