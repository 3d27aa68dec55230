"""Usage analytics CLI."""

import typer

from usage_analytics.cli._console import console
from usage_analytics.cli.report import health, prompts, report, series

app = typer.Typer(
    name="usage-analytics",
    help="Daily usage series and period summaries for the prompt scoring API.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        from usage_analytics import __version__

        console.print(f"[bold]usage-analytics[/bold] [dim]{__version__}[/dim]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """Prompt scoring API usage analytics."""


app.command()(report)
app.command()(series)
app.command()(health)
app.command()(prompts)
