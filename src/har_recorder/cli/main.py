"""Main CLI entry point for har-recorder.

Provides commands for:
- record: Record browser traffic to a HAR file (interactive by default)
- stats: Show network statistics for an existing HAR file
"""

from __future__ import annotations

import logging

try:
    import typer
except ImportError as e:
    raise ImportError("CLI dependencies not installed. Install with: pip install har-recorder[cli]") from e

from har_recorder.cli.record import record
from har_recorder.cli.stats import stats

app = typer.Typer(
    name="har-recorder",
    help="Record browser traffic to HAR files and summarise them.",
    no_args_is_help=True,
)

app.command(help="Record browser traffic to a HAR file")(record)
app.command()(stats)


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version flag was provided
    """
    if value:
        from har_recorder import __version__

        typer.echo(f"har-recorder {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging.",
    ),
) -> None:
    r"""Record browser traffic to HAR files and summarise them.

    \b
    Examples:
        har-recorder record
        har-recorder record example.com --browser firefox
        har-recorder stats hars/recording.har
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
