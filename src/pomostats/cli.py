"""Command line interface for pomostats.

This module defines the top-level Typer application and aggregates
commands from the ingestion, analysis and report modules.  Invoke
`python -m pomostats.cli --help` to see available sub-commands.
"""

import logging

import typer

from . import config
from . import ingest as ingest_cmd
from . import analyze as analyze_cmd
from . import report as report_cmd


app = typer.Typer(name="pomostats", help="Pomodoro statistics for Trello boards")

# register subcommands from other modules
app.add_typer(ingest_cmd.app, name="ingest", help="Inspect Trello board exports")
app.add_typer(analyze_cmd.app, name="analyze", help="Compute pomodoro statistics")
app.add_typer(report_cmd.app, name="report", help="Generate reports from statistics")


@app.callback()
def main(log_level: str = typer.Option(config.LOG_LEVEL, help="Logging level (DEBUG, INFO, WARNING, ...)")) -> None:
    """Configure logging for every sub-command."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
