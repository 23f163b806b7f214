"""
dogent CLI.

This package splits CLI commands into focused modules:
- main:   run
- config: show
"""

import typer

from dogent.cli.config import config_app
from dogent.cli.main import configure_logging, register_commands

app = typer.Typer(help="dogent - persistent remote-control agent")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    dogent - persistent remote-control agent.
    """
    configure_logging(verbose)


register_commands(app)

app.add_typer(config_app, name="config")

if __name__ == "__main__":
    app()
