"""
CLI subcommands for inspecting configuration.

Usage:
    dogent config show [--env-file PATH]
"""

import json
from pathlib import Path
from typing import Optional

import typer

from dogent.config import SessionConfig
from dogent.errors import ConfigError

config_app = typer.Typer(help="Inspect the agent configuration")


@config_app.command("show")
def config_show(
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help="Load DOGENT_* settings from this file"
    ),
):
    """Dump the resolved configuration with the token masked."""
    try:
        config = SessionConfig.from_env(env_file=env_file)
    except ConfigError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(code=1)

    typer.echo(json.dumps(config.redacted(), indent=2))
