"""
Top-level CLI commands: run.
"""

import asyncio
import os
import signal
from pathlib import Path
from typing import Optional

import typer

from dogent.config import SessionConfig
from dogent.errors import ConfigError
from dogent.session import SessionManager


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from dogent.logger import setup_logging

    log_level = "DEBUG" if verbose else os.getenv("DOGENT_LOG_LEVEL", "INFO")
    setup_logging(level=log_level, log_file=os.getenv("DOGENT_LOG_FILE"))


async def _run_agent(manager: SessionManager) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, manager.stop)
        except (NotImplementedError, RuntimeError):
            # No loop signal support on Windows; Ctrl+C arrives as KeyboardInterrupt
            pass
    await manager.run()


def register_commands(app: typer.Typer):
    @app.command()
    def run(
        url: Optional[str] = typer.Option(
            None, "--url", "-u", help="Control server WebSocket URL"
        ),
        token: Optional[str] = typer.Option(
            None, "--token", "-t", help="Authentication token"
        ),
        server_id: Optional[str] = typer.Option(
            None, "--server-id", "-s", help="Identifier reported to the server"
        ),
        env_file: Optional[Path] = typer.Option(
            None, "--env-file", help="Load DOGENT_* settings from this file"
        ),
        command_timeout: Optional[float] = typer.Option(
            None, "--command-timeout", help="Seconds a single command may run"
        ),
    ):
        """Connect to the control server and serve commands until stopped."""
        try:
            config = SessionConfig.from_env(
                env_file=env_file,
                server_url=url,
                token=token,
                server_id=server_id,
                command_timeout=command_timeout,
            )
            config.endpoint()
        except ConfigError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(code=1)

        if not config.token:
            typer.echo("⚠️  No token configured; the server will likely reject us.")

        typer.echo(f"🖥️  Starting agent '{config.server_id}'...")
        typer.echo(f"   Server: {config.server_url}")
        typer.echo("   Press Ctrl+C to stop.\n")

        manager = SessionManager(config)
        try:
            asyncio.run(_run_agent(manager))
        except ConfigError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            typer.echo("\n🛑 Agent stopped.")
