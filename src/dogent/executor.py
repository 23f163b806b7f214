"""
Command execution facility.

The protocol handler only depends on the CommandExecutor protocol; the
default ShellExecutor runs commands through the platform shell with stderr
folded into stdout and a hard timeout.
"""

import asyncio
from typing import Protocol

from dogent.config import COMMAND_TIMEOUT
from dogent.errors import CommandExecutionError
from dogent.logger import get_logger

logger = get_logger(__name__)


class CommandExecutor(Protocol):
    async def execute(self, command: str) -> str:
        """Run ``command`` and return its captured output.

        Raises:
            CommandExecutionError: If the command cannot be run or fails.
        """
        ...


class ShellExecutor:
    """Runs commands via ``asyncio.create_subprocess_shell``.

    Args:
        timeout: Seconds before the process is killed.
    """

    def __init__(self, timeout: float = COMMAND_TIMEOUT):
        self.timeout = timeout

    async def execute(self, command: str) -> str:
        if not command.strip():
            raise CommandExecutionError("empty command")

        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise CommandExecutionError(f"failed to start command: {e}") from e

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await _kill(proc)
            raise CommandExecutionError(f"command timed out after {self.timeout:g}s")
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        output = stdout.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            logger.debug(f"Command exited with status {proc.returncode}: {command}")
            raise CommandExecutionError(
                f"exit status {proc.returncode}", output=output
            )
        return output


async def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await proc.wait()
