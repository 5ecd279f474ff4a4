"""External command execution.

The processing pipeline never spawns processes directly; it goes through a
`CommandExecutor` so tests can substitute a fake without a real pdftk.
"""

import logging
import subprocess
from typing import Optional, Protocol, Sequence

from starlette.concurrency import run_in_threadpool

from pdf_processor.models.domain import CommandResult

logger = logging.getLogger(__name__)


class CommandExecutor(Protocol):
    async def run(self, command: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        ...


def _decode(output: Optional[bytes]) -> str:
    if not output:
        return ""
    return output.decode("utf-8", errors="replace")


class SubprocessExecutor:
    """Runs commands with `subprocess.run` in Starlette's threadpool.

    Raises:
        OSError: if the executable cannot be started (e.g. not installed).
    """

    async def run(self, command: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        return await run_in_threadpool(self._run_blocking, list(command), timeout)

    @staticmethod
    def _run_blocking(command: list[str], timeout: Optional[float]) -> CommandResult:
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            # subprocess.run kills the child before re-raising
            logger.error("Command timed out after %ss: %s", timeout, command[0])
            return CommandResult(
                returncode=None,
                stdout=_decode(exc.stdout),
                stderr=_decode(exc.stderr),
                timed_out=True,
            )
        return CommandResult(
            returncode=completed.returncode,
            stdout=_decode(completed.stdout),
            stderr=_decode(completed.stderr),
        )
