"""Command executor - one external process per invocation, bounded by a timeout."""

import asyncio
import os
import signal
from dataclasses import dataclass, field
from pathlib import Path

from core.infrastructure.logging import get_logger

TIMEOUT_MESSAGE = "Command timed out after {seconds:g} seconds"
MISSING_EXECUTABLE_CODE = 127


@dataclass
class CommandResult:
    """Outcome of one process execution.

    ``output`` is stdout on success and stderr on failure; on timeout it is
    the fixed timeout message.
    """

    command: list[str]
    output: str
    success: bool
    return_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    pid: int | None = None
    labels: list[str] = field(default_factory=list)


class CommandExecutor:
    """Spawn external commands in the project directory.

    No shell is involved: the command is an executable name plus an argument
    list, and the child inherits the host environment unchanged. There are
    no retries. Each child leads its own process group so a timeout can
    take down everything it spawned.
    """

    def __init__(self, cwd: Path | str = ".", timeout_seconds: float = 60.0) -> None:
        self._cwd = Path(cwd)
        self._timeout = timeout_seconds
        self._logger = get_logger("orchestration.executor")

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    async def run(self, command: str, args: list[str] | None = None) -> CommandResult:
        """Run ``command`` with ``args`` and wait for it, at most ``timeout_seconds``.

        Args:
            command: Executable name or path
            args: Argument list

        Returns:
            CommandResult; never raises for process-level failures
        """
        argv = [command, *(args or [])]
        printable = " ".join(argv)
        self._logger.info(f"$ {printable} (cwd={self._cwd})")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=self._cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except FileNotFoundError as exc:
            self._logger.warning(f"Executable not found for: {printable}")
            return CommandResult(
                command=argv,
                output=str(exc),
                success=False,
                return_code=MISSING_EXECUTABLE_CODE,
                stderr=str(exc),
            )
        except OSError as exc:
            self._logger.warning(f"Could not start {printable}: {exc}")
            return CommandResult(
                command=argv,
                output=str(exc),
                success=False,
                return_code=exc.errno or 1,
                stderr=str(exc),
            )

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            message = TIMEOUT_MESSAGE.format(seconds=self._timeout)
            self._logger.warning(f"{message}: {printable}")
            return CommandResult(
                command=argv,
                output=message,
                success=False,
                return_code=process.returncode,
                timed_out=True,
                pid=process.pid,
            )

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")
        success = process.returncode == 0
        self._logger.info(f"{printable} exited with code {process.returncode}")
        return CommandResult(
            command=argv,
            output=stdout if success else stderr,
            success=success,
            return_code=process.returncode,
            stdout=stdout,
            stderr=stderr,
            pid=process.pid,
        )

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        # the group outlives the leader while any descendant still holds the pipes
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        await process.wait()


def combine(*labelled: tuple[str, CommandResult]) -> CommandResult:
    """Merge several results into one: labelled outputs, success flags ANDed."""
    return CommandResult(
        command=[part for _, result in labelled for part in result.command],
        output="\n".join(f"{label}: {result.output}" for label, result in labelled),
        success=all(result.success for _, result in labelled),
        timed_out=any(result.timed_out for _, result in labelled),
        labels=[label for label, _ in labelled],
    )
