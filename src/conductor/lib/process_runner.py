"""
process_runner.py
- Runs external executables without blocking the event loop.
- Captures stdout/stderr as text; a non-zero exit is reported, not raised.
- Spawn failures (missing binary, bad working directory) raise ProcessIoError.
"""

import asyncio
import shlex
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from loguru import logger

from conductor.core.errors import ProcessIoError


@dataclass(frozen=True)
class ProcessOutcome:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    async def run(
        self, executable: str, arguments: Sequence[str], work_directory: Optional[str] = None
    ) -> ProcessOutcome: ...


def format_command(executable, arguments):
    return shlex.join([executable, *arguments])


class SubprocessRunner:
    """Spawns a real OS process per call and waits for it to exit. No timeout is applied."""

    async def run(self, executable, arguments, work_directory=None):
        logger.debug(f"[process] Running `{format_command(executable, arguments)}` in {work_directory or '.'}")
        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *arguments,
                cwd=str(work_directory) if work_directory else None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout_bytes, stderr_bytes = await proc.communicate()
        except OSError as e:
            raise ProcessIoError(e) from e

        return ProcessOutcome(
            returncode=proc.returncode,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
        )


class DryRunRunner:
    """Logs the command that would run and reports success."""

    async def run(self, executable, arguments, work_directory=None):
        logger.info(f"[dry-run] Would run: {format_command(executable, arguments)} (cwd={work_directory or '.'})")
        return ProcessOutcome(returncode=0)
