"""External tool invocation for connectors backed by command line programs."""

import asyncio
import shutil

from attrs import define


@define(frozen=True, slots=True)
class ProcessResult:
    """Exit status and decoded output of a finished process."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_process(*argv: str) -> ProcessResult:
    """Run a program without a shell and collect its output.

    Raises:
        FileNotFoundError: If the program is not installed
    """
    proc = await asyncio.create_subprocess_exec(
        *argv,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    return ProcessResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def binary_available(binary: str) -> bool:
    """Check whether a program can be found on PATH."""
    return shutil.which(binary) is not None
