# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Process runner boundary.

The registry core only needs "run this argument vector, stream stdout to me,
tell me the exit code". SubprocessRunner does that with asyncio; tests and
embedders can substitute anything implementing ProcessRunner.
"""

import asyncio
import logging
import shutil
from typing import Callable, Protocol, Sequence, runtime_checkable

from .exceptions import ToolLaunchError, ToolNotFoundError

logger = logging.getLogger("regbox.runner")

DEFAULT_EXECUTABLE = "reg"
DEFAULT_CHUNK_SIZE = 4096

StdoutSink = Callable[[bytes], None]


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs one external command to completion"""

    async def run(self, argv: Sequence[str], sink: StdoutSink) -> int:
        """
        Execute the tool with ``argv``.

        stdin is closed and stderr discarded. Every stdout chunk is handed to
        ``sink`` as it arrives; the coroutine returns the exit code once the
        process has exited and stdout is drained.
        """
        ...


class SubprocessRunner:
    """ProcessRunner backed by asyncio.create_subprocess_exec"""

    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.executable = executable
        self.chunk_size = chunk_size

    @classmethod
    def from_config(cls, config) -> "SubprocessRunner":
        """Build a runner from a RegboxConfig"""
        return cls(executable=config.tool.executable, chunk_size=config.tool.chunk_size)

    def is_available(self) -> bool:
        """Whether the executable can be found in PATH"""
        return shutil.which(self.executable) is not None

    async def run(self, argv: Sequence[str], sink: StdoutSink) -> int:
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"{self.executable} not found in PATH",
                executable=self.executable,
                cause=e,
            )
        except OSError as e:
            raise ToolLaunchError(
                f"{self.executable} could not be started: {e}",
                executable=self.executable,
                cause=e,
            )

        logger.debug(f"Started {self.executable} (pid {process.pid})")

        while True:
            chunk = await process.stdout.read(self.chunk_size)
            if not chunk:
                break
            sink(chunk)

        return await process.wait()

