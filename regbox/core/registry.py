# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Asynchronous registry operations on top of the REG command-line tool.

Every operation validates its arguments, builds an argument vector, runs the
tool once and interprets the buffered stdout after the process has exited.
Operations share no state, so any number of them may run concurrently.

Example:
    client = RegistryClient()
    run_key = Location(hive=Hive.HKCU, key="\\Software\\Microsoft\\Windows\\CurrentVersion\\Run")
    for item in await client.list_values(run_key):
        print(item.name, item.type, item.value)
"""

import locale
import logging
import sys
from typing import List, Optional, Sequence, Union

from . import parser
from .commands import RegCommandBuilder
from .exceptions import ExternalToolError
from .models import Location, ValueRecord, ValueType
from .runner import ProcessRunner, SubprocessRunner

logger = logging.getLogger("regbox.registry")


def default_encoding() -> str:
    """Encoding the tool writes redirected output in"""
    # reg.exe writes the OEM code page, not the ANSI one the locale reports
    if sys.platform == "win32":
        return "oem"
    return locale.getpreferredencoding(False)


class RegistryClient:
    """Facade over the registry tool: list, get, set, remove, erase, create, delete"""

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        config=None,
        builder: Optional[RegCommandBuilder] = None,
    ):
        if runner is None:
            runner = (
                SubprocessRunner.from_config(config)
                if config is not None
                else SubprocessRunner()
            )
        self.runner = runner
        self.builder = builder or RegCommandBuilder()
        self.encoding = (
            config.tool.encoding if config is not None else None
        ) or default_encoding()

    async def _run(self, argv: Sequence[str], failure_level: int = logging.WARNING) -> str:
        """Run the tool and return its decoded stdout; non-zero exit raises"""
        chunks: List[bytes] = []
        logger.debug(f"Running: {' '.join(argv)}")

        exit_code = await self.runner.run(argv, chunks.append)
        output = b"".join(chunks).decode(self.encoding, errors="replace")

        if exit_code != 0:
            logger.log(failure_level, f"process exited with code {exit_code}")
            raise ExternalToolError(
                f"process exited with code {exit_code}",
                exit_code=exit_code,
                argv=argv,
            )

        logger.debug(output)
        return output

    # ========== Queries ==========

    async def list_values(self, location: Location) -> List[ValueRecord]:
        """All values of a key, in the order the tool reports them"""
        output = await self._run(self.builder.list_values(location))
        return parser.parse_values(output, location)

    async def list_subkeys(self, location: Location) -> List[Location]:
        """Direct subkeys of a key"""
        output = await self._run(self.builder.list_subkeys(location))
        return parser.parse_subkeys(output, location)

    async def get_value(self, location: Location, name: str) -> Optional[ValueRecord]:
        """
        A single named value.

        Returns None when the tool succeeds but reports no matching value.
        A failed process still raises ExternalToolError.
        """
        output = await self._run(self.builder.get_value(location, name))
        return parser.parse_value(output, location)

    # ========== Mutations ==========

    async def set_value(
        self,
        location: Location,
        name: str,
        value_type: Union[ValueType, str],
        value: str,
    ) -> None:
        """Write a value, overwriting any existing value of the same name"""
        await self._run(self.builder.set_value(location, name, value_type, value))

    async def remove_value(self, location: Location, name: str) -> None:
        await self._run(self.builder.remove_value(location, name))

    async def erase_key(self, location: Location) -> None:
        """Delete all values of a key, keeping the key"""
        await self._run(self.builder.erase_key(location))

    async def create_key(self, location: Location) -> None:
        await self._run(self.builder.create_key(location))

    async def delete_key(self, location: Location) -> None:
        """Delete a key and everything below it. Irreversible."""
        await self._run(self.builder.delete_key(location))

    # ========== Existence checks ==========

    async def key_exists(self, location: Location) -> bool:
        try:
            await self._run(self.builder.list_values(location), failure_level=logging.DEBUG)
        except ExternalToolError:
            return False
        return True

    async def value_exists(self, location: Location, name: str) -> bool:
        try:
            output = await self._run(
                self.builder.get_value(location, name), failure_level=logging.DEBUG
            )
        except ExternalToolError:
            return False
        return parser.parse_value(output, location) is not None
