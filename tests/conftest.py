# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

# Add regbox to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from regbox.core.config import RegboxConfig, ToolConfig
from regbox.core.models import Hive, Location
from regbox.core.registry import RegistryClient


class FakeRunner:
    """
    Scripted stand-in for the REG tool.

    Each queued response is (exit_code, stdout text). Calls are recorded so
    tests can assert on the exact argument vectors.
    """

    def __init__(self, responses: Optional[List[Tuple[int, str]]] = None):
        self.responses = list(responses or [])
        self.calls: List[List[str]] = []
        self.chunk_size = 7

    def queue(self, exit_code: int = 0, stdout: str = "") -> "FakeRunner":
        self.responses.append((exit_code, stdout))
        return self

    async def run(self, argv: Sequence[str], sink: Callable[[bytes], None]) -> int:
        self.calls.append(list(argv))
        exit_code, stdout = self.responses.pop(0) if self.responses else (0, "")
        data = stdout.encode("utf-8")
        # Deliver in small pieces so line boundaries fall inside chunks
        for start in range(0, len(data), self.chunk_size):
            await asyncio.sleep(0)
            sink(data[start:start + self.chunk_size])
        return exit_code


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def client(fake_runner):
    config = RegboxConfig(tool=ToolConfig(encoding="utf-8"))
    return RegistryClient(runner=fake_runner, config=config)


@pytest.fixture
def location():
    return Location(hive=Hive.HKCU, key="\\Software\\Example")


@pytest.fixture(autouse=True)
def reset_regbox_logging():
    """Drop handlers installed by configure_logging during a test"""
    yield
    logger = logging.getLogger("regbox")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
