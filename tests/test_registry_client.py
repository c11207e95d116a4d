# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Tests for the RegistryClient operation facade

Tests:
- Command construction per operation
- Result parsing
- Exit code handling and error classification
- Existence checks
- Validation before any process is spawned
- Concurrent operations
"""

import asyncio
import locale
import logging
import sys

import pytest

from regbox.core.config import RegboxConfig, ToolConfig
from regbox.core.exceptions import ExternalToolError, InvalidArgumentError, ToolNotFoundError
from regbox.core.models import Hive, Location, ValueRecord, ValueType
from regbox.core.registry import RegistryClient, default_encoding
from regbox.core.runner import ProcessRunner, SubprocessRunner

LISTING = (
    "\r\n"
    "HKEY_CURRENT_USER\\Software\\Example\r\n"
    "    Sample    REG_SZ    hello world\r\n"
    "    Count    REG_DWORD    0x2a\r\n"
    "\r\n"
    "HKEY_CURRENT_USER\\Software\\Example\\Child\r\n"
)


def test_fake_runner_satisfies_protocol(fake_runner):
    assert isinstance(fake_runner, ProcessRunner)
    assert isinstance(SubprocessRunner(), ProcessRunner)


def test_default_runner_comes_from_config():
    config = RegboxConfig(tool=ToolConfig(executable="reg.exe", chunk_size=16, encoding="cp850"))
    client = RegistryClient(config=config)
    assert isinstance(client.runner, SubprocessRunner)
    assert client.runner.executable == "reg.exe"
    assert client.runner.chunk_size == 16
    assert client.encoding == "cp850"


@pytest.mark.asyncio
async def test_list_values(client, fake_runner, location):
    fake_runner.queue(0, LISTING)

    records = await client.list_values(location)

    assert fake_runner.calls == [["QUERY", "HKCU\\Software\\Example"]]
    assert records == [
        ValueRecord("", Hive.HKCU, "\\Software\\Example", "Sample", ValueType.REG_SZ, "hello world"),
        ValueRecord("", Hive.HKCU, "\\Software\\Example", "Count", ValueType.REG_DWORD, "0x2a"),
    ]


@pytest.mark.asyncio
async def test_list_values_empty(client, fake_runner, location):
    fake_runner.queue(0, "\r\nHKEY_CURRENT_USER\\Software\\Example\r\n\r\n")
    assert await client.list_values(location) == []


@pytest.mark.asyncio
async def test_list_subkeys(client, fake_runner, location):
    fake_runner.queue(0, LISTING)

    children = await client.list_subkeys(location)

    assert fake_runner.calls == [["QUERY", "HKCU\\Software\\Example"]]
    assert children == [Location(hive=Hive.HKCU, key="\\Software\\Example\\Child")]


@pytest.mark.asyncio
async def test_get_value(client, fake_runner, location):
    fake_runner.queue(
        0,
        "\r\nHKEY_CURRENT_USER\\Software\\Example\r\n    Sample    REG_SZ    hello\r\n\r\n",
    )

    record = await client.get_value(location, "Sample")

    assert fake_runner.calls == [["QUERY", "HKCU\\Software\\Example", "/v", "Sample"]]
    assert record.name == "Sample"
    assert record.type is ValueType.STRING
    assert record.value == "hello"


@pytest.mark.asyncio
async def test_get_value_not_found_is_none(client, fake_runner, location):
    fake_runner.queue(0, "\r\nHKEY_CURRENT_USER\\Software\\Example\r\n")
    assert await client.get_value(location, "Missing") is None


@pytest.mark.asyncio
async def test_get_value_failed_process_raises(client, fake_runner, location):
    fake_runner.queue(1, "")
    with pytest.raises(ExternalToolError) as exc_info:
        await client.get_value(location, "Missing")
    assert exc_info.value.exit_code == 1
    assert exc_info.value.argv == ["QUERY", "HKCU\\Software\\Example", "/v", "Missing"]


@pytest.mark.asyncio
async def test_set_value(client, fake_runner, location):
    fake_runner.queue(0, "The operation completed successfully.\r\n")

    result = await client.set_value(location, "Sample", ValueType.REG_SZ, "hello")

    assert result is None
    assert fake_runner.calls == [
        ["ADD", "HKCU\\Software\\Example", "/v", "Sample", "/t", "REG_SZ", "/d", "hello", "/f"]
    ]


@pytest.mark.asyncio
async def test_set_then_get_round_trip(client, fake_runner, location):
    fake_runner.queue(0, "The operation completed successfully.\r\n")
    fake_runner.queue(
        0,
        "\r\nHKEY_CURRENT_USER\\Software\\Example\r\n    Sample    REG_SZ    hello\r\n",
    )

    await client.set_value(location, "Sample", "REG_SZ", "hello")
    record = await client.get_value(location, "Sample")

    assert (record.name, record.type, record.value) == ("Sample", ValueType.REG_SZ, "hello")


@pytest.mark.asyncio
async def test_invalid_type_fails_before_spawning(client, fake_runner, location):
    with pytest.raises(InvalidArgumentError):
        await client.set_value(location, "Sample", "REG_STRING", "hello")
    assert fake_runner.calls == []


@pytest.mark.asyncio
async def test_invalid_name_fails_before_spawning(client, fake_runner, location):
    with pytest.raises(InvalidArgumentError):
        await client.get_value(location, "bad\nname")
    with pytest.raises(InvalidArgumentError):
        await client.value_exists(location, "bad\nname")
    assert fake_runner.calls == []


@pytest.mark.asyncio
async def test_remove_value(client, fake_runner, location):
    await client.remove_value(location, "Sample")
    await client.remove_value(location, "")
    assert fake_runner.calls == [
        ["DELETE", "HKCU\\Software\\Example", "/f", "/v", "Sample"],
        ["DELETE", "HKCU\\Software\\Example", "/f", "/ve"],
    ]


@pytest.mark.asyncio
async def test_remove_value_surfaces_tool_failure(client, fake_runner, location):
    fake_runner.queue(1, "")
    with pytest.raises(ExternalToolError):
        await client.remove_value(location, "Sample")


@pytest.mark.asyncio
async def test_erase_then_list_is_empty(client, fake_runner, location):
    fake_runner.queue(0, "The operation completed successfully.\r\n")
    fake_runner.queue(0, "\r\nHKEY_CURRENT_USER\\Software\\Example\r\n\r\n")

    await client.erase_key(location)
    assert await client.list_values(location) == []
    assert fake_runner.calls[0] == ["DELETE", "HKCU\\Software\\Example", "/f", "/va"]


@pytest.mark.asyncio
async def test_create_key_twice(client, fake_runner, location):
    await client.create_key(location)
    await client.create_key(location)
    assert fake_runner.calls == [["ADD", "HKCU\\Software\\Example"]] * 2


@pytest.mark.asyncio
async def test_delete_key(client, fake_runner, location):
    await client.delete_key(location)
    assert fake_runner.calls == [["DELETE", "HKCU\\Software\\Example", "/f"]]


@pytest.mark.asyncio
async def test_key_exists(client, fake_runner, location):
    fake_runner.queue(0, "\r\nHKEY_CURRENT_USER\\Software\\Example\r\n")
    fake_runner.queue(1, "")

    assert await client.key_exists(location) is True
    assert await client.key_exists(location) is False
    assert fake_runner.calls == [["QUERY", "HKCU\\Software\\Example"]] * 2


@pytest.mark.asyncio
async def test_key_exists_after_delete_is_false(client, fake_runner, location):
    fake_runner.queue(0, "The operation completed successfully.\r\n")
    fake_runner.queue(1, "")

    await client.delete_key(location)
    assert await client.key_exists(location) is False


@pytest.mark.asyncio
async def test_value_exists(client, fake_runner, location):
    fake_runner.queue(0, "HKEY_CURRENT_USER\\Software\\Example\n  Sample    REG_SZ    x\n")
    fake_runner.queue(1, "")
    fake_runner.queue(0, "HKEY_CURRENT_USER\\Software\\Example\n")

    assert await client.value_exists(location, "Sample") is True
    assert await client.value_exists(location, "Missing") is False
    assert await client.value_exists(location, "Empty") is False


@pytest.mark.asyncio
async def test_existence_checks_propagate_other_errors(location):
    class MissingTool:
        async def run(self, argv, sink):
            raise ToolNotFoundError("reg not found in PATH", executable="reg")

    client = RegistryClient(runner=MissingTool())
    with pytest.raises(ToolNotFoundError):
        await client.key_exists(location)
    with pytest.raises(ToolNotFoundError):
        await client.value_exists(location, "Sample")


@pytest.mark.asyncio
async def test_non_zero_exit_is_logged(client, fake_runner, location, caplog):
    fake_runner.queue(5, "")
    with caplog.at_level(logging.WARNING, logger="regbox.registry"):
        with pytest.raises(ExternalToolError) as exc_info:
            await client.create_key(location)

    assert exc_info.value.exit_code == 5
    assert "process exited with code 5" in caplog.text


@pytest.mark.asyncio
async def test_concurrent_operations_are_independent(client, fake_runner):
    first = Location(hive=Hive.HKCU, key="\\Software\\First")
    second = Location(hive=Hive.HKLM, key="\\Software\\Second")
    fake_runner.queue(0, "HKEY_CURRENT_USER\\Software\\First\n  A    REG_SZ    one two three\n")
    fake_runner.queue(0, "HKEY_LOCAL_MACHINE\\Software\\Second\n  B    REG_DWORD    0x2\n")

    a_records, b_records = await asyncio.gather(
        client.list_values(first), client.list_values(second)
    )

    assert [(r.key, r.name, r.value) for r in a_records] == [("\\Software\\First", "A", "one two three")]
    assert [(r.key, r.name, r.value) for r in b_records] == [("\\Software\\Second", "B", "0x2")]


@pytest.mark.asyncio
async def test_output_is_decoded_with_configured_encoding(location):
    class Cp850Runner:
        async def run(self, argv, sink):
            sink("HKEY_CURRENT_USER\\Software\\Example\r\n    Name    REG_SZ    caf\u00e9\r\n".encode("cp850"))
            return 0

    config = RegboxConfig(tool=ToolConfig(encoding="cp850"))
    client = RegistryClient(runner=Cp850Runner(), config=config)

    record = (await client.list_values(location))[0]
    assert record.value == "caf\u00e9"


def test_default_encoding_is_oem_on_windows(monkeypatch, fake_runner):
    monkeypatch.setattr(sys, "platform", "win32")

    assert default_encoding() == "oem"
    assert RegistryClient(runner=fake_runner).encoding == "oem"


def test_default_encoding_elsewhere_follows_locale(monkeypatch, fake_runner):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setattr(locale, "getpreferredencoding", lambda do_setlocale=True: "ISO-8859-1")

    assert RegistryClient(runner=fake_runner).encoding == "ISO-8859-1"


def test_configured_encoding_wins_on_windows(monkeypatch, fake_runner):
    monkeypatch.setattr(sys, "platform", "win32")
    config = RegboxConfig(tool=ToolConfig(encoding="cp850"))

    assert RegistryClient(runner=fake_runner, config=config).encoding == "cp850"


@pytest.mark.asyncio
async def test_negative_existence_checks_do_not_warn(client, fake_runner, location, caplog):
    fake_runner.queue(1, "")
    fake_runner.queue(1, "")

    with caplog.at_level(logging.DEBUG, logger="regbox.registry"):
        assert await client.key_exists(location) is False
        assert await client.value_exists(location, "Sample") is False

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert "process exited with code 1" in caplog.text
