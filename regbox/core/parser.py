# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Parsers for REG QUERY output.

A typical response looks like::

    HKEY_CURRENT_USER\\Software\\Example
        Sample    REG_SZ    hello world
        Count    REG_DWORD    0x2a

    HKEY_CURRENT_USER\\Software\\Example\\Child

The first non-empty line echoes the queried key and is never data. Lines that
do not fit the expected shape are skipped: the tool's output format is not
versioned, so anything unrecognised is treated as noise rather than an error.
"""

import logging
import re
from typing import List, Optional

from .exceptions import InvalidArgumentError
from .models import Location, ValueRecord, ValueType

logger = logging.getLogger("regbox.parser")

DEFAULT_VALUE_NAME = "(Default)"
VALUE_NOT_SET = "(value not set)"

_TYPE_TOKENS = "|".join(re.escape(value_type.value) for value_type in ValueType)
_HIVE_LONG_NAMES = (
    "HKEY_LOCAL_MACHINE|HKEY_CURRENT_USER|HKEY_CLASSES_ROOT|HKEY_USERS|HKEY_CURRENT_CONFIG"
)

# reg.exe separates columns with a run of spaces, so a type token inside a
# name is not mistaken for the type column
COLUMN_ITEM_PATTERN = re.compile(
    r"^(?P<name>[a-zA-Z0-9_\s\\-]+?|\(Default\))\s{2,}"
    rf"(?P<type>{_TYPE_TOKENS})\s{{2,}}"
    r"(?P<value>\S.*)$"
)

# <name> <type> <whitespace>+ <value>; the name ends at the first type token
ITEM_PATTERN = re.compile(
    r"^(?P<name>[a-zA-Z0-9_\s\\-]+?|\(Default\)\s*?)\s"
    rf"(?P<type>{_TYPE_TOKENS})\s+"
    r"(?P<value>\S.*)$"
)

# Key paths as echoed by the tool, optionally prefixed with \\host\
PATH_PATTERN = re.compile(
    rf"^(?:\\\\[^\\]+\\)?(?P<hive>{_HIVE_LONG_NAMES})(?P<key>.*)$"
)


def split_lines(text: str) -> List[str]:
    """Trimmed, non-empty lines of ``text``"""
    lines = (line.strip() for line in text.splitlines())
    return [line for line in lines if line]


def data_lines(text: str) -> List[str]:
    """Lines after the echoed key path"""
    return split_lines(text)[1:]


def parse_value_line(line: str, location: Location) -> Optional[ValueRecord]:
    """Parse one value line, or return None when it is not one"""
    match = COLUMN_ITEM_PATTERN.match(line) or ITEM_PATTERN.match(line)
    if not match:
        return None

    name = match.group("name").strip()
    value = match.group("value")
    if name == DEFAULT_VALUE_NAME:
        if value == VALUE_NOT_SET:
            return None
        name = ""

    return ValueRecord(
        host=location.host,
        hive=location.hive,
        key=location.key,
        name=name,
        type=ValueType.parse(match.group("type")),
        value=value,
    )


def parse_values(text: str, location: Location) -> List[ValueRecord]:
    """All values in a key listing, in the order the tool printed them"""
    records = []
    for line in data_lines(text):
        record = parse_value_line(line, location)
        if record is not None:
            records.append(record)
    return records


def parse_value(text: str, location: Location) -> Optional[ValueRecord]:
    """First value in a single-value query, or None"""
    for line in data_lines(text):
        record = parse_value_line(line, location)
        if record is not None:
            return record
    return None


def parse_subkeys(text: str, location: Location) -> List[Location]:
    """Direct children listed in a key query, excluding the queried key itself"""
    own_key = location.key.casefold()
    children = []

    for line in data_lines(text):
        match = PATH_PATTERN.match(line)
        if not match:
            continue

        key = match.group("key")
        if not key or key.casefold() == own_key:
            continue

        try:
            children.append(Location(host=location.host, hive=location.hive, key=key))
        except InvalidArgumentError:
            logger.debug(f"Skipping subkey outside the key grammar: {line}")

    return children
