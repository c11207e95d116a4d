# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Registry identity and value records.

A Location names a key (optionally on a remote host) and a ValueRecord is one
named value read from such a key. Both are immutable and validated when they
are constructed.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from .exceptions import InvalidArgumentError

# Zero or more "\segment" parts; the empty string is the hive root
KEY_PATTERN = re.compile(r"(\\[a-zA-Z0-9_\s]+)*")


class Hive(str, Enum):
    """Top-level registry namespaces, valued by the short token the tool accepts"""

    LOCAL_MACHINE = "HKLM"
    CURRENT_USER = "HKCU"
    CLASSES_ROOT = "HKCR"
    USERS = "HKU"
    CURRENT_CONFIG = "HKCC"

    # Aliases spelled like the tool tokens
    HKLM = "HKLM"
    HKCU = "HKCU"
    HKCR = "HKCR"
    HKU = "HKU"
    HKCC = "HKCC"

    @property
    def long_name(self) -> str:
        """Long form the tool uses when it echoes paths back"""
        return HIVE_LONG_NAMES[self]

    @classmethod
    def parse(cls, value: Union["Hive", str]) -> "Hive":
        """Resolve a member, a short token (HKLM) or a long form (HKEY_LOCAL_MACHINE)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.upper()
            for hive in cls:
                if token == hive.value or token == hive.long_name:
                    return hive
        raise InvalidArgumentError("illegal hive specified.", field="hive", value=value)

    def __str__(self) -> str:
        return self.value


HIVE_LONG_NAMES: Dict[Hive, str] = {
    Hive.LOCAL_MACHINE: "HKEY_LOCAL_MACHINE",
    Hive.CURRENT_USER: "HKEY_CURRENT_USER",
    Hive.CLASSES_ROOT: "HKEY_CLASSES_ROOT",
    Hive.USERS: "HKEY_USERS",
    Hive.CURRENT_CONFIG: "HKEY_CURRENT_CONFIG",
}


class ValueType(str, Enum):
    """Registry value types, valued by the tool's type token"""

    STRING = "REG_SZ"
    MULTILINE_STRING = "REG_MULTI_SZ"
    EXPANDABLE_STRING = "REG_EXPAND_SZ"
    DOUBLE_WORD = "REG_DWORD"
    QUAD_WORD = "REG_QWORD"
    BINARY = "REG_BINARY"
    UNKNOWN = "REG_NONE"

    REG_SZ = "REG_SZ"
    REG_MULTI_SZ = "REG_MULTI_SZ"
    REG_EXPAND_SZ = "REG_EXPAND_SZ"
    REG_DWORD = "REG_DWORD"
    REG_QWORD = "REG_QWORD"
    REG_BINARY = "REG_BINARY"
    REG_NONE = "REG_NONE"

    @classmethod
    def parse(cls, value: Union["ValueType", str]) -> "ValueType":
        """Resolve a member or an exact type token (REG_SZ)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for value_type in cls:
                if value == value_type.value:
                    return value_type
        raise InvalidArgumentError("illegal type specified.", field="type", value=value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Location:
    """
    A registry key on the local machine or on a remote host.

    Keys are written with a leading backslash per segment, e.g.
    ``Location(hive=Hive.HKCU, key="\\Software\\Microsoft")``; an empty key is
    the hive root.
    """

    host: str = ""
    hive: Hive = Hive.LOCAL_MACHINE
    key: str = ""

    def __post_init__(self):
        if not isinstance(self.host, str) or "\\" in self.host:
            raise InvalidArgumentError("illegal host specified.", field="host", value=self.host)

        object.__setattr__(self, "hive", Hive.parse(self.hive))

        if not isinstance(self.key, str) or not KEY_PATTERN.fullmatch(self.key):
            raise InvalidArgumentError("illegal key specified.", field="key", value=self.key)

    @property
    def path(self) -> str:
        """Full path as passed to the tool, UNC-style when a host is set"""
        prefix = f"\\\\{self.host}\\" if self.host else ""
        return f"{prefix}{self.hive.value}{self.key}"

    @property
    def parent(self) -> "Location":
        """The enclosing key; the parent of a hive root is the root itself"""
        index = self.key.rfind("\\")
        return Location(
            host=self.host,
            hive=self.hive,
            key=self.key[:index] if index != -1 else "",
        )

    def child(self, name: str) -> "Location":
        """A direct subkey of this location"""
        return Location(host=self.host, hive=self.hive, key=f"{self.key}\\{name}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "hive": self.hive.value,
            "key": self.key,
            "path": self.path,
        }

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class ValueRecord:
    """One named value under a key; an empty name is the key's default value"""

    host: str
    hive: Hive
    key: str
    name: str
    type: ValueType
    value: str

    def __post_init__(self):
        object.__setattr__(self, "hive", Hive.parse(self.hive))
        object.__setattr__(self, "type", ValueType.parse(self.type))

    @property
    def location(self) -> Location:
        return Location(host=self.host, hive=self.hive, key=self.key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "hive": self.hive.value,
            "key": self.key,
            "name": self.name,
            "type": self.type.value,
            "value": self.value,
        }
